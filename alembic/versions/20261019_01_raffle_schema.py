"""raffle schema

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261019_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES_IN_DROP_ORDER = (
    "credit_history",
    "titles",
    "buyed_titles",
    "winners",
    "draw_items",
    "fisical_titles",
    "editions",
    "base_titles",
    "users",
)


def _table_exists(inspector: sa.Inspector, table_name: str) -> bool:
    return table_name in inspector.get_table_names()


def _timestamps(updated: bool = False) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()))
    return columns


def _ensure_catalog_tables(inspector: sa.Inspector) -> None:
    if not _table_exists(inspector, "users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
            *_timestamps(),
        )
        op.create_index("ix_users_id", "users", ["id"], unique=False)
        op.create_index("ix_users_email", "users", ["email"], unique=True)

    if not _table_exists(inspector, "base_titles"):
        op.create_table(
            "base_titles",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=64), nullable=False),
            sa.Column("dozens", sa.JSON(), nullable=False),
            sa.Column("bar_code", sa.String(length=128), nullable=False),
            sa.Column("qr_code", sa.String(length=512), nullable=False),
            sa.Column("chances", sa.Integer(), nullable=False, server_default=sa.text("1")),
            *_timestamps(),
        )
        op.create_index("ix_base_titles_id", "base_titles", ["id"], unique=False)
        op.create_index("ix_base_titles_name", "base_titles", ["name"], unique=True)


def _ensure_edition_tables(inspector: sa.Inspector) -> None:
    if not _table_exists(inspector, "editions"):
        op.create_table(
            "editions",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("draw_date", sa.DateTime(timezone=True), nullable=False),
            sa.Column("order", sa.Integer(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="OPEN"),
            sa.Column("image_key", sa.String(length=512), nullable=True),
            sa.Column("image_url", sa.String(length=1024), nullable=True),
            *_timestamps(updated=True),
        )
        op.create_index("ix_editions_id", "editions", ["id"], unique=False)
        op.create_index("ix_editions_name", "editions", ["name"], unique=True)

    if not _table_exists(inspector, "fisical_titles"):
        op.create_table(
            "fisical_titles",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("edition_id", sa.Integer(), sa.ForeignKey("editions.id"), nullable=False),
            sa.Column("name", sa.String(length=64), nullable=False),
            sa.Column("value", sa.Integer(), nullable=False),
            sa.Column("seller_name", sa.String(length=255), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_fisical_titles_id", "fisical_titles", ["id"], unique=False)
        op.create_index("ix_fisical_titles_edition_id", "fisical_titles", ["edition_id"], unique=False)

    if not _table_exists(inspector, "draw_items"):
        op.create_table(
            "draw_items",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("edition_id", sa.Integer(), sa.ForeignKey("editions.id"), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(length=1024), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_draw_items_id", "draw_items", ["id"], unique=False)
        op.create_index("ix_draw_items_edition_id", "draw_items", ["edition_id"], unique=False)

    if not _table_exists(inspector, "winners"):
        op.create_table(
            "winners",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("edition_id", sa.Integer(), sa.ForeignKey("editions.id"), nullable=False),
            sa.Column("draw_item_id", sa.Integer(), sa.ForeignKey("draw_items.id"), nullable=True),
            sa.Column("title_name", sa.String(length=64), nullable=False),
            sa.Column("winner_name", sa.String(length=255), nullable=False),
            *_timestamps(),
        )
        op.create_index("ix_winners_id", "winners", ["id"], unique=False)
        op.create_index("ix_winners_edition_id", "winners", ["edition_id"], unique=False)


def _ensure_sales_tables(inspector: sa.Inspector) -> None:
    if not _table_exists(inspector, "buyed_titles"):
        op.create_table(
            "buyed_titles",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("edition_id", sa.Integer(), nullable=True),
            sa.Column("payment_form", sa.String(length=32), nullable=False),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="PENDING"),
            sa.Column("total_value", sa.Integer(), nullable=False),
            *_timestamps(),
        )
        op.create_index("ix_buyed_titles_id", "buyed_titles", ["id"], unique=False)
        op.create_index("ix_buyed_titles_user_id", "buyed_titles", ["user_id"], unique=False)
        op.create_index("ix_buyed_titles_edition_id", "buyed_titles", ["edition_id"], unique=False)

    if not _table_exists(inspector, "titles"):
        # edition_id has no FK: unsold titles keep the id of a removed edition.
        op.create_table(
            "titles",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("edition_id", sa.Integer(), nullable=True),
            sa.Column("name", sa.String(length=64), nullable=False),
            sa.Column("dozens", sa.JSON(), nullable=False),
            sa.Column("bar_code", sa.String(length=128), nullable=False),
            sa.Column("qr_code", sa.String(length=512), nullable=False),
            sa.Column("chances", sa.Integer(), nullable=False, server_default=sa.text("1")),
            sa.Column("value", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("buyed_title_id", sa.Integer(), sa.ForeignKey("buyed_titles.id"), nullable=True),
            sa.Column("payment_id", sa.String(length=255), nullable=True),
            sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(updated=True),
        )
        op.create_index("ix_titles_id", "titles", ["id"], unique=False)
        op.create_index("ix_titles_edition_id", "titles", ["edition_id"], unique=False)
        op.create_index("ix_titles_name", "titles", ["name"], unique=False)
        op.create_index("ix_titles_user_id", "titles", ["user_id"], unique=False)
        op.create_index("ix_titles_buyed_title_id", "titles", ["buyed_title_id"], unique=False)

    if not _table_exists(inspector, "credit_history"):
        op.create_table(
            "credit_history",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=True),
            sa.Column("description", sa.String(length=1024), nullable=False),
            sa.Column("value", sa.Numeric(12, 2), nullable=False),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="PENDING"),
            sa.Column("deposit_type", sa.String(length=32), nullable=False, server_default="PIX"),
            *_timestamps(updated=True),
        )
        op.create_index("ix_credit_history_id", "credit_history", ["id"], unique=False)
        op.create_index("ix_credit_history_user_id", "credit_history", ["user_id"], unique=False)


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    _ensure_catalog_tables(inspector)
    inspector = sa.inspect(bind)
    _ensure_edition_tables(inspector)
    inspector = sa.inspect(bind)
    _ensure_sales_tables(inspector)


def downgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    for table_name in TABLES_IN_DROP_ORDER:
        if _table_exists(inspector, table_name):
            op.drop_table(table_name)
