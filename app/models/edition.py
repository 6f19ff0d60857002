from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.database import Base


class Edition(Base):
    __tablename__ = "editions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, index=True, nullable=False)
    draw_date = Column(DateTime(timezone=True), nullable=False)
    order = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="OPEN")  # OPEN | CLOSED
    image_key = Column(String(512), nullable=True)
    image_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # passive_deletes="all": deleting an edition must not rewrite its titles.
    titles = relationship(
        "Title",
        primaryjoin="Edition.id == foreign(Title.edition_id)",
        back_populates="edition",
        passive_deletes="all",
        order_by="Title.name",
    )
    fisical_titles = relationship(
        "FisicalTitle",
        back_populates="edition",
        cascade="all, delete-orphan",
        order_by="FisicalTitle.name",
    )
    draw_items = relationship("DrawItems", back_populates="edition", cascade="all, delete-orphan")
    winners = relationship("Winner", back_populates="edition", cascade="all, delete-orphan")


class FisicalTitle(Base):
    """Paper ticket sold offline for an edition."""

    __tablename__ = "fisical_titles"

    id = Column(Integer, primary_key=True, index=True)
    edition_id = Column(Integer, ForeignKey("editions.id"), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    value = Column(Integer, nullable=False)
    seller_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    edition = relationship("Edition", back_populates="fisical_titles")


class DrawItems(Base):
    __tablename__ = "draw_items"

    id = Column(Integer, primary_key=True, index=True)
    edition_id = Column(Integer, ForeignKey("editions.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    edition = relationship("Edition", back_populates="draw_items")
    winners = relationship("Winner", back_populates="draw_item", cascade="all, delete-orphan")


class Winner(Base):
    __tablename__ = "winners"

    id = Column(Integer, primary_key=True, index=True)
    edition_id = Column(Integer, ForeignKey("editions.id"), nullable=False, index=True)
    draw_item_id = Column(Integer, ForeignKey("draw_items.id"), nullable=True)
    title_name = Column(String(64), nullable=False)
    winner_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    edition = relationship("Edition", back_populates="winners")
    draw_item = relationship("DrawItems", back_populates="winners")
