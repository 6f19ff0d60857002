import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models import CreditHistory, User
from app.schemas.credit_history import (
    CreditHistoryCreateRequest,
    CreditHistoryUpdateRequest,
    CreditStatus,
)

logger = logging.getLogger(__name__)


def _settle_balance(user: User, previous_status: str | None, previous_value: Decimal, entry: CreditHistory) -> None:
    """Keep the user's balance equal to the sum of their DONE credits."""
    balance = Decimal(str(user.balance or 0))
    if previous_status == CreditStatus.DONE.value:
        balance -= Decimal(str(previous_value))
    if entry.status == CreditStatus.DONE.value:
        balance += Decimal(str(entry.value))
    user.balance = balance


def list_credit_history(db: Session, user_id: int | None = None) -> list[CreditHistory]:
    query = db.query(CreditHistory)
    if user_id is not None:
        query = query.filter(CreditHistory.user_id == user_id)
    return query.order_by(CreditHistory.created_at.desc(), CreditHistory.id.desc()).all()


def get_credit_history(db: Session, credit_id: int) -> CreditHistory:
    entry = db.query(CreditHistory).filter(CreditHistory.id == credit_id).first()
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Credit history not found")
    return entry


def create_credit_history(db: Session, body: CreditHistoryCreateRequest) -> CreditHistory:
    user = db.query(User).filter(User.id == body.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    entry = CreditHistory(
        user_id=user.id,
        name=body.name,
        description=body.description,
        value=body.value,
        status=body.status.value,
        deposit_type=body.deposit_type.value,
    )
    try:
        db.add(entry)
        _settle_balance(user, None, Decimal("0"), entry)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(entry)
    logger.info("Created credit history id=%s for user id=%s (status=%s)", entry.id, user.id, entry.status)
    return entry


def update_credit_history(db: Session, credit_id: int, body: CreditHistoryUpdateRequest) -> CreditHistory:
    entry = get_credit_history(db, credit_id)
    previous_status = entry.status
    previous_value = entry.value

    try:
        entry.name = body.name
        entry.description = body.description
        entry.value = body.value
        entry.status = body.status.value
        entry.deposit_type = body.deposit_type.value
        _settle_balance(entry.user, previous_status, previous_value, entry)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(entry)
    logger.info(
        "Updated credit history id=%s (status %s -> %s)",
        entry.id,
        previous_status,
        entry.status,
    )
    return entry
