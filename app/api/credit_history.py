from fastapi import APIRouter, status

from app.dependencies import DbSession
from app.schemas.credit_history import (
    CreditHistoryCreateRequest,
    CreditHistoryResponse,
    CreditHistoryUpdateRequest,
)
from app.services import credit_history_service

router = APIRouter()


@router.get(
    "",
    response_model=list[CreditHistoryResponse],
    summary="List credit history",
)
def list_credit_history(db: DbSession, user_id: int | None = None):
    return credit_history_service.list_credit_history(db, user_id=user_id)


@router.post(
    "",
    response_model=CreditHistoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a credit",
)
def create_credit_history(body: CreditHistoryCreateRequest, db: DbSession):
    """Registers a deposit; a DONE entry is credited to the user's balance right away."""
    return credit_history_service.create_credit_history(db, body)


@router.get(
    "/{credit_id}",
    response_model=CreditHistoryResponse,
    summary="Get credit history entry",
)
def get_credit_history(credit_id: int, db: DbSession):
    return credit_history_service.get_credit_history(db, credit_id)


@router.patch(
    "/{credit_id}",
    response_model=CreditHistoryResponse,
    summary="Update credit history entry",
)
def update_credit_history(credit_id: int, body: CreditHistoryUpdateRequest, db: DbSession):
    """Replaces the entry; moving into or out of DONE adjusts the user's balance."""
    return credit_history_service.update_credit_history(db, credit_id, body)
