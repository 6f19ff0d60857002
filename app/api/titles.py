from fastapi import APIRouter, status

from app.dependencies import DbSession
from app.schemas.titles import (
    TitleDetailResponse,
    TitlePurchaseRequest,
    TitlePurchaseResponse,
    TitleResponse,
)
from app.services import titles_service

router = APIRouter()


@router.get(
    "",
    response_model=list[TitleResponse],
    summary="List titles",
)
def list_titles(
    db: DbSession,
    edition_id: int | None = None,
    available: bool = False,
):
    """Returns non-deleted titles, optionally only those of one edition or still unsold."""
    return titles_service.list_titles(db, edition_id=edition_id, available_only=available)


@router.post(
    "/purchase",
    response_model=TitlePurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Buy titles",
)
def purchase_titles(body: TitlePurchaseRequest, db: DbSession):
    buyed_title = titles_service.purchase_titles(db, body)
    response = TitlePurchaseResponse.model_validate(buyed_title)
    response.remaining_balance = buyed_title.user.balance
    return response


@router.get(
    "/{title_id}",
    response_model=TitleDetailResponse,
    summary="Get title by ID",
)
def get_title(title_id: int, db: DbSession):
    """Returns one title with its owner and purchase record, when it has them."""
    return titles_service.get_title(db, title_id)
