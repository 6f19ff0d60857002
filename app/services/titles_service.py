import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from app.models import BuyedTitle, Edition, Title, User
from app.schemas.editions import EditionStatus
from app.schemas.titles import PAYMENT_FORM_STATUS, PaymentForm, TitlePurchaseRequest

logger = logging.getLogger(__name__)


def list_titles(db: Session, edition_id: int | None = None, available_only: bool = False) -> list[Title]:
    query = db.query(Title).filter(Title.deleted.is_(False))
    if edition_id is not None:
        query = query.filter(Title.edition_id == edition_id)
    if available_only:
        query = query.filter(Title.user_id.is_(None))
    return query.order_by(Title.name.asc()).all()


def get_title(db: Session, title_id: int) -> Title:
    title = (
        db.query(Title)
        .options(joinedload(Title.user), joinedload(Title.buyed_title))
        .filter(Title.id == title_id)
        .first()
    )
    if not title:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Title not found")
    return title


def _load_purchasable_titles(db: Session, title_ids: list[int]) -> list[Title]:
    unique_ids = list(dict.fromkeys(title_ids))
    titles = db.query(Title).filter(Title.id.in_(unique_ids)).order_by(Title.name.asc()).all()
    found = {title.id for title in titles}
    missing = [title_id for title_id in unique_ids if title_id not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Title(s) not found: {', '.join(str(i) for i in missing)}",
        )

    unavailable = [title.name for title in titles if title.deleted or title.user_id is not None]
    if unavailable:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Title(s) not available: {', '.join(unavailable)}",
        )

    edition_ids = {title.edition_id for title in titles}
    open_editions = {
        edition.id
        for edition in db.query(Edition).filter(Edition.id.in_(list(edition_ids))).all()
        if edition.status == EditionStatus.OPEN.value
    }
    if edition_ids - open_editions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Titles can only be bought from open editions",
        )
    return titles


def purchase_titles(db: Session, body: TitlePurchaseRequest) -> BuyedTitle:
    """Assign the titles to the user under a new BuyedTitle record."""
    user = db.query(User).filter(User.id == body.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    titles = _load_purchasable_titles(db, body.title_ids)
    total_value = sum(title.value for title in titles)

    try:
        if body.payment_form == PaymentForm.BALANCE:
            balance = Decimal(str(user.balance or 0))
            if balance < total_value:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Insufficient balance",
                )
            user.balance = balance - Decimal(total_value)

        edition_ids = {title.edition_id for title in titles}
        buyed_title = BuyedTitle(
            user_id=user.id,
            edition_id=edition_ids.pop() if len(edition_ids) == 1 else None,
            payment_form=body.payment_form.value,
            status=PAYMENT_FORM_STATUS[body.payment_form],
            total_value=total_value,
        )
        db.add(buyed_title)
        db.flush()

        for title in titles:
            title.user_id = user.id
            title.buyed_title_id = buyed_title.id
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(buyed_title)
    logger.info(
        "User id=%s bought %s title(s) via %s (buyed_title id=%s, status=%s)",
        user.id,
        len(titles),
        body.payment_form.value,
        buyed_title.id,
        buyed_title.status,
    )
    return buyed_title
