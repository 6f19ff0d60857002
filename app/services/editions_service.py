import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.models import BaseTitle, DrawItems, Edition, Title
from app.schemas.editions import (
    EditionCreateRequest,
    EditionPatch,
    EditionStatus,
    EditionUpdateRequest,
)
from app.services.storage_service import FileStorageService, StoredFile, UploadedFile

logger = logging.getLogger(__name__)

EDITION_NOT_FOUND = "Edition not found"
EDITION_ALREADY_EXISTS = "Edition already exists"


def _edition_query(db: Session):
    return db.query(Edition).options(
        selectinload(Edition.titles),
        selectinload(Edition.fisical_titles),
    )


def _get_edition_or_404(db: Session, edition_id: int) -> Edition:
    edition = _edition_query(db).filter(Edition.id == edition_id).first()
    if not edition:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EDITION_NOT_FOUND)
    return edition


def _ensure_name_available(db: Session, name: str, edition_id: int | None = None) -> None:
    query = db.query(Edition).filter(Edition.name == name)
    if edition_id is not None:
        query = query.filter(Edition.id != edition_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EDITION_ALREADY_EXISTS)


def _base_titles_in_range(db: Session, initial_title: str | None, end_title: str | None) -> list[BaseTitle]:
    query = db.query(BaseTitle)
    if initial_title is not None:
        query = query.filter(BaseTitle.name >= initial_title)
    if end_title is not None:
        query = query.filter(BaseTitle.name <= end_title)
    return query.order_by(BaseTitle.name).all()


def reconcile_titles(
    db: Session,
    edition: Edition,
    initial_title: str | None,
    end_title: str | None,
    value: int | None,
) -> tuple[int, int]:
    """Give the edition exactly one Title per BaseTitle in [initial_title, end_title].

    Existing titles are matched by name across all editions and moved to this one
    with their price overwritten; the rest are created from their BaseTitle.
    Returns (linked, created). Does not commit.
    """
    if initial_title is None and end_title is None:
        return 0, 0

    base_titles = _base_titles_in_range(db, initial_title, end_title)
    if not base_titles:
        return 0, 0

    existing = db.query(Title).filter(Title.name.in_([base.name for base in base_titles])).all()
    existing_names = {title.name for title in existing}
    missing = [base for base in base_titles if base.name not in existing_names]

    if existing:
        changes = {Title.edition_id: edition.id}
        if value is not None:
            changes[Title.value] = value
        (
            db.query(Title)
            .filter(Title.id.in_([title.id for title in existing]))
            .update(changes, synchronize_session="fetch")
        )

    price = value if value is not None else settings.DEFAULT_TITLE_VALUE
    db.add_all(
        Title(
            edition_id=edition.id,
            name=base.name,
            dozens=list(base.dozens or []),
            bar_code=base.bar_code,
            qr_code=base.qr_code,
            chances=base.chances,
            value=price,
        )
        for base in missing
    )
    db.flush()
    return len(existing), len(missing)


def _discard_upload(storage: FileStorageService, stored: StoredFile) -> None:
    if not stored.image_key:
        return
    try:
        storage.delete_file(stored.image_key)
    except Exception:
        logger.exception("Failed to discard uploaded file key=%s", stored.image_key)


def create_edition(
    db: Session,
    storage: FileStorageService,
    body: EditionCreateRequest,
    image: UploadedFile | None = None,
) -> Edition:
    _ensure_name_available(db, body.name)

    stored = storage.upload_file(image)
    try:
        edition = Edition(
            name=body.name,
            draw_date=body.draw_date,
            order=body.order,
            status=body.status.value,
            image_key=stored.image_key,
            image_url=stored.image_url,
        )
        db.add(edition)
        db.flush()
        linked, created = reconcile_titles(db, edition, body.initial_title, body.end_title, body.value)
        db.commit()
    except Exception:
        db.rollback()
        _discard_upload(storage, stored)
        raise

    logger.info(
        "Created edition id=%s name=%s (titles linked=%s created=%s)",
        edition.id,
        edition.name,
        linked,
        created,
    )
    return _get_edition_or_404(db, edition.id)


def find_all(db: Session) -> list[Edition]:
    return _edition_query(db).order_by(Edition.order.asc()).all()


def find_all_draw_items(db: Session) -> list[DrawItems]:
    return (
        db.query(DrawItems)
        .join(DrawItems.edition)
        .filter(Edition.status == EditionStatus.OPEN.value)
        .options(
            selectinload(DrawItems.edition).selectinload(Edition.titles),
            selectinload(DrawItems.edition).selectinload(Edition.fisical_titles),
            selectinload(DrawItems.edition).selectinload(Edition.winners),
        )
        .order_by(DrawItems.created_at.asc(), DrawItems.id.asc())
        .all()
    )


def find_one(db: Session, edition_id: int) -> Edition:
    return _get_edition_or_404(db, edition_id)


def update_edition(
    db: Session,
    storage: FileStorageService,
    edition_id: int,
    body: EditionUpdateRequest,
    image: UploadedFile | None = None,
) -> Edition:
    edition = _get_edition_or_404(db, edition_id)
    if body.name is not None and body.name != edition.name:
        _ensure_name_available(db, body.name, edition_id=edition.id)

    stored = storage.upload_file(image)
    previous_key = edition.image_key if stored.image_key else None
    try:
        for field in ("name", "draw_date", "order"):
            new_value = getattr(body, field)
            if new_value is not None:
                setattr(edition, field, new_value)
        if body.status is not None:
            edition.status = body.status.value
        if stored.image_key:
            edition.image_key = stored.image_key
            edition.image_url = stored.image_url
        db.flush()
        linked, created = reconcile_titles(db, edition, body.initial_title, body.end_title, body.value)
        db.commit()
    except Exception:
        db.rollback()
        _discard_upload(storage, stored)
        raise

    if previous_key:
        try:
            storage.delete_file(previous_key)
        except Exception:
            logger.exception("Failed to delete replaced image key=%s of edition id=%s", previous_key, edition_id)

    logger.info(
        "Updated edition id=%s (titles linked=%s created=%s)",
        edition_id,
        linked,
        created,
    )
    return _get_edition_or_404(db, edition_id)


def update_many(db: Session, editions: list[EditionPatch]) -> None:
    """Apply name/draw_date/order patches; a missing id aborts the whole batch."""
    try:
        for patch in editions:
            edition = db.query(Edition).filter(Edition.id == patch.id).first()
            if not edition:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EDITION_NOT_FOUND)
            if patch.name is not None and patch.name != edition.name:
                _ensure_name_available(db, patch.name, edition_id=edition.id)
            for field, new_value in patch.model_dump(exclude={"id"}, exclude_none=True).items():
                setattr(edition, field, new_value)
            db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Updated %s edition(s) in batch", len(editions))


def remove_edition(db: Session, edition_id: int) -> None:
    edition = _get_edition_or_404(db, edition_id)
    try:
        purchased = (
            db.query(Title)
            .filter(Title.edition_id == edition_id, Title.buyed_title_id.isnot(None))
            .delete(synchronize_session="fetch")
        )
        db.delete(edition)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted edition id=%s with %s purchased title(s)", edition_id, purchased)
