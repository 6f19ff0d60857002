from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from app.dependencies import DbSession, FileStorage, parse_form
from app.models import Edition
from app.schemas.editions import (
    DrawItemResponse,
    EditionCreateRequest,
    EditionResponse,
    EditionUpdateManyRequest,
    EditionUpdateRequest,
    MessageResponse,
)
from app.services import editions_service

router = APIRouter()


def edition_to_response(edition: Edition, available_only: bool = False) -> EditionResponse:
    response = EditionResponse.model_validate(edition)
    if available_only:
        response.titles = [title for title in response.titles if title.user_id is None]
    return response


@router.post(
    "",
    response_model=EditionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create edition",
)
def create_edition(
    db: DbSession,
    storage: FileStorage,
    name: Annotated[str | None, Form()] = None,
    draw_date: Annotated[str | None, Form()] = None,
    order: Annotated[str | None, Form()] = None,
    edition_status: Annotated[str | None, Form(alias="status")] = None,
    value: Annotated[str | None, Form()] = None,
    initial_title: Annotated[str | None, Form()] = None,
    end_title: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
):
    """
    Create an edition and its titles from the BaseTitle range [initial_title, end_title].
    Titles already sold under another edition with the same name are moved here.
    """
    body = parse_form(
        EditionCreateRequest,
        name=name,
        draw_date=draw_date,
        order=order,
        status=edition_status,
        value=value,
        initial_title=initial_title,
        end_title=end_title,
    )
    try:
        edition = editions_service.create_edition(db, storage, body, image)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return edition_to_response(edition)


@router.get(
    "",
    response_model=list[EditionResponse],
    summary="List editions",
)
def list_editions(db: DbSession):
    """Returns every edition ordered by display order, with titles and fisical titles."""
    return [edition_to_response(edition) for edition in editions_service.find_all(db)]


@router.patch(
    "",
    response_model=MessageResponse,
    summary="Update name, draw date and order of several editions",
)
def update_many_editions(body: EditionUpdateManyRequest, db: DbSession):
    editions_service.update_many(db, body.editions)
    return MessageResponse(message="Updated", status=status.HTTP_200_OK)


@router.get(
    "/draw-items",
    response_model=list[DrawItemResponse],
    summary="List draw items of open editions",
)
def list_draw_items(db: DbSession):
    return editions_service.find_all_draw_items(db)


@router.get(
    "/{edition_id}",
    response_model=EditionResponse,
    summary="Get edition by ID",
)
def get_edition(edition_id: int, db: DbSession):
    return edition_to_response(editions_service.find_one(db, edition_id))


@router.patch(
    "/{edition_id}",
    response_model=EditionResponse,
    summary="Update edition",
)
def update_edition(
    edition_id: int,
    db: DbSession,
    storage: FileStorage,
    name: Annotated[str | None, Form()] = None,
    draw_date: Annotated[str | None, Form()] = None,
    order: Annotated[str | None, Form()] = None,
    edition_status: Annotated[str | None, Form(alias="status")] = None,
    value: Annotated[str | None, Form()] = None,
    initial_title: Annotated[str | None, Form()] = None,
    end_title: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
):
    """Update an edition; the response lists only titles that are still unsold."""
    body = parse_form(
        EditionUpdateRequest,
        name=name,
        draw_date=draw_date,
        order=order,
        status=edition_status,
        value=value,
        initial_title=initial_title,
        end_title=end_title,
    )
    try:
        edition = editions_service.update_edition(db, storage, edition_id, body, image)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return edition_to_response(edition, available_only=True)


@router.delete(
    "/{edition_id}",
    response_model=MessageResponse,
    summary="Delete edition",
)
def delete_edition(edition_id: int, db: DbSession):
    """Deletes the edition and its purchased titles; unsold titles are kept."""
    editions_service.remove_edition(db, edition_id)
    return MessageResponse(message="Deleted", status=status.HTTP_200_OK)
