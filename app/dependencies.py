from typing import Annotated

from fastapi import Depends
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.models import get_db
from app.services.storage_service import FileStorageService

_file_storage = FileStorageService()


def get_file_storage() -> FileStorageService:
    return _file_storage


def parse_form(model: type[BaseModel], **fields) -> BaseModel:
    """Validate multipart form fields against a request schema, as FastAPI does for JSON bodies."""
    try:
        return model(**{name: value for name, value in fields.items() if value is not None})
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


DbSession = Annotated[Session, Depends(get_db)]
FileStorage = Annotated[FileStorageService, Depends(get_file_storage)]
