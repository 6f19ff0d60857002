import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.schemas.titles import TitleResponse

DEFAULT_TITLE_VALUE = "5"


class EditionStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


def _parse_value(value: str | int | None) -> int:
    # "R$ 1.500" -> 1500; the price field only keeps its digits.
    digits = re.sub(r"\D", "", str(value))
    return int(digits) if digits else 0


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EditionCreateRequest(BaseModel):
    name: str
    draw_date: datetime
    order: int | None = None
    status: EditionStatus = EditionStatus.OPEN
    value: int = Field(default=DEFAULT_TITLE_VALUE, validate_default=True)
    initial_title: str | None = None
    end_title: str | None = None

    @field_validator("order", "initial_title", "end_title", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: str | int | None) -> int:
        if v is None:
            v = DEFAULT_TITLE_VALUE
        return _parse_value(v)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Edition 42",
                    "draw_date": "2026-11-01T20:00:00Z",
                    "order": 1,
                    "status": "OPEN",
                    "value": "10",
                    "initial_title": "T0001",
                    "end_title": "T0500",
                }
            ]
        }
    }


class EditionUpdateRequest(BaseModel):
    name: str | None = None
    draw_date: datetime | None = None
    order: int | None = None
    status: EditionStatus | None = None
    value: int | None = None
    initial_title: str | None = None
    end_title: str | None = None

    @field_validator("name", "draw_date", "order", "status", "initial_title", "end_title", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: str | int | None) -> int | None:
        if _blank_to_none(v) is None:
            return None
        return _parse_value(v)


class EditionPatch(BaseModel):
    id: int
    name: str | None = None
    draw_date: datetime | None = None
    order: int | None = None


class EditionUpdateManyRequest(BaseModel):
    editions: list[EditionPatch]


class FisicalTitleResponse(BaseModel):
    id: int
    edition_id: int
    name: str
    value: int
    seller_name: str | None = None

    model_config = {"from_attributes": True}


class WinnerResponse(BaseModel):
    id: int
    draw_item_id: int | None = None
    title_name: str
    winner_name: str

    model_config = {"from_attributes": True}


class EditionResponse(BaseModel):
    id: int
    name: str
    draw_date: datetime
    order: int | None = None
    status: EditionStatus
    image_key: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    titles: list[TitleResponse] = []
    fisical_titles: list[FisicalTitleResponse] = []

    model_config = {"from_attributes": True}


class DrawEditionResponse(EditionResponse):
    winners: list[WinnerResponse] = []


class DrawItemResponse(BaseModel):
    id: int
    edition_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    edition: DrawEditionResponse

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
    status: int
