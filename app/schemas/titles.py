from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer


class PaymentForm(str, Enum):
    BALANCE = "BALANCE"
    CREDIT = "CREDIT"
    CREDIT_CARD = "CREDIT_CARD"
    PIX = "PIX"
    DEBIT = "DEBIT"


# Purchases paid from money already held by the platform settle immediately.
PAYMENT_FORM_STATUS = {
    PaymentForm.BALANCE: "DONE",
    PaymentForm.CREDIT: "DONE",
    PaymentForm.CREDIT_CARD: "PENDING",
    PaymentForm.PIX: "PENDING",
    PaymentForm.DEBIT: "PENDING",
}


class TitleResponse(BaseModel):
    id: int
    edition_id: int | None = None
    name: str
    dozens: list[str]
    bar_code: str
    qr_code: str
    chances: int
    value: int
    user_id: int | None = None
    buyed_title_id: int | None = None
    payment_id: str | None = None
    deleted: bool

    model_config = {"from_attributes": True}


class TitleUserResponse(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class BuyedTitleResponse(BaseModel):
    id: int
    user_id: int
    edition_id: int | None = None
    payment_form: PaymentForm
    status: str
    total_value: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TitleDetailResponse(TitleResponse):
    user: TitleUserResponse | None = None
    buyed_title: BuyedTitleResponse | None = None


class TitlePurchaseRequest(BaseModel):
    user_id: int
    title_ids: list[int] = Field(min_length=1)
    payment_form: PaymentForm

    model_config = {
        "json_schema_extra": {
            "examples": [{"user_id": 1, "title_ids": [10, 11], "payment_form": "PIX"}]
        }
    }


class TitlePurchaseResponse(BuyedTitleResponse):
    titles: list[TitleResponse]
    remaining_balance: Decimal | None = None

    @field_serializer("remaining_balance")
    def serialize_balance(self, value: Decimal | None) -> str | None:
        if value is None:
            return None
        return format(value.normalize(), "f")
