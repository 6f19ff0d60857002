from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, field_serializer


class CreditStatus(str, Enum):
    PENDING = "PENDING"
    DONE = "DONE"
    CANCELED = "CANCELED"


class DepositType(str, Enum):
    PIX = "PIX"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT = "DEBIT"


class CreditHistoryUpdateRequest(BaseModel):
    name: str | None = None
    description: str
    value: Decimal
    status: CreditStatus = CreditStatus.PENDING
    deposit_type: DepositType = DepositType.PIX


class CreditHistoryCreateRequest(CreditHistoryUpdateRequest):
    user_id: int


class CreditHistoryResponse(BaseModel):
    id: int
    user_id: int
    name: str | None = None
    description: str
    value: Decimal
    status: CreditStatus
    deposit_type: DepositType
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_serializer("value")
    def serialize_value(self, value: Decimal) -> str:
        normalized = value.normalize()
        return format(normalized, "f")
