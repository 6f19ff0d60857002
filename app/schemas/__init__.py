from app.schemas.credit_history import (
    CreditHistoryCreateRequest,
    CreditHistoryResponse,
    CreditHistoryUpdateRequest,
)
from app.schemas.editions import (
    DrawItemResponse,
    EditionCreateRequest,
    EditionResponse,
    EditionUpdateManyRequest,
    EditionUpdateRequest,
    MessageResponse,
)
from app.schemas.titles import TitleDetailResponse, TitlePurchaseRequest, TitleResponse

__all__ = [
    "CreditHistoryCreateRequest",
    "CreditHistoryResponse",
    "CreditHistoryUpdateRequest",
    "DrawItemResponse",
    "EditionCreateRequest",
    "EditionResponse",
    "EditionUpdateManyRequest",
    "EditionUpdateRequest",
    "MessageResponse",
    "TitleDetailResponse",
    "TitlePurchaseRequest",
    "TitleResponse",
]
