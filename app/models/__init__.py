from app.models.database import Base, get_db
from app.models.user import User
from app.models.base_title import BaseTitle
from app.models.edition import DrawItems, Edition, FisicalTitle, Winner
from app.models.buyed_title import BuyedTitle
from app.models.title import Title
from app.models.credit_history import CreditHistory

__all__ = [
    "Base",
    "get_db",
    "User",
    "BaseTitle",
    "Edition",
    "FisicalTitle",
    "DrawItems",
    "Winner",
    "BuyedTitle",
    "Title",
    "CreditHistory",
]
