from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.database import Base


class BuyedTitle(Base):
    __tablename__ = "buyed_titles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    edition_id = Column(Integer, nullable=True, index=True)
    payment_form = Column(String(32), nullable=False)  # BALANCE | CREDIT | CREDIT_CARD | PIX | DEBIT
    status = Column(String(32), nullable=False, default="PENDING")  # PENDING | DONE
    total_value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="buyed_titles")
    titles = relationship("Title", back_populates="buyed_title")
