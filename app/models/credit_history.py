from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.database import Base


class CreditHistory(Base):
    __tablename__ = "credit_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    description = Column(String(1024), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    status = Column(String(32), nullable=False, default="PENDING")  # PENDING | DONE | CANCELED
    deposit_type = Column(String(32), nullable=False, default="PIX")  # PIX | CREDIT_CARD | DEBIT
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="credit_history")
