from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.models.database import Base


class BaseTitle(Base):
    """Catalog template a sellable Title is copied from."""

    __tablename__ = "base_titles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), unique=True, index=True, nullable=False)
    dozens = Column(JSON, nullable=False, default=list)
    bar_code = Column(String(128), nullable=False)
    qr_code = Column(String(512), nullable=False)
    chances = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
