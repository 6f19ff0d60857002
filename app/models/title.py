from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.database import Base


class Title(Base):
    __tablename__ = "titles"

    id = Column(Integer, primary_key=True, index=True)
    # No FK constraint: unsold titles outlive a removed edition and keep its id.
    edition_id = Column(Integer, index=True, nullable=True)
    name = Column(String(64), index=True, nullable=False)
    dozens = Column(JSON, nullable=False, default=list)
    bar_code = Column(String(128), nullable=False)
    qr_code = Column(String(512), nullable=False)
    chances = Column(Integer, nullable=False, default=1)
    value = Column(Integer, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    buyed_title_id = Column(Integer, ForeignKey("buyed_titles.id"), nullable=True, index=True)
    payment_id = Column(String(255), nullable=True)
    deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    edition = relationship(
        "Edition",
        primaryjoin="foreign(Title.edition_id) == Edition.id",
        back_populates="titles",
    )
    user = relationship("User", back_populates="titles", lazy="select")
    buyed_title = relationship("BuyedTitle", back_populates="titles", lazy="select")
