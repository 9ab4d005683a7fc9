"""Saved item model"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class SavedItem(Base):
    """Per-user quick-lookup mirror of liked items"""

    __tablename__ = "saved_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    external_id = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)
    title = Column(String(500), nullable=False)
    image = Column(String(1000))
    item_metadata = Column("metadata", JSON)
    saved_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="saved_items")

    # The upsert in SavedItemService conflicts on this constraint
    __table_args__ = (
        UniqueConstraint('user_id', 'external_id', 'type', name='uq_saved_item_user_external_type'),
    )

    def __repr__(self):
        return f"<SavedItem(user_id={self.user_id}, external_id='{self.external_id}', type='{self.type}')>"
