"""Collection model"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Collection(Base, TimestampMixin):
    """A named bucket of items occupying one of the user's nine grid slots"""

    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False, default="mixed")  # Advisory only
    position = Column(Integer, nullable=False)  # Grid slot 0-8
    cover_image = Column(String(1000))  # Mirrors the image of the item at position 0

    # Relationships
    user = relationship("User", back_populates="collections")
    items = relationship(
        "Item",
        back_populates="collection",
        cascade="all, delete-orphan",
        order_by="Item.position",
    )

    __table_args__ = (
        Index('ix_collection_user_position', 'user_id', 'position'),
    )

    def __repr__(self):
        return f"<Collection(id={self.id}, name='{self.name}', position={self.position})>"
