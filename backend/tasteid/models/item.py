"""Item model"""

from sqlalchemy import Column, Integer, String, Text, JSON, Float, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Item(Base, TimestampMixin):
    """A single media entry inside a collection"""

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False)
    external_id = Column(String(100), nullable=False)  # Identifier in the source system
    type = Column(String(20), nullable=False)  # movie, tv, anime, manga, game, book, art, music
    title = Column(String(500), nullable=False)
    image = Column(String(1000))
    year = Column(String(10))
    rating = Column(Float)  # Source-native scale
    review = Column(Text)
    item_metadata = Column("metadata", JSON)  # Source-specific fields (studio, genres, ...)
    position = Column(Integer, nullable=False)  # Dense 0..N-1 within the collection

    # Relationships
    collection = relationship("Collection", back_populates="items")

    __table_args__ = (
        Index('ix_item_collection_position', 'collection_id', 'position'),
        Index('ix_item_collection_external', 'collection_id', 'external_id', 'type'),
    )

    def __repr__(self):
        return f"<Item(id={self.id}, title='{self.title}', position={self.position})>"
