"""User model"""

from sqlalchemy import Column, Integer, String, Text, Boolean
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Profile owner; holds up to nine collections"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(20), unique=True, index=True)  # Assigned right after creation
    name = Column(String(200))
    image = Column(String(1000))
    accent_color = Column(String(7), nullable=False, default="#6366f1")
    bg_texture = Column(String(10), nullable=False, default="grain")  # none, grain, paper, glass
    bio = Column(Text)
    onboarding_completed = Column(Boolean, nullable=False, default=False)

    # Relationships
    collections = relationship(
        "Collection",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Collection.position",
    )
    saved_items = relationship("SavedItem", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
