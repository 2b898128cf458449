"""
User model
"""

from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship

from kidmap.models.base import BaseModel


class User(BaseModel):
    """
    User profile mirrored from the identity provider.

    The id is the provider's stable subject identifier; rows are only
    written by the login upsert.
    """
    __tablename__ = "users"

    email = Column(String(255), index=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    profile_image_url = Column(String(1024))
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Relationships
    favorites = relationship(
        "UserFavorite", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    visited = relationship(
        "UserVisited", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
