"""
Favorite and visited venue models
"""

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import declared_attr, relationship

from kidmap.models.base import BaseModel, ID_LENGTH


class VenueRelationMixin:
    """
    Columns shared by the per-user venue relations.

    The venue is copied into the row rather than referenced: venues come
    from the geodata provider and are never stored on their own.
    """

    @declared_attr
    def user_id(cls):
        return Column(
            String(ID_LENGTH),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )

    venue_id = Column(String(64), nullable=False)
    venue_name = Column(String(255), nullable=False)
    venue_type = Column(String(32), nullable=False)
    venue_lat = Column(Float, nullable=False)
    venue_lng = Column(Float, nullable=False)


class UserFavorite(VenueRelationMixin, BaseModel):
    __tablename__ = "user_favorites"
    __table_args__ = (
        UniqueConstraint('user_id', 'venue_id', name='uq_user_favorites_user_venue'),
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="favorites")

    def __repr__(self):
        return f"<UserFavorite(user_id={self.user_id}, venue_id={self.venue_id})>"


class UserVisited(VenueRelationMixin, BaseModel):
    __tablename__ = "user_visited"
    __table_args__ = (
        UniqueConstraint('user_id', 'venue_id', name='uq_user_visited_user_venue'),
    )

    visited_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="visited")

    def __repr__(self):
        return f"<UserVisited(user_id={self.user_id}, venue_id={self.venue_id})>"
