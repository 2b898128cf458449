"""
Database models
"""

from kidmap.models.user import User
from kidmap.models.relation import UserFavorite, UserVisited

__all__ = [
    "User",
    "UserFavorite",
    "UserVisited"
]
