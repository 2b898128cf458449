"""
API endpoints module
"""

from . import auth, venues, locations, favorites, visited, status, health

__all__ = [
    "auth",
    "venues",
    "locations",
    "favorites",
    "visited",
    "status",
    "health"
]
