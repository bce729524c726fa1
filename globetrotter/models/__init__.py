"""
ORM models for the GlobeTrotter backend.

Importing this package registers every table on ``Base.metadata``.
"""

from .user import User, Role, UserRole
from .trip import Trip
from .itinerary import BlockType, ItineraryDay, ItineraryBlock

__all__ = [
    "User",
    "Role",
    "UserRole",
    "Trip",
    "BlockType",
    "ItineraryDay",
    "ItineraryBlock",
]
