# Business logic services

from .auth_service import AuthService
from .trip_service import TripService
from .itinerary_service import ItineraryService
from .photo_search_service import PexelsPhotoService, get_photo_service
from .scheduling_rules import (
    OverlapPolicy,
    AllowOverlap,
    RejectOverlap,
    DayNumberPolicy,
    AllowDuplicateDayNumbers,
    UniqueDayNumbers,
    policies_from_settings,
)

__all__ = [
    "AuthService",
    "TripService",
    "ItineraryService",
    "PexelsPhotoService",
    "get_photo_service",
    "OverlapPolicy",
    "AllowOverlap",
    "RejectOverlap",
    "DayNumberPolicy",
    "AllowDuplicateDayNumbers",
    "UniqueDayNumbers",
    "policies_from_settings",
]
