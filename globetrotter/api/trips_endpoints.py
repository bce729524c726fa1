"""
Trip API endpoints - trip lifecycle for the signed-in user
"""
from typing import List
from fastapi import APIRouter, Depends, status

from globetrotter.core.dependencies import USER_OR_ADMIN, get_trip_service
from globetrotter.core.session_store import UserContext
from globetrotter.schemas.base import Envelope
from globetrotter.schemas.trip import TripCreate, TripRead, TripUpdate
from globetrotter.services.trip_service import TripService

router = APIRouter(prefix="/api/trip", tags=["trips"])


@router.post("", response_model=Envelope[TripRead], status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    service: TripService = Depends(get_trip_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Create a new trip

    - **title**: Trip title
    - **startDate**: First day, not before today
    - **endDate**: Last day, not before startDate
    - **description**, **coverPhotoUrl**: Optional
    """
    trip = await service.create_trip(current_user.user_id, trip_data)
    return Envelope(message="Trip created successfully", data=TripRead.model_validate(trip))


@router.get("", response_model=Envelope[List[TripRead]])
async def list_trips(
    service: TripService = Depends(get_trip_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    List the user's trips, most recently created first
    """
    trips = await service.list_user_trips(current_user.user_id)
    return Envelope(data=[TripRead.model_validate(t) for t in trips])


@router.get("/{trip_id}", response_model=Envelope[TripRead])
async def get_trip(
    trip_id: int,
    service: TripService = Depends(get_trip_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    trip = await service.get_trip(trip_id, current_user.user_id)
    return Envelope(data=TripRead.model_validate(trip))


@router.put("/{trip_id}", response_model=Envelope[TripRead])
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    service: TripService = Depends(get_trip_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Update a trip

    All fields optional - only provided fields will be updated
    """
    trip = await service.update_trip(trip_id, current_user.user_id, trip_data)
    return Envelope(message="Trip updated successfully", data=TripRead.model_validate(trip))


@router.delete("/{trip_id}", response_model=Envelope)
async def delete_trip(
    trip_id: int,
    service: TripService = Depends(get_trip_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Delete a trip together with its itinerary
    """
    await service.delete_trip(trip_id, current_user.user_id)
    return Envelope(message="Trip deleted successfully")
