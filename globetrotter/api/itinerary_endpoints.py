"""
Itinerary API endpoints - days under a trip, time blocks under a day
"""
from typing import List
from fastapi import APIRouter, Depends, status

from globetrotter.core.dependencies import USER_OR_ADMIN, get_itinerary_service
from globetrotter.core.session_store import UserContext
from globetrotter.schemas.base import Envelope
from globetrotter.schemas.itinerary import (
    BlockCreate,
    BlockRead,
    BlockUpdate,
    DayCreate,
    DayRead,
    DayUpdate,
)
from globetrotter.services.itinerary_service import ItineraryService

days_router = APIRouter(prefix="/api/itinerary-days", tags=["itinerary"])
blocks_router = APIRouter(prefix="/api/itinerary/blocks", tags=["itinerary"])


@days_router.post("/{trip_id}", response_model=Envelope[DayRead], status_code=status.HTTP_201_CREATED)
async def create_day(
    trip_id: int,
    data: DayCreate,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Add a day to a trip

    - **dayNumber**: Positive day index within the trip
    - **date**: Calendar date of the day
    - **city**, **country**: Optional location
    """
    day = await service.create_day(trip_id, data, current_user.user_id)
    return Envelope(message="Itinerary day created", data=DayRead.model_validate(day))


@days_router.get("/{trip_id}", response_model=Envelope[List[DayRead]])
async def list_days(
    trip_id: int,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    days = await service.list_days(trip_id, current_user.user_id)
    return Envelope(data=[DayRead.model_validate(d) for d in days])


@days_router.put("/day/{day_id}", response_model=Envelope[DayRead])
async def update_day(
    day_id: int,
    data: DayUpdate,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    day = await service.update_day(day_id, data, current_user.user_id)
    return Envelope(message="Itinerary day updated", data=DayRead.model_validate(day))


@days_router.delete("/day/{day_id}", response_model=Envelope)
async def delete_day(
    day_id: int,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    await service.delete_day(day_id, current_user.user_id)
    return Envelope(message="Itinerary day deleted")


@blocks_router.post("/{day_id}", response_model=Envelope[BlockRead], status_code=status.HTTP_201_CREATED)
async def create_block(
    day_id: int,
    data: BlockCreate,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    """
    Add a time block to a day

    - **blockType**: ACTIVITY, REST, SLEEP or GAP
    - **startTime** / **endTime**: Time of day, start strictly before end
    - **estimatedCost**: Optional, not negative
    """
    block = await service.create_block(day_id, data, current_user.user_id)
    return Envelope(message="Itinerary block created", data=BlockRead.model_validate(block))


@blocks_router.get("/{day_id}", response_model=Envelope[List[BlockRead]])
async def list_blocks(
    day_id: int,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    blocks = await service.list_blocks(day_id, current_user.user_id)
    return Envelope(data=[BlockRead.model_validate(b) for b in blocks])


@blocks_router.put("/block/{block_id}", response_model=Envelope[BlockRead])
async def update_block(
    block_id: int,
    data: BlockUpdate,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    block = await service.update_block(block_id, data, current_user.user_id)
    return Envelope(message="Itinerary block updated", data=BlockRead.model_validate(block))


@blocks_router.delete("/block/{block_id}", response_model=Envelope)
async def delete_block(
    block_id: int,
    service: ItineraryService = Depends(get_itinerary_service),
    current_user: UserContext = Depends(USER_OR_ADMIN),
):
    await service.delete_block(block_id, current_user.user_id)
    return Envelope(message="Itinerary block deleted")
