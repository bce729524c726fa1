"""
Trip Service - Manages trip lifecycle scoped to the owning user
"""
import logging
from datetime import date
from typing import Optional, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from globetrotter.core.exceptions import BadRequestError, NotFoundError
from globetrotter.core.validation import is_before_today
from globetrotter.models.trip import Trip
from globetrotter.schemas.trip import TripCreate, TripUpdate

logger = logging.getLogger(__name__)

TRIP_NOT_FOUND = "Trip not found"
_REQUIRED = ("title", "start_date", "end_date")


def _check_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise BadRequestError("End date cannot be before start date")


def _check_start_not_past(start_date: date, today: Optional[date]) -> None:
    if is_before_today(start_date, today):
        raise BadRequestError("Trip start date cannot be in the past")


class TripService:
    """Manages trip CRUD operations for the authenticated user"""

    def __init__(self, db: AsyncSession, today: Optional[date] = None):
        self.db = db
        # Fixed "today" for tests; None means the real calendar day
        self.today = today

    async def create_trip(self, user_id: int, trip_data: TripCreate) -> Trip:
        """
        Create a new trip for a user

        Args:
            user_id: User ID
            trip_data: Trip creation data

        Returns:
            Created trip

        Raises:
            BadRequestError: Missing fields, start date in the past, or end before start
        """
        if not trip_data.title or not trip_data.title.strip() \
                or trip_data.start_date is None or trip_data.end_date is None:
            raise BadRequestError("Missing required fields")
        _check_start_not_past(trip_data.start_date, self.today)
        _check_dates(trip_data.start_date, trip_data.end_date)

        trip = Trip(
            user_id=user_id,
            title=trip_data.title.strip(),
            description=trip_data.description or None,
            start_date=trip_data.start_date,
            end_date=trip_data.end_date,
            cover_photo_url=trip_data.cover_photo_url or None,
        )
        self.db.add(trip)
        await self.db.commit()
        await self.db.refresh(trip)
        logger.info("Trip created", extra={"trip_id": trip.id, "user_id": user_id})
        return trip

    async def get_trip(self, trip_id: int, user_id: int) -> Trip:
        """
        Get a trip by ID (scoped to user)

        Raises:
            NotFoundError: Trip absent or owned by someone else
        """
        stmt = select(Trip).where(
            Trip.id == trip_id,
            Trip.user_id == user_id
        )
        result = await self.db.execute(stmt)
        trip = result.scalar_one_or_none()
        if trip is None:
            raise NotFoundError(TRIP_NOT_FOUND)
        return trip

    async def list_user_trips(self, user_id: int) -> List[Trip]:
        """List user's trips, newest created first"""
        stmt = (
            select(Trip)
            .where(Trip.user_id == user_id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_trip(
        self,
        trip_id: int,
        user_id: int,
        trip_data: TripUpdate
    ) -> Trip:
        """
        Update a trip

        Only provided fields change. The merged record is re-validated:
        a changed start date may not be in the past, and the resulting
        start/end pair must stay ordered even if only one side was sent.
        """
        update_fields = {
            k: v for k, v in trip_data.provided_fields().items()
            if not (k in _REQUIRED and v is None)
        }
        if not update_fields:
            raise BadRequestError("No fields to update")
        if "title" in update_fields:
            update_fields["title"] = update_fields["title"].strip()
            if not update_fields["title"]:
                raise BadRequestError("Title cannot be empty")
        if "start_date" in update_fields:
            _check_start_not_past(update_fields["start_date"], self.today)

        trip = await self.get_trip(trip_id, user_id)
        _check_dates(
            update_fields.get("start_date", trip.start_date),
            update_fields.get("end_date", trip.end_date),
        )

        for field, value in update_fields.items():
            setattr(trip, field, value)

        await self.db.commit()
        await self.db.refresh(trip)
        return trip

    async def delete_trip(self, trip_id: int, user_id: int) -> None:
        """Delete a trip and, by cascade, its itinerary days and blocks"""
        trip = await self.get_trip(trip_id, user_id)
        await self.db.delete(trip)
        await self.db.commit()
        logger.info("Trip deleted", extra={"trip_id": trip_id, "user_id": user_id})
