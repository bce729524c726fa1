"""
Itinerary Service - days within a trip and time blocks within a day

Every operation re-derives ownership through the join chain
block -> day -> trip -> user. A row that exists but belongs to someone else
is reported exactly like a missing row.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from globetrotter.core.exceptions import BadRequestError, NotFoundError
from globetrotter.models.itinerary import BlockType, ItineraryBlock, ItineraryDay
from globetrotter.models.trip import Trip
from globetrotter.schemas.itinerary import BlockCreate, BlockUpdate, DayCreate, DayUpdate
from globetrotter.services.scheduling_rules import (
    AllowDuplicateDayNumbers,
    AllowOverlap,
    DayNumberPolicy,
    OverlapPolicy,
)

logger = logging.getLogger(__name__)

TRIP_NOT_FOUND = "Trip not found"
DAY_NOT_FOUND = "Itinerary day not found"
BLOCK_NOT_FOUND = "Itinerary block not found"
NO_FIELDS = "No fields to update"

# Columns that may not be cleared through a partial update
_DAY_REQUIRED = ("day_number", "date")
_BLOCK_REQUIRED = ("block_type", "title", "start_time", "end_time")


def parse_block_type(value: Any) -> BlockType:
    """Map a client value onto the closed set of block kinds."""
    if isinstance(value, BlockType):
        return value
    try:
        return BlockType(value)
    except ValueError:
        raise BadRequestError(
            "Invalid block type",
            details={"allowed": [t.value for t in BlockType]},
        )


def _patch(fields: Dict[str, Any], required: tuple) -> Dict[str, Any]:
    """Drop explicit nulls for non-nullable columns, keep the rest."""
    return {k: v for k, v in fields.items() if not (k in required and v is None)}


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_day_number(day_number: int) -> None:
    if day_number < 1:
        raise BadRequestError("Day number must be a positive integer")


def _check_times(start_time, end_time) -> None:
    if start_time >= end_time:
        raise BadRequestError("End time must be after start time")


class ItineraryService:
    """Manages itinerary days and blocks for trips owned by the caller"""

    def __init__(
        self,
        db: AsyncSession,
        overlap_policy: Optional[OverlapPolicy] = None,
        day_number_policy: Optional[DayNumberPolicy] = None,
    ):
        self.db = db
        self.overlap_policy = overlap_policy or AllowOverlap()
        self.day_number_policy = day_number_policy or AllowDuplicateDayNumbers()

    # ------------------------------------------------------------------
    # Ownership chain
    # ------------------------------------------------------------------

    async def _require_trip(self, trip_id: int, user_id: int) -> int:
        stmt = select(Trip.id).where(Trip.id == trip_id, Trip.user_id == user_id)
        result = await self.db.execute(stmt)
        owned = result.scalar_one_or_none()
        if owned is None:
            raise NotFoundError(TRIP_NOT_FOUND)
        return owned

    async def _require_day(self, day_id: int, user_id: int) -> ItineraryDay:
        stmt = (
            select(ItineraryDay)
            .join(Trip, ItineraryDay.trip_id == Trip.id)
            .where(ItineraryDay.id == day_id, Trip.user_id == user_id)
        )
        result = await self.db.execute(stmt)
        day = result.scalar_one_or_none()
        if day is None:
            raise NotFoundError(DAY_NOT_FOUND)
        return day

    async def _require_block(self, block_id: int, user_id: int) -> ItineraryBlock:
        stmt = (
            select(ItineraryBlock)
            .join(ItineraryDay, ItineraryBlock.itinerary_day_id == ItineraryDay.id)
            .join(Trip, ItineraryDay.trip_id == Trip.id)
            .where(ItineraryBlock.id == block_id, Trip.user_id == user_id)
        )
        result = await self.db.execute(stmt)
        block = result.scalar_one_or_none()
        if block is None:
            raise NotFoundError(BLOCK_NOT_FOUND)
        return block

    # ------------------------------------------------------------------
    # Days
    # ------------------------------------------------------------------

    async def create_day(self, trip_id: int, data: DayCreate, user_id: int) -> ItineraryDay:
        """
        Create an itinerary day under a trip owned by the caller

        Args:
            trip_id: Parent trip ID
            data: Day number, date and optional city/country
            user_id: Authenticated user ID

        Returns:
            Created day

        Raises:
            BadRequestError: Day number or date missing or invalid
            NotFoundError: Trip absent or not owned by the caller
        """
        if data.day_number is None or data.date is None:
            raise BadRequestError("Day number and date are required")
        _check_day_number(data.day_number)

        await self._require_trip(trip_id, user_id)
        await self.day_number_policy.check(self.db, trip_id, data.day_number)

        day = ItineraryDay(
            trip_id=trip_id,
            day_number=data.day_number,
            date=data.date,
            city=_blank_to_none(data.city),
            country=_blank_to_none(data.country),
        )
        self.db.add(day)
        await self.db.commit()
        await self.db.refresh(day)
        logger.info("Itinerary day created", extra={"trip_id": trip_id, "day_id": day.id})
        return day

    async def list_days(self, trip_id: int, user_id: int) -> List[ItineraryDay]:
        """Days of an owned trip in ascending day_number order."""
        await self._require_trip(trip_id, user_id)
        stmt = (
            select(ItineraryDay)
            .where(ItineraryDay.trip_id == trip_id)
            .order_by(ItineraryDay.day_number.asc(), ItineraryDay.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_day(self, day_id: int, data: DayUpdate, user_id: int) -> ItineraryDay:
        fields = _patch(data.provided_fields(), _DAY_REQUIRED)
        if not fields:
            raise BadRequestError(NO_FIELDS)
        if "day_number" in fields:
            _check_day_number(fields["day_number"])
        for key in ("city", "country"):
            if key in fields:
                fields[key] = _blank_to_none(fields[key])

        day = await self._require_day(day_id, user_id)
        if "day_number" in fields and fields["day_number"] != day.day_number:
            await self.day_number_policy.check(
                self.db, day.trip_id, fields["day_number"], exclude_day_id=day.id
            )

        for field, value in fields.items():
            setattr(day, field, value)

        await self.db.commit()
        await self.db.refresh(day)
        return day

    async def delete_day(self, day_id: int, user_id: int) -> None:
        """Delete an owned day together with its blocks."""
        day = await self._require_day(day_id, user_id)
        await self.db.delete(day)
        await self.db.commit()
        logger.info("Itinerary day deleted", extra={"day_id": day_id})

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def create_block(self, day_id: int, data: BlockCreate, user_id: int) -> ItineraryBlock:
        """
        Create a time block inside a day owned by the caller

        Validation (required fields, block type, start < end) runs before
        the ownership lookup so malformed input never reaches the database.
        Cost bounds and naive times are enforced by the request schema.
        """
        title = (data.title or "").strip()
        if not data.block_type or not title or data.start_time is None or data.end_time is None:
            raise BadRequestError("Block type, title, start time, and end time are required")
        block_type = parse_block_type(data.block_type)
        _check_times(data.start_time, data.end_time)

        day = await self._require_day(day_id, user_id)
        await self.overlap_policy.check(self.db, day.id, data.start_time, data.end_time)

        block = ItineraryBlock(
            itinerary_day_id=day.id,
            block_type=block_type,
            title=title,
            description=data.description or None,
            start_time=data.start_time,
            end_time=data.end_time,
            estimated_cost=data.estimated_cost,
        )
        self.db.add(block)
        await self.db.commit()
        await self.db.refresh(block)
        logger.info("Itinerary block created", extra={"day_id": day.id, "block_id": block.id})
        return block

    async def list_blocks(self, day_id: int, user_id: int) -> List[ItineraryBlock]:
        """Blocks of an owned day in ascending start_time order."""
        day = await self._require_day(day_id, user_id)
        stmt = (
            select(ItineraryBlock)
            .where(ItineraryBlock.itinerary_day_id == day.id)
            .order_by(ItineraryBlock.start_time.asc(), ItineraryBlock.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update_block(self, block_id: int, data: BlockUpdate, user_id: int) -> ItineraryBlock:
        """
        Apply a partial update to an owned block

        The stored block is loaded, the patch merged in memory and the whole
        resulting record validated, so changing only one end of the time
        range is still checked against the unchanged end.
        """
        fields = _patch(data.provided_fields(), _BLOCK_REQUIRED)
        if not fields:
            raise BadRequestError(NO_FIELDS)
        if "block_type" in fields:
            fields["block_type"] = parse_block_type(fields["block_type"])
        if "title" in fields:
            fields["title"] = fields["title"].strip()
            if not fields["title"]:
                raise BadRequestError("Title cannot be empty")
        if "start_time" in fields and "end_time" in fields:
            _check_times(fields["start_time"], fields["end_time"])

        block = await self._require_block(block_id, user_id)

        start_time = fields.get("start_time", block.start_time)
        end_time = fields.get("end_time", block.end_time)
        _check_times(start_time, end_time)
        if "start_time" in fields or "end_time" in fields:
            await self.overlap_policy.check(
                self.db, block.itinerary_day_id, start_time, end_time, exclude_block_id=block.id
            )

        for field, value in fields.items():
            setattr(block, field, value)

        await self.db.commit()
        await self.db.refresh(block)
        return block

    async def delete_block(self, block_id: int, user_id: int) -> None:
        block = await self._require_block(block_id, user_id)
        await self.db.delete(block)
        await self.db.commit()
        logger.info("Itinerary block deleted", extra={"block_id": block_id})
