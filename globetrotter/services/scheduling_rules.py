"""
Pluggable scheduling rules for the itinerary builder.

Sibling overlap between blocks and duplicate day numbers are allowed by
default. Deployments that want stricter itineraries switch on the rejecting
variants through ``ITINERARY_BLOCK_OVERLAP`` / ``ITINERARY_UNIQUE_DAY_NUMBERS``.
"""
import abc
import datetime as dt
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from globetrotter.config.settings import ItinerarySettings
from globetrotter.core.exceptions import ConflictError
from globetrotter.models.itinerary import ItineraryBlock, ItineraryDay


def time_ranges_overlap(start_a: dt.time, end_a: dt.time, start_b: dt.time, end_b: dt.time) -> bool:
    """Half-open [start, end) intersection; touching ranges do not overlap."""
    return start_a < end_b and start_b < end_a


class OverlapPolicy(abc.ABC):
    """Decides whether a block may share time with its siblings in a day"""

    @abc.abstractmethod
    async def check(
        self,
        db: AsyncSession,
        day_id: int,
        start_time: dt.time,
        end_time: dt.time,
        exclude_block_id: Optional[int] = None,
    ) -> None:
        ...


class AllowOverlap(OverlapPolicy):
    async def check(self, db, day_id, start_time, end_time, exclude_block_id=None) -> None:
        return None


class RejectOverlap(OverlapPolicy):
    """Raises ConflictError when the range intersects any sibling block"""

    async def check(self, db, day_id, start_time, end_time, exclude_block_id=None) -> None:
        stmt = select(ItineraryBlock).where(ItineraryBlock.itinerary_day_id == day_id)
        if exclude_block_id is not None:
            stmt = stmt.where(ItineraryBlock.id != exclude_block_id)
        result = await db.execute(stmt)
        clash = first_overlap(result.scalars().all(), start_time, end_time)
        if clash is not None:
            raise ConflictError(
                "Block overlaps an existing block",
                details={
                    "conflicting_block_id": clash.id,
                    "start_time": clash.start_time.isoformat(),
                    "end_time": clash.end_time.isoformat(),
                },
            )


def first_overlap(
    blocks: Iterable[ItineraryBlock], start_time: dt.time, end_time: dt.time
) -> Optional[ItineraryBlock]:
    for block in sorted(blocks, key=lambda b: (b.start_time, b.id)):
        if time_ranges_overlap(start_time, end_time, block.start_time, block.end_time):
            return block
    return None


class DayNumberPolicy(abc.ABC):
    """Decides whether a day number may repeat within a trip"""

    @abc.abstractmethod
    async def check(
        self,
        db: AsyncSession,
        trip_id: int,
        day_number: int,
        exclude_day_id: Optional[int] = None,
    ) -> None:
        ...


class AllowDuplicateDayNumbers(DayNumberPolicy):
    async def check(self, db, trip_id, day_number, exclude_day_id=None) -> None:
        return None


class UniqueDayNumbers(DayNumberPolicy):
    async def check(self, db, trip_id, day_number, exclude_day_id=None) -> None:
        stmt = select(ItineraryDay.id).where(
            ItineraryDay.trip_id == trip_id,
            ItineraryDay.day_number == day_number,
        )
        if exclude_day_id is not None:
            stmt = stmt.where(ItineraryDay.id != exclude_day_id)
        result = await db.execute(stmt.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(
                f"Day number {day_number} already exists for this trip",
                details={"day_number": day_number},
            )


def policies_from_settings(config: ItinerarySettings) -> tuple[OverlapPolicy, DayNumberPolicy]:
    overlap = RejectOverlap() if config.block_overlap == "reject" else AllowOverlap()
    day_numbers = UniqueDayNumbers() if config.unique_day_numbers else AllowDuplicateDayNumbers()
    return overlap, day_numbers
