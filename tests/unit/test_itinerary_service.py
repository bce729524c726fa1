"""
Unit tests for the itinerary scheduler: days, blocks and the ownership chain
"""
import pytest
from datetime import date, time, timedelta
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from globetrotter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from globetrotter.models import BlockType, ItineraryBlock, ItineraryDay, Trip
from globetrotter.schemas.itinerary import BlockCreate, BlockUpdate, DayCreate, DayUpdate
from globetrotter.services.itinerary_service import ItineraryService, parse_block_type
from globetrotter.services.scheduling_rules import RejectOverlap, UniqueDayNumbers

START = date(2030, 6, 1)


@pytest.fixture
async def trip(db_session, test_user):
    trip = Trip(user_id=test_user.id, title="Lisbon", start_date=START, end_date=START + timedelta(days=3))
    db_session.add(trip)
    await db_session.commit()
    return trip


@pytest.fixture
def service(db_session):
    return ItineraryService(db_session)


@pytest.fixture
async def day(service, trip, test_user):
    return await service.create_day(trip.id, DayCreate(day_number=1, date=START, city="Lisbon"), test_user.id)


def block(start, end, **kwargs):
    data = {"block_type": "ACTIVITY", "title": "Walk", "start_time": start, "end_time": end}
    data.update(kwargs)
    return BlockCreate(**data)


async def _count(db, model):
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# Days

async def test_create_day(service, trip, test_user):
    day = await service.create_day(
        trip.id, DayCreate(day_number=2, date=START + timedelta(days=1), city=" Porto ", country=""), test_user.id
    )
    assert day.id is not None
    assert day.trip_id == trip.id
    assert day.day_number == 2
    assert day.city == "Porto"
    assert day.country is None


@pytest.mark.parametrize("data", [DayCreate(date=START), DayCreate(day_number=1), DayCreate()])
async def test_create_day_requires_number_and_date(service, trip, test_user, data):
    with pytest.raises(BadRequestError, match="Day number and date are required"):
        await service.create_day(trip.id, data, test_user.id)


async def test_create_day_rejects_non_positive_number(service, trip, test_user):
    with pytest.raises(BadRequestError):
        await service.create_day(trip.id, DayCreate(day_number=0, date=START), test_user.id)


async def test_create_day_on_foreign_trip_is_not_found(service, trip, other_user, db_session):
    with pytest.raises(NotFoundError, match="Trip not found"):
        await service.create_day(trip.id, DayCreate(day_number=1, date=START), other_user.id)
    assert await _count(db_session, ItineraryDay) == 0


async def test_list_days_ordered_by_day_number(service, trip, test_user):
    for n in (3, 1, 2):
        await service.create_day(trip.id, DayCreate(day_number=n, date=START), test_user.id)
    days = await service.list_days(trip.id, test_user.id)
    assert [d.day_number for d in days] == [1, 2, 3]
    again = await service.list_days(trip.id, test_user.id)
    assert [d.id for d in again] == [d.id for d in days]


async def test_list_days_of_foreign_trip_not_found(service, trip, other_user):
    with pytest.raises(NotFoundError):
        await service.list_days(trip.id, other_user.id)


async def test_duplicate_day_numbers_allowed_by_default(service, trip, test_user):
    await service.create_day(trip.id, DayCreate(day_number=1, date=START), test_user.id)
    await service.create_day(trip.id, DayCreate(day_number=1, date=START), test_user.id)
    assert len(await service.list_days(trip.id, test_user.id)) == 2


async def test_unique_day_numbers_policy(db_session, trip, test_user):
    service = ItineraryService(db_session, day_number_policy=UniqueDayNumbers())
    await service.create_day(trip.id, DayCreate(day_number=1, date=START), test_user.id)
    second = await service.create_day(trip.id, DayCreate(day_number=2, date=START), test_user.id)
    with pytest.raises(ConflictError):
        await service.create_day(trip.id, DayCreate(day_number=1, date=START), test_user.id)
    with pytest.raises(ConflictError):
        await service.update_day(second.id, DayUpdate(day_number=1), test_user.id)
    # Keeping its own number is not a clash
    updated = await service.update_day(second.id, DayUpdate(day_number=2, city="Faro"), test_user.id)
    assert updated.city == "Faro"


async def test_update_day(service, day, test_user):
    updated = await service.update_day(day.id, DayUpdate(city="Sintra"), test_user.id)
    assert updated.city == "Sintra"
    assert updated.day_number == 1
    assert updated.date == START


async def test_update_day_requires_fields(service, day, test_user):
    with pytest.raises(BadRequestError, match="No fields to update"):
        await service.update_day(day.id, DayUpdate(), test_user.id)


async def test_update_day_ignores_null_for_required_columns(service, day, test_user):
    with pytest.raises(BadRequestError, match="No fields to update"):
        await service.update_day(day.id, DayUpdate(day_number=None, date=None), test_user.id)


async def test_update_and_delete_foreign_day_not_found(service, day, other_user):
    with pytest.raises(NotFoundError, match="Itinerary day not found"):
        await service.update_day(day.id, DayUpdate(city="Nope"), other_user.id)
    with pytest.raises(NotFoundError, match="Itinerary day not found"):
        await service.delete_day(day.id, other_user.id)


async def test_delete_day_removes_blocks(service, day, test_user, db_session):
    await service.create_block(day.id, block(time(9), time(10)), test_user.id)
    await service.delete_day(day.id, test_user.id)
    assert await _count(db_session, ItineraryDay) == 0
    assert await _count(db_session, ItineraryBlock) == 0


# Blocks

async def test_create_block(service, day, test_user):
    created = await service.create_block(
        day.id, block(time(9), time(11), estimated_cost=12.5, description="Alfama"), test_user.id
    )
    assert created.block_type == BlockType.ACTIVITY
    assert created.start_time == time(9)
    assert created.end_time == time(11)
    assert created.estimated_cost == 12.5


@pytest.mark.parametrize("data,message", [
    (BlockCreate(title="X", start_time=time(9), end_time=time(10)),
     "Block type, title, start time, and end time are required"),
    (BlockCreate(block_type="REST", start_time=time(9), end_time=time(10)),
     "Block type, title, start time, and end time are required"),
    (BlockCreate(block_type="PARTY", title="X", start_time=time(9), end_time=time(10)),
     "Invalid block type"),
    (BlockCreate(block_type="REST", title="X", start_time=time(11), end_time=time(9)),
     "End time must be after start time"),
    (BlockCreate(block_type="REST", title="X", start_time=time(9), end_time=time(9)),
     "End time must be after start time"),
    (BlockCreate(block_type="REST", title="   ", start_time=time(9), end_time=time(10)),
     "Block type, title, start time, and end time are required"),
])
async def test_create_block_validation(service, day, test_user, db_session, data, message):
    with pytest.raises(BadRequestError) as exc_info:
        await service.create_block(day.id, data, test_user.id)
    assert exc_info.value.message == message
    assert await _count(db_session, ItineraryBlock) == 0


async def test_block_title_is_stripped(service, day, test_user):
    created = await service.create_block(day.id, block(time(9), time(10), title="  Tram 28 "), test_user.id)
    assert created.title == "Tram 28"
    updated = await service.update_block(created.id, BlockUpdate(title=" Castle\t"), test_user.id)
    assert updated.title == "Castle"


@pytest.mark.parametrize("model", [BlockCreate, BlockUpdate])
@pytest.mark.parametrize("cost", [-1, -0.01, float("nan"), float("inf"), float("-inf"), 1e9, 100000000])
def test_block_schemas_bound_estimated_cost(model, cost):
    with pytest.raises(ValidationError):
        model(estimated_cost=cost)


@pytest.mark.parametrize("model", [BlockCreate, BlockUpdate])
def test_block_schemas_accept_cost_at_bounds(model):
    assert model(estimated_cost=0).estimated_cost == 0
    assert model(estimated_cost=99999999.99).estimated_cost == 99999999.99


@pytest.mark.parametrize("model", [BlockCreate, BlockUpdate])
@pytest.mark.parametrize("field", ["start_time", "end_time"])
@pytest.mark.parametrize("value", ["09:00Z", "09:00+01:00", "09:00:00-05:00"])
def test_block_schemas_reject_offset_times(model, field, value):
    with pytest.raises(ValidationError, match="UTC offset"):
        model(**{field: value})


def test_block_schemas_accept_naive_times():
    data = BlockUpdate(start_time="09:00", end_time="10:30:00")
    assert (data.start_time, data.end_time) == (time(9), time(10, 30))


async def test_table_constraints_reject_bad_rows(db_session, day, test_user):
    # rollback expires loaded instances; keep plain ids
    day_id, user_id = day.id, test_user.id
    db_session.add(ItineraryBlock(
        itinerary_day_id=day_id, block_type=BlockType.REST, title="Backwards",
        start_time=time(11), end_time=time(9),
    ))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    db_session.add(ItineraryBlock(
        itinerary_day_id=day_id, block_type=BlockType.REST, title="Refund",
        start_time=time(9), end_time=time(10), estimated_cost=-3,
    ))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    db_session.add(Trip(user_id=user_id, title="Inverted", start_date=START, end_date=START - timedelta(days=1)))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()

    assert await _count(db_session, ItineraryBlock) == 0


async def test_validation_runs_before_ownership(service, test_user):
    # Nonexistent day, but malformed input is reported first
    with pytest.raises(BadRequestError):
        await service.create_block(9999, block(time(11), time(9)), test_user.id)


async def test_create_block_in_foreign_day_not_found(service, day, other_user):
    with pytest.raises(NotFoundError, match="Itinerary day not found"):
        await service.create_block(day.id, block(time(9), time(10)), other_user.id)


async def test_list_blocks_ordered_by_start_time(service, day, test_user):
    for start, end in ((time(14), time(15)), (time(9), time(11)), (time(12), time(13))):
        await service.create_block(day.id, block(start, end), test_user.id)
    blocks = await service.list_blocks(day.id, test_user.id)
    assert [b.start_time for b in blocks] == [time(9), time(12), time(14)]


async def test_overlap_allowed_by_default(service, day, test_user):
    await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    await service.create_block(day.id, block(time(10), time(12)), test_user.id)
    assert len(await service.list_blocks(day.id, test_user.id)) == 2


async def test_reject_overlap_policy(db_session, day, test_user):
    service = ItineraryService(db_session, overlap_policy=RejectOverlap())
    first = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    # Touching ranges are fine
    second = await service.create_block(day.id, block(time(11), time(12)), test_user.id)
    with pytest.raises(ConflictError) as exc_info:
        await service.create_block(day.id, block(time(10), time(10, 30)), test_user.id)
    assert exc_info.value.details["conflicting_block_id"] == first.id
    with pytest.raises(ConflictError):
        await service.update_block(second.id, BlockUpdate(start_time=time(10)), test_user.id)
    # Moving a block within its own old range does not clash with itself
    moved = await service.update_block(first.id, BlockUpdate(start_time=time(9, 30)), test_user.id)
    assert moved.start_time == time(9, 30)


async def test_update_block_partial(service, day, test_user):
    created = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    updated = await service.update_block(
        created.id, BlockUpdate(title="Museum", block_type="REST"), test_user.id
    )
    assert updated.title == "Museum"
    assert updated.block_type == BlockType.REST
    assert updated.start_time == time(9)


async def test_update_block_validates_merged_times(service, day, test_user):
    created = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    with pytest.raises(BadRequestError, match="End time must be after start time"):
        await service.update_block(created.id, BlockUpdate(start_time=time(12)), test_user.id)
    with pytest.raises(BadRequestError, match="End time must be after start time"):
        await service.update_block(created.id, BlockUpdate(end_time=time(8)), test_user.id)
    stored = (await service.list_blocks(day.id, test_user.id))[0]
    assert (stored.start_time, stored.end_time) == (time(9), time(11))


@pytest.mark.parametrize("data,message", [
    (BlockUpdate(), "No fields to update"),
    (BlockUpdate(block_type="NAP"), "Invalid block type"),
    (BlockUpdate(title="  "), "Title cannot be empty"),
])
async def test_update_block_rejects_invalid(service, day, test_user, data, message):
    created = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    with pytest.raises(BadRequestError) as exc_info:
        await service.update_block(created.id, data, test_user.id)
    assert exc_info.value.message == message


async def test_foreign_block_not_found_like_missing(service, day, test_user, other_user):
    created = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    for user_id, block_id in ((other_user.id, created.id), (test_user.id, created.id + 100)):
        with pytest.raises(NotFoundError, match="Itinerary block not found"):
            await service.update_block(block_id, BlockUpdate(title="x"), user_id)
        with pytest.raises(NotFoundError, match="Itinerary block not found"):
            await service.delete_block(block_id, user_id)


async def test_delete_block(service, day, test_user):
    created = await service.create_block(day.id, block(time(9), time(11)), test_user.id)
    await service.delete_block(created.id, test_user.id)
    assert await service.list_blocks(day.id, test_user.id) == []


def test_parse_block_type():
    assert parse_block_type("SLEEP") == BlockType.SLEEP
    assert parse_block_type(BlockType.GAP) == BlockType.GAP
    with pytest.raises(BadRequestError):
        parse_block_type("sleep")
