"""
Itinerary day and block schemas
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
import datetime as dt
from typing import Optional

from globetrotter.models.itinerary import BlockType
from globetrotter.schemas.base import RequestModel


class DayCreate(RequestModel):
    day_number: Optional[int] = None
    date: Optional[dt.date] = None
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class DayUpdate(RequestModel):
    day_number: Optional[int] = None
    date: Optional[dt.date] = None
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class DayRead(BaseModel):
    id: int
    trip_id: int
    day_number: int
    date: dt.date
    city: Optional[str]
    country: Optional[str]

    model_config = ConfigDict(from_attributes=True)


# NUMERIC(10, 2) ceiling
MAX_ESTIMATED_COST = 99999999.99


def _naive_time(v: Optional[dt.time]) -> Optional[dt.time]:
    # Block times are wall-clock times of the day's local date
    if v is not None and v.tzinfo is not None:
        raise ValueError('Time must not carry a UTC offset')
    return v


class BlockCreate(RequestModel):
    # block_type stays a plain string so an unknown kind gets a specific message
    block_type: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    estimated_cost: Optional[float] = Field(
        None, ge=0, le=MAX_ESTIMATED_COST, allow_inf_nan=False
    )

    @field_validator('start_time', 'end_time')
    @classmethod
    def reject_offset(cls, v):
        return _naive_time(v)


class BlockUpdate(RequestModel):
    block_type: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    estimated_cost: Optional[float] = Field(
        None, ge=0, le=MAX_ESTIMATED_COST, allow_inf_nan=False
    )

    @field_validator('start_time', 'end_time')
    @classmethod
    def reject_offset(cls, v):
        return _naive_time(v)


class BlockRead(BaseModel):
    id: int
    itinerary_day_id: int
    block_type: BlockType
    title: str
    description: Optional[str]
    start_time: dt.time
    end_time: dt.time
    estimated_cost: Optional[float]

    model_config = ConfigDict(from_attributes=True)
