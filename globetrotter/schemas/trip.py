"""
Trip schemas for API requests/responses
"""
from pydantic import BaseModel, ConfigDict, Field
import datetime as dt
from typing import Optional

from globetrotter.schemas.base import RequestModel


class TripCreate(RequestModel):
    """Schema for creating a new trip; presence of required fields is checked by the service"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    cover_photo_url: Optional[str] = Field(None, max_length=1024)


class TripUpdate(RequestModel):
    """Schema for updating a trip; only provided fields change"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    cover_photo_url: Optional[str] = Field(None, max_length=1024)


class TripRead(BaseModel):
    """Schema for trip read response"""
    id: int
    user_id: int
    title: str
    description: Optional[str]
    start_date: dt.date
    end_date: dt.date
    cover_photo_url: Optional[str]
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
