"""
Itinerary models: calendar days within a trip and time blocks within a day
"""
from sqlalchemy import CheckConstraint, Column, Integer, String, Date, Time, DateTime, ForeignKey, Text, Numeric, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from globetrotter.core.db import Base


class BlockType(str, enum.Enum):
    """Closed set of block kinds"""
    ACTIVITY = "ACTIVITY"
    REST = "REST"
    SLEEP = "SLEEP"
    GAP = "GAP"


class ItineraryDay(Base):
    """
    One calendar date of a trip. day_number is caller-assigned; it is not
    unique per trip at the schema level.
    """
    __tablename__ = "itinerary_days"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="days")
    blocks = relationship(
        "ItineraryBlock",
        back_populates="day",
        cascade="all, delete-orphan",
    )


class ItineraryBlock(Base):
    """Typed, time-bounded activity within a day (start_time < end_time)"""
    __tablename__ = "itinerary_blocks"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_itinerary_blocks_time_order"),
        CheckConstraint("estimated_cost IS NULL OR estimated_cost >= 0", name="ck_itinerary_blocks_cost"),
    )

    id = Column(Integer, primary_key=True, index=True)
    itinerary_day_id = Column(
        Integer, ForeignKey("itinerary_days.id", ondelete="CASCADE"), nullable=False, index=True
    )
    block_type = Column(SQLEnum(BlockType, name="block_type"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    estimated_cost = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    day = relationship("ItineraryDay", back_populates="blocks")
