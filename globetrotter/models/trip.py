"""
Trip model: a user-owned travel plan with a date range
"""
from sqlalchemy import CheckConstraint, Column, Integer, String, Date, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from globetrotter.core.db import Base


class Trip(Base):
    """
    Trip owns its itinerary days; deleting a trip removes days and blocks
    """
    __tablename__ = "trips"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_trips_date_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    cover_photo_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="trips")
    days = relationship(
        "ItineraryDay",
        back_populates="trip",
        cascade="all, delete-orphan",
    )
