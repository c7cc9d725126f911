"""
SQLAlchemy ORM models.

Tables
------
* ``rides`` -- one row per trip request, from creation to completion or
  cancellation.  Rows are never deleted.

Indexes
-------
* **B-Tree** on ``status`` (driver dashboard filters on it) and
  ``created_at`` (list order).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Float, Index, String, Text

from .database import Base
from ridetrack.domain.enums import RideStatus
from ridetrack.domain.lifecycle import MAX_DRIVER_NAME_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_ride_id() -> str:
    return str(uuid.uuid4())


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(String(36), primary_key=True, default=new_ride_id)

    pickup = Column(Text, nullable=False)
    destination = Column(Text, nullable=False)
    city = Column(Text, nullable=False)

    estimate = Column(Float, nullable=False)
    offered_price = Column(Float, nullable=True)

    status = Column(
        Enum(RideStatus, name="ridestatus"),
        default=RideStatus.REQUESTED,
        nullable=False,
    )
    driver_name = Column(String(MAX_DRIVER_NAME_LENGTH), nullable=True)

    # Python-side clock so successive writes get distinct sub-second stamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_rides_status", "status"),
        Index("idx_rides_created", "created_at"),
    )
