# hoozin/schemas/rooms.py
from datetime import datetime

from pydantic import BaseModel, Field


class RoomEvent(BaseModel):
    """
    One booking of a room, in wall-clock time.
    """

    start: datetime = Field(..., description="Local start time, without offset.")
    end: datetime = Field(..., description="Local end time, without offset.")
    title: str = Field("", description="Event summary as shown to attendees.")


class Room(BaseModel):
    """
    A bookable room with its upcoming bookings.

    Rebuilt on every ingestion pass; never persisted.
    """

    name: str = Field(..., description="Display name with shared prefix and capacity removed.")
    max_attendance: int | None = Field(
        None,
        description="Capacity parsed from a trailing '(<n>)' in the calendar name.",
    )
    events: list[RoomEvent] = Field(default_factory=list)
