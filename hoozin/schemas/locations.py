# hoozin/schemas/locations.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as date_type
from enum import Enum
from typing import Mapping, Tuple

from pydantic import BaseModel, Field

from hoozin.schemas.calendar import CalendarEvent


class WorkLocation(str, Enum):
    """
    Where a person works on a given day.
    """

    OFFICE = "officeLocation"
    HOME = "homeOffice"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "WorkLocation":
        """
        Lenient conversion used for persisted or upstream values: anything
        that is not one of the three tokens becomes UNKNOWN.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Person(BaseModel):
    """
    A directory person discovered during ingestion.
    """

    model_config = {"frozen": True}

    email: str = Field(..., description="Primary email address; identity of the person.")
    name: str = Field(..., description="Primary display name, or the email when none is set.")


class LocationEntry(BaseModel):
    """
    Public representation of one person's location on one date.
    """

    date: date_type = Field(..., description="Calendar date the entry applies to.")
    person_email: str = Field(..., description="Email of the person.")
    location: WorkLocation = Field(..., description="Declared working location.")


@dataclass(frozen=True)
class State:
    """
    Immutable snapshot of everything folded from ingestion and settings.

    `events` is keyed by (date, person email); use `location_entries()`
    for an ordered list view.
    """

    people: Tuple[Person, ...] = ()
    ignore_people: frozenset[str] = frozenset()
    assumed_location: WorkLocation = WorkLocation.UNKNOWN
    events: Mapping[Tuple[date_type, str], WorkLocation] = field(default_factory=dict)

    def location_for(self, day: date_type, email: str) -> WorkLocation | None:
        return self.events.get((day, email))

    def location_entries(self) -> list[LocationEntry]:
        return [
            LocationEntry(date=day, person_email=email, location=location)
            for (day, email), location in sorted(self.events.items())
        ]


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscoveredPerson:
    email: str
    name: str


@dataclass(frozen=True)
class AddPersonEvent:
    email: str
    calendar_event: CalendarEvent


@dataclass(frozen=True)
class UpdatePreferredLocation:
    location: WorkLocation


@dataclass(frozen=True)
class UpdateIgnoreState:
    """
    `ignored=True` removes the email from the ignore set (the person becomes
    visible); `ignored=False` adds it. The flag follows a "visible" checkbox.
    """

    email: str
    ignored: bool


Action = DiscoveredPerson | AddPersonEvent | UpdatePreferredLocation | UpdateIgnoreState
