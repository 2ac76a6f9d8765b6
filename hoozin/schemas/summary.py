# hoozin/schemas/summary.py
from datetime import date as date_type

from pydantic import BaseModel, Field

from hoozin.schemas.locations import LocationEntry, Person, WorkLocation


class PersonLocation(BaseModel):
    """
    A person as listed under one location group of a day.
    """

    email: str
    name: str
    display_name: str = Field(
        ...,
        description="Shortest unambiguous form of the name among all people.",
        examples=["Kari N."],
    )
    assumed: bool = Field(
        ...,
        description="True when no working-location event exists and the preferred location was used.",
    )


class DaySummary(BaseModel):
    """
    Everyone visible, grouped by working location, for a single date.
    """

    date: date_type = Field(..., description="The calendar date summarized.")
    label: str = Field(..., description="Human label: Today, Tomorrow, weekday or ISO date.")
    office: list[PersonLocation] = Field(default_factory=list)
    remote: list[PersonLocation] = Field(default_factory=list)
    unknown: list[PersonLocation] = Field(default_factory=list)


class LocationsResponse(BaseModel):
    """
    Payload returned by GET /locations.
    """

    assumed_location: WorkLocation = Field(
        ...,
        description="Fallback location for people without an explicit entry.",
    )
    people: list[Person] = Field(..., description="People in discovery order.")
    ignored: list[str] = Field(..., description="Emails hidden from the summaries.")
    days: list[DaySummary]
    entries: list[LocationEntry] = Field(
        ...,
        description="Every explicit location entry folded during this pass.",
    )


class PreferredLocationUpdate(BaseModel):
    location: WorkLocation = Field(..., examples=["officeLocation"])


class IgnoreStateUpdate(BaseModel):
    """
    Mirrors a "visible" checkbox: `ignored=true` shows the person again,
    `ignored=false` hides them.
    """

    ignored: bool


class PreferencesRead(BaseModel):
    preferred_location: WorkLocation
    ignored: list[str]
