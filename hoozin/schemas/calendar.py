# hoozin/schemas/calendar.py
"""
Models for the subset of Google People / Calendar payloads we consume.

Only the fields the ingestion pipeline reads are declared; everything else
in the upstream JSON is ignored.
"""
from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class _GoogleModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class _Metadata(_GoogleModel):
    primary: bool = False


class EventDate(_GoogleModel):
    date: date_type


class EventDateTime(_GoogleModel):
    date_time: datetime = Field(..., alias="dateTime")
    time_zone: Optional[str] = Field(None, alias="timeZone")


class WorkingLocationProperties(_GoogleModel):
    type: Optional[str] = None


class WorkingLocationEvent(_GoogleModel):
    """
    All-day event classifying [start, end) as office or home for one person.

    `end` is exclusive, as in the Calendar API.
    """

    event_type: Literal["workingLocation"] = Field(..., alias="eventType")
    start: EventDate
    end: EventDate
    working_location_properties: Optional[WorkingLocationProperties] = Field(
        None, alias="workingLocationProperties"
    )

    @property
    def location_type(self) -> Optional[str]:
        if self.working_location_properties is None:
            return None
        return self.working_location_properties.type


class OutOfOfficeEvent(_GoogleModel):
    event_type: Literal["outOfOffice"] = Field(..., alias="eventType")
    start: EventDateTime
    end: EventDateTime


class DefaultEvent(_GoogleModel):
    event_type: Literal["default"] = Field(..., alias="eventType")
    summary: str = ""
    start: EventDateTime
    end: EventDateTime


CalendarEvent = Annotated[
    Union[WorkingLocationEvent, OutOfOfficeEvent, DefaultEvent],
    Field(discriminator="event_type"),
]

_calendar_event_adapter: TypeAdapter[Any] = TypeAdapter(CalendarEvent)


def parse_calendar_event(raw: Any) -> Optional[Union[WorkingLocationEvent, OutOfOfficeEvent, DefaultEvent]]:
    """
    Validate one item of an events listing.

    Returns None for malformed items and for event kinds we do not model.
    """
    try:
        return _calendar_event_adapter.validate_python(raw)
    except ValidationError:
        return None


class _EmailAddress(_GoogleModel):
    value: str
    metadata: Optional[_Metadata] = None


class _Name(_GoogleModel):
    display_name: str = Field(..., alias="displayName")
    metadata: Optional[_Metadata] = None


class DirectoryPerson(_GoogleModel):
    """
    One entry of `people:listDirectoryPeople`.
    """

    email_addresses: List[_EmailAddress] = Field(default_factory=list, alias="emailAddresses")
    names: List[_Name] = Field(default_factory=list)

    def primary_email(self) -> Optional[str]:
        for address in self.email_addresses:
            if address.metadata is not None and address.metadata.primary:
                return address.value or None
        return None

    def primary_name(self) -> Optional[str]:
        for name in self.names:
            if name.metadata is not None and name.metadata.primary:
                return name.display_name or None
        return None


class CalendarListEntry(_GoogleModel):
    id: str
    summary: str = ""
