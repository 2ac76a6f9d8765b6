# hoozin/services/ingestion.py
from __future__ import annotations

import logging
from datetime import date as date_type, datetime, time, timedelta
from typing import Any, AsyncIterator, Callable, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from hoozin.schemas.calendar import (
    CalendarListEntry,
    DefaultEvent,
    DirectoryPerson,
    parse_calendar_event,
)
from hoozin.schemas.locations import Action, AddPersonEvent, DiscoveredPerson
from hoozin.schemas.rooms import Room, RoomEvent
from hoozin.services.google_client import GoogleClient
from hoozin.services.room_names import simplify_room_names

logger = logging.getLogger(__name__)

RESOURCE_CALENDAR_SUFFIX = "@resource.calendar.google.com"


def _utc_midnight(day: date_type) -> str:
    return datetime.combine(day, time.min).isoformat(timespec="seconds") + "Z"


def _wall_clock(value: datetime) -> datetime:
    return value.replace(tzinfo=None)


class IngestionPipeline:
    """
    Drives the paginated Google calls for one ingestion pass.

    The pipeline never touches State directly: it emits actions through the
    `dispatch` callable it is given, one at a time, in the order responses
    resolve.

    Failure semantics
    -----------------
    - A malformed record (person without primary email, event that does
      not validate) is skipped and logged.
    - Any client error (including AuthenticationRequiredError) stops the
      pass and propagates. Actions are only emitted from responses that
      were fully received, so previously folded State stays intact.
    """

    def __init__(
        self,
        client: GoogleClient,
        *,
        people_base_url: str = "https://people.googleapis.com",
        calendar_base_url: str = "https://www.googleapis.com/calendar/v3",
        time_zone: str = "Europe/Oslo",
        people_page_size: int = 100,
        events_max_results: int = 100,
        room_events_max_results: int = 10,
    ) -> None:
        self.client = client
        self.people_base_url = people_base_url.rstrip("/")
        self.calendar_base_url = calendar_base_url.rstrip("/")
        self.time_zone = time_zone
        self.people_page_size = people_page_size
        self.events_max_results = events_max_results
        self.room_events_max_results = room_events_max_results

    async def _paginate(
        self,
        url: str,
        params: Dict[str, Any],
        items_key: str,
    ) -> AsyncIterator[List[Any]]:
        """
        Yield the item list of each page, following `nextPageToken`.
        """
        page_token: Optional[str] = None
        while True:
            page_params = dict(params)
            if page_token:
                page_params["pageToken"] = page_token

            payload = await self.client.get_json(url, params=page_params)
            if not isinstance(payload, dict):
                logger.warning("Unexpected payload shape from %s; stopping pagination", url)
                return

            items = payload.get(items_key) or []
            yield items if isinstance(items, list) else []

            page_token = payload.get("nextPageToken")
            if not page_token:
                return

    # ------------------------------------------------------------------
    # People and working locations
    # ------------------------------------------------------------------

    def _events_url(self, calendar_id: str) -> str:
        return f"{self.calendar_base_url}/calendars/{quote(calendar_id, safe='')}/events"

    async def ingest_people(
        self,
        dispatch: Callable[[Action], Any],
        min_date: date_type,
        max_date: date_type,
    ) -> int:
        """
        Discover directory people and fold their working-location events.

        Returns the number of people discovered in this pass.
        """
        url = f"{self.people_base_url}/v1/people:listDirectoryPeople"
        params = {
            "readMask": "names,emailAddresses",
            "sources": "DIRECTORY_SOURCE_TYPE_DOMAIN_PROFILE",
            "pageSize": self.people_page_size,
        }

        discovered = 0
        async for page in self._paginate(url, params, "people"):
            for raw_person in page:
                try:
                    person = DirectoryPerson.model_validate(raw_person)
                except ValidationError:
                    logger.info("Skipping malformed directory entry")
                    continue

                email = person.primary_email()
                if not email:
                    logger.debug("Skipping directory entry without primary email")
                    continue
                name = person.primary_name() or email

                dispatch(DiscoveredPerson(email=email, name=name))
                discovered += 1

                await self._ingest_working_locations(dispatch, email, min_date, max_date)

        logger.info("Ingested working locations for %d people", discovered)
        return discovered

    async def _ingest_working_locations(
        self,
        dispatch: Callable[[Action], Any],
        email: str,
        min_date: date_type,
        max_date: date_type,
    ) -> None:
        params = {
            "eventTypes": "workingLocation",
            "maxResults": self.events_max_results,
            "orderBy": "updated",
            "showDeleted": "false",
            "showHiddenInvitations": "false",
            "singleEvents": "true",
            "timeMin": _utc_midnight(min_date),
            "timeMax": _utc_midnight(max_date + timedelta(days=1)),
            "timeZone": self.time_zone,
        }

        async for page in self._paginate(self._events_url(email), params, "items"):
            for raw_event in page:
                calendar_event = parse_calendar_event(raw_event)
                if calendar_event is None:
                    logger.debug("Skipping malformed event for %s", email)
                    continue
                dispatch(AddPersonEvent(email=email, calendar_event=calendar_event))

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------

    async def fetch_rooms(self, now: Optional[datetime] = None) -> List[Room]:
        """
        List resource calendars visible to the user with their next bookings.

        Room names are simplified once over the whole set.
        """
        now = now or datetime.now()
        time_min = now.replace(minute=0, second=0, microsecond=0)
        # Both bounds at hour granularity so the request is stable within the hour.
        time_max = time_min + timedelta(weeks=1)

        calendars: List[CalendarListEntry] = []
        url = f"{self.calendar_base_url}/users/me/calendarList"
        async for page in self._paginate(url, {"minAccessRole": "reader"}, "items"):
            for raw_calendar in page:
                try:
                    calendar = CalendarListEntry.model_validate(raw_calendar)
                except ValidationError:
                    logger.info("Skipping malformed calendar list entry")
                    continue
                if calendar.id.endswith(RESOURCE_CALENDAR_SUFFIX):
                    calendars.append(calendar)

        room_events: List[List[RoomEvent]] = []
        for calendar in calendars:
            params = {
                "eventTypes": "default",
                "maxResults": self.room_events_max_results,
                "orderBy": "startTime",
                "showDeleted": "false",
                "showHiddenInvitations": "false",
                "singleEvents": "true",
                "timeMin": time_min.isoformat(timespec="seconds") + "Z",
                "timeMax": time_max.isoformat(timespec="seconds") + "Z",
            }
            payload = await self.client.get_json(self._events_url(calendar.id), params=params)
            items = (payload.get("items") or []) if isinstance(payload, dict) else []

            events: List[RoomEvent] = []
            for raw_event in items:
                calendar_event = parse_calendar_event(raw_event)
                if not isinstance(calendar_event, DefaultEvent):
                    logger.debug("Skipping non-timed event in %s", calendar.summary)
                    continue
                events.append(
                    RoomEvent(
                        start=_wall_clock(calendar_event.start.date_time),
                        end=_wall_clock(calendar_event.end.date_time),
                        title=calendar_event.summary,
                    )
                )
            room_events.append(events)

        simplified = simplify_room_names([calendar.summary for calendar in calendars])
        return [
            Room(name=name, max_attendance=capacity, events=events)
            for (name, capacity), events in zip(simplified, room_events)
        ]
