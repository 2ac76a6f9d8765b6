# tests/test_ingestion.py
from datetime import date, datetime

import pytest

from hoozin.schemas.locations import WorkLocation
from hoozin.services.event_reducer import StateContainer
from hoozin.services.google_client import AuthenticationRequiredError, GoogleClientError
from hoozin.services.ingestion import IngestionPipeline

PEOPLE_URL = "https://people.googleapis.com/v1/people:listDirectoryPeople"
CAL = "https://www.googleapis.com/calendar/v3"


def _person(email, name=None, primary=True):
    person = {"emailAddresses": [{"value": email, "metadata": {"primary": primary}}]}
    if name is not None:
        person["names"] = [{"displayName": name, "metadata": {"primary": True}}]
    return person


def _wl(start, end, kind="officeLocation"):
    return {
        "eventType": "workingLocation",
        "start": {"date": start},
        "end": {"date": end},
        "workingLocationProperties": {"type": kind},
    }


class FakeGoogleClient:
    """
    Simple stub to emulate GoogleClient for pipeline tests.

    `routes` maps (url, pageToken) to a payload or an exception instance.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    async def get_json(self, url, *, params=None, ttl=None):
        params = params or {}
        self.calls.append((url, dict(params)))
        result = self.routes.get((url, params.get("pageToken")))
        if result is None:
            result = {"items": []}
        if isinstance(result, Exception):
            raise result
        return result


def _events_url(email):
    return f"{CAL}/calendars/{email.replace('@', '%40')}/events"


@pytest.mark.asyncio
async def test_people_are_discovered_and_events_folded_across_pages():
    routes = {
        (PEOPLE_URL, None): {
            "people": [_person("kari@example.com", "Kari Nordmann")],
            "nextPageToken": "p2",
        },
        (PEOPLE_URL, "p2"): {"people": [_person("ola@example.com")]},
        (_events_url("kari@example.com"), None): {
            "items": [_wl("2024-01-08", "2024-01-10", "homeOffice")],
            "nextPageToken": "e2",
        },
        (_events_url("kari@example.com"), "e2"): {
            "items": [_wl("2024-01-09", "2024-01-10", "officeLocation")],
        },
    }
    client = FakeGoogleClient(routes)
    pipeline = IngestionPipeline(client)
    container = StateContainer()

    discovered = await pipeline.ingest_people(container.dispatch, date(2024, 1, 8), date(2024, 1, 12))

    state = container.state
    assert discovered == 2
    assert [(p.email, p.name) for p in state.people] == [
        ("kari@example.com", "Kari Nordmann"),
        # No primary name: falls back to the email.
        ("ola@example.com", "ola@example.com"),
    ]
    assert state.location_for(date(2024, 1, 8), "kari@example.com") == WorkLocation.HOME
    assert state.location_for(date(2024, 1, 9), "kari@example.com") == WorkLocation.OFFICE

    url, params = next(call for call in client.calls if call[0] == _events_url("kari@example.com"))
    assert params["eventTypes"] == "workingLocation"
    assert params["timeMin"] == "2024-01-08T00:00:00Z"
    assert params["timeMax"] == "2024-01-13T00:00:00Z"


@pytest.mark.asyncio
async def test_people_without_primary_email_and_malformed_events_are_skipped():
    routes = {
        (PEOPLE_URL, None): {
            "people": [
                _person("secondary@example.com", "No Primary", primary=False),
                {"names": [{"displayName": "No Email"}]},
                {"emailAddresses": "not-a-list"},
                _person("kari@example.com", "Kari"),
            ]
        },
        (_events_url("kari@example.com"), None): {
            "items": [
                {"eventType": "workingLocation", "start": {"date": "2024-01-08"}},
                {"eventType": "focusTime"},
                _wl("2024-01-08", "2024-01-09"),
            ]
        },
    }
    client = FakeGoogleClient(routes)
    container = StateContainer()

    await IngestionPipeline(client).ingest_people(container.dispatch, date(2024, 1, 8), date(2024, 1, 8))

    assert [p.email for p in container.state.people] == ["kari@example.com"]
    assert len(container.state.location_entries()) == 1


@pytest.mark.asyncio
async def test_failure_stops_the_pass_and_keeps_folded_state():
    routes = {
        (PEOPLE_URL, None): {
            "people": [
                _person("kari@example.com", "Kari"),
                _person("ola@example.com", "Ola"),
                _person("per@example.com", "Per"),
            ]
        },
        (_events_url("kari@example.com"), None): {"items": [_wl("2024-01-08", "2024-01-09")]},
        (_events_url("ola@example.com"), None): GoogleClientError("boom"),
    }
    client = FakeGoogleClient(routes)
    container = StateContainer()

    with pytest.raises(GoogleClientError):
        await IngestionPipeline(client).ingest_people(container.dispatch, date(2024, 1, 8), date(2024, 1, 8))

    state = container.state
    assert [p.email for p in state.people] == ["kari@example.com", "ola@example.com"]
    assert state.location_for(date(2024, 1, 8), "kari@example.com") == WorkLocation.OFFICE
    # No request was issued for anyone after the failure.
    assert all("per%40example.com" not in url for url, _ in client.calls)


@pytest.mark.asyncio
async def test_authentication_failure_propagates():
    client = FakeGoogleClient({(PEOPLE_URL, None): AuthenticationRequiredError("sign in")})
    container = StateContainer()

    with pytest.raises(AuthenticationRequiredError):
        await IngestionPipeline(client).ingest_people(container.dispatch, date(2024, 1, 8), date(2024, 1, 8))

    assert container.state.people == ()


@pytest.mark.asyncio
async def test_fetch_rooms_filters_resources_and_simplifies_names():
    hq_a = "c_1@resource.calendar.google.com"
    hq_b = "c_2@resource.calendar.google.com"
    routes = {
        (f"{CAL}/users/me/calendarList", None): {
            "items": [
                {"id": hq_a, "summary": "HQ - Room A (4)"},
                {"id": "kari@example.com", "summary": "Kari"},
                {"id": hq_b, "summary": "HQ - Room B"},
            ]
        },
        (_events_url(hq_a), None): {
            "items": [
                {
                    "eventType": "default",
                    "summary": "Planning",
                    "start": {"dateTime": "2024-01-08T10:00:00+01:00"},
                    "end": {"dateTime": "2024-01-08T11:00:00+01:00"},
                },
                {"eventType": "default", "start": {"date": "2024-01-08"}, "end": {"date": "2024-01-09"}},
            ]
        },
    }
    client = FakeGoogleClient(routes)

    rooms = await IngestionPipeline(client).fetch_rooms(now=datetime(2024, 1, 8, 9, 41, 12))

    assert [(r.name, r.max_attendance) for r in rooms] == [("Room A", 4), ("Room B", None)]
    assert [(e.title, e.start, e.end) for e in rooms[0].events] == [
        ("Planning", datetime(2024, 1, 8, 10, 0), datetime(2024, 1, 8, 11, 0)),
    ]
    assert rooms[1].events == []

    _, params = next(call for call in client.calls if call[0] == _events_url(hq_a))
    assert params["timeMin"] == "2024-01-08T09:00:00Z"
    assert params["timeMax"] == "2024-01-15T09:00:00Z"
    assert params["maxResults"] == 10
