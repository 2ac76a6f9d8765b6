# hoozin/services/day_summary.py
from __future__ import annotations

from datetime import date as date_type, timedelta
from typing import Dict, List, Sequence

from hoozin.schemas.locations import Person, State, WorkLocation
from hoozin.schemas.summary import DaySummary, PersonLocation

_DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def human_date(day: date_type, today: date_type) -> str:
    """
    "Today", "Tomorrow", the weekday name within the coming week, else ISO.
    """
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    if day < today + timedelta(days=7):
        return _DAY_NAMES[day.weekday()]
    return day.isoformat()


def _first_name(name: str) -> str:
    return name.split(" ")[0]


def _last_initial(name: str) -> str | None:
    parts = name.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1][0]


def display_name(name: str, people: Sequence[Person]) -> str:
    """
    Shortest unambiguous label for `name` among `people`.

    Rules
    -----
    1) First name alone when nobody else shares it.
    2) Else first name plus last-name initial when that initial is unique.
    3) Else the full name.
    """
    first = _first_name(name)
    if sum(1 for p in people if _first_name(p.name) == first) == 1:
        return first

    initial = _last_initial(name)
    if initial and sum(1 for p in people if _last_initial(p.name) == initial) == 1:
        return f"{first} {initial}."

    return name


def summarize_day(state: State, day: date_type, today: date_type) -> DaySummary:
    """
    Group every visible person by where they work on `day`.

    People in `state.ignore_people` are left out. People without an entry
    for `day` fall back to `state.assumed_location`. Entries for emails that
    were never discovered are dropped.
    """
    groups: Dict[WorkLocation, List[PersonLocation]] = {location: [] for location in WorkLocation}

    for person in state.people:
        if person.email in state.ignore_people:
            continue

        explicit = state.location_for(day, person.email)
        location = explicit if explicit is not None else state.assumed_location
        groups[location].append(
            PersonLocation(
                email=person.email,
                name=person.name,
                display_name=display_name(person.name, state.people),
                assumed=explicit is None,
            )
        )

    return DaySummary(
        date=day,
        label=human_date(day, today),
        office=groups[WorkLocation.OFFICE],
        remote=groups[WorkLocation.HOME],
        unknown=groups[WorkLocation.UNKNOWN],
    )
