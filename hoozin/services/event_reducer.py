# hoozin/services/event_reducer.py
from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from typing import Iterable, Optional

from hoozin.schemas.calendar import WorkingLocationEvent
from hoozin.schemas.locations import (
    Action,
    AddPersonEvent,
    DiscoveredPerson,
    Person,
    State,
    UpdateIgnoreState,
    UpdatePreferredLocation,
    WorkLocation,
)


def _apply_working_location(state: State, email: str, event: WorkingLocationEvent) -> State:
    location = (
        WorkLocation.parse(event.location_type)
        if event.location_type is not None
        else WorkLocation.UNKNOWN
    )

    events = dict(state.events)
    current = event.start.date
    # End date is exclusive.
    while current < event.end.date:
        events[(current, email)] = location
        current += timedelta(days=1)

    return replace(state, events=events)


def reduce_state(state: State, action: Action) -> State:
    """
    Pure transition function folding one action into a new State.

    Rules
    -----
    - DiscoveredPerson: appended once per email; a known email returns
      `state` itself.
    - AddPersonEvent: working-location events upsert one entry per covered
      date (last applied wins); every other event kind returns `state`
      itself, out-of-office and default events are not folded yet.
    - UpdatePreferredLocation: replaces the assumed location.
    - UpdateIgnoreState: ignored=True removes the email from the ignore
      set, ignored=False adds it.
    """
    if isinstance(action, DiscoveredPerson):
        if any(person.email == action.email for person in state.people):
            return state
        person = Person(email=action.email, name=action.name)
        return replace(state, people=state.people + (person,))

    if isinstance(action, AddPersonEvent):
        if isinstance(action.calendar_event, WorkingLocationEvent):
            return _apply_working_location(state, action.email, action.calendar_event)
        return state

    if isinstance(action, UpdatePreferredLocation):
        return replace(state, assumed_location=WorkLocation(action.location))

    if isinstance(action, UpdateIgnoreState):
        if action.ignored:
            ignore_people = state.ignore_people - {action.email}
        else:
            ignore_people = state.ignore_people | {action.email}
        return replace(state, ignore_people=frozenset(ignore_people))

    raise TypeError(f"Unsupported action: {action!r}")


def replay(actions: Iterable[Action], state: Optional[State] = None) -> State:
    """
    Fold `actions` in order, starting from `state` or the empty State.
    """
    current = state if state is not None else State()
    for action in actions:
        current = reduce_state(current, action)
    return current


class StateContainer:
    """
    Holder for the current State; the single dispatch path actions go through.
    """

    def __init__(self, state: Optional[State] = None) -> None:
        self.state = state if state is not None else State()

    def dispatch(self, action: Action) -> State:
        self.state = reduce_state(self.state, action)
        return self.state
