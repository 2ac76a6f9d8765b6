# hoozin/api/routes/preferences.py
from fastapi import APIRouter, Depends, Path

from hoozin.api.dependencies.services import get_settings_store
from hoozin.schemas.locations import State, UpdateIgnoreState, UpdatePreferredLocation
from hoozin.schemas.summary import IgnoreStateUpdate, PreferencesRead, PreferredLocationUpdate
from hoozin.services.event_reducer import reduce_state
from hoozin.services.settings_store import SettingsStore

router = APIRouter(prefix="/preferences", tags=["Preferences"])


async def _load_state(settings_store: SettingsStore) -> State:
    return State(
        ignore_people=await settings_store.get_ignore_people(),
        assumed_location=await settings_store.get_preferred_location(),
    )


def _read(state: State) -> PreferencesRead:
    return PreferencesRead(
        preferred_location=state.assumed_location,
        ignored=sorted(state.ignore_people),
    )


@router.get("", response_model=PreferencesRead, summary="Current display preferences")
async def get_preferences(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> PreferencesRead:
    return _read(await _load_state(settings_store))


@router.put(
    "/location",
    response_model=PreferencesRead,
    summary="Set the location assumed for people without an event",
)
async def update_preferred_location(
    payload: PreferredLocationUpdate,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> PreferencesRead:
    state = reduce_state(
        await _load_state(settings_store),
        UpdatePreferredLocation(location=payload.location),
    )
    await settings_store.set_preferred_location(state.assumed_location)
    return _read(state)


@router.put(
    "/people/{email}",
    response_model=PreferencesRead,
    summary="Show or hide a person",
    description=(
        "Behaves like a 'visible' checkbox: `ignored=true` removes the person "
        "from the ignore list, `ignored=false` adds them to it."
    ),
)
async def update_ignore_state(
    payload: IgnoreStateUpdate,
    email: str = Path(..., description="Primary email of the person."),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> PreferencesRead:
    state = reduce_state(
        await _load_state(settings_store),
        UpdateIgnoreState(email=email, ignored=payload.ignored),
    )
    await settings_store.set_ignore_people(state.ignore_people)
    return _read(state)
