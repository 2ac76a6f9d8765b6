# hoozin/api/routes/locations.py
import logging
from datetime import date as date_type
from enum import Enum

from fastapi import APIRouter, Depends, Query

from hoozin.api.dependencies.services import get_ingestion_pipeline, get_settings_store
from hoozin.api.errors import upstream_http_exception
from hoozin.core.config import get_settings
from hoozin.schemas.locations import State
from hoozin.schemas.summary import LocationsResponse
from hoozin.services.day_summary import summarize_day
from hoozin.services.event_reducer import StateContainer
from hoozin.services.google_client import GoogleClientError
from hoozin.services.ingestion import IngestionPipeline
from hoozin.services.settings_store import SettingsStore
from hoozin.services.working_days import upcoming_working_days, working_day_window

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["Locations"])


class WindowSpan(str, Enum):
    UPCOMING = "upcoming"
    TRAILING = "trailing"


@router.get(
    "",
    response_model=LocationsResponse,
    summary="Who works where, per working day",
    description=(
        "Runs one ingestion pass over the people directory and their "
        "working-location events, then groups everyone per working day into "
        "office / remote / unknown.\n\n"
        "- `span=upcoming` (default): `days` working days starting today.\n"
        "- `span=trailing`: `days` working days ending today.\n\n"
        "People without an event for a day are placed under the preferred "
        "location; ignored people are left out."
    ),
    responses={
        401: {"description": "No valid Google credential; sign in again."},
        502: {"description": "A Google API call failed."},
    },
)
async def get_locations(
    days: int | None = Query(
        default=None,
        ge=1,
        le=30,
        description="Number of working days to include. Defaults to WORKING_DAYS_WINDOW.",
    ),
    span: WindowSpan = Query(default=WindowSpan.UPCOMING),
    today: date_type | None = Query(
        default=None,
        description="Reference date; the server's current date when omitted.",
    ),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> LocationsResponse:
    """
    Build a fresh State for this request and fold one ingestion pass into it.
    """
    today = today or date_type.today()
    count = days or get_settings().WORKING_DAYS_WINDOW
    if span == WindowSpan.TRAILING:
        window = working_day_window(count, today)
    else:
        window = upcoming_working_days(count, today)

    container = StateContainer(
        State(
            ignore_people=await settings_store.get_ignore_people(),
            assumed_location=await settings_store.get_preferred_location(),
        )
    )

    try:
        await pipeline.ingest_people(container.dispatch, window[0], window[-1])
    except GoogleClientError as exc:
        logger.warning("Ingestion pass aborted: %s", exc)
        raise upstream_http_exception(exc) from exc

    state = container.state
    return LocationsResponse(
        assumed_location=state.assumed_location,
        people=list(state.people),
        ignored=sorted(state.ignore_people),
        days=[summarize_day(state, day, today) for day in window],
        entries=state.location_entries(),
    )
