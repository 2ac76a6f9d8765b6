# hoozin/api/routes/rooms.py
import logging

from fastapi import APIRouter, Depends

from hoozin.api.dependencies.services import get_ingestion_pipeline
from hoozin.api.errors import upstream_http_exception
from hoozin.schemas.rooms import Room
from hoozin.services.google_client import GoogleClientError
from hoozin.services.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get(
    "",
    response_model=list[Room],
    summary="Bookable rooms and their bookings for the coming week",
    description=(
        "Lists every resource calendar the signed-in user can read, with up to "
        "ROOM_EVENTS_MAX_RESULTS bookings from the current hour onwards. Room "
        "names lose their shared prefix and trailing '(<capacity>)'."
    ),
    responses={
        401: {"description": "No valid Google credential; sign in again."},
        502: {"description": "A Google API call failed."},
    },
)
async def list_rooms(
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
) -> list[Room]:
    try:
        return await pipeline.fetch_rooms()
    except GoogleClientError as exc:
        logger.warning("Room listing aborted: %s", exc)
        raise upstream_http_exception(exc) from exc
