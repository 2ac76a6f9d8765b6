# hoozin/api/dependencies/services.py
from datetime import timedelta

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hoozin.core.config import get_settings
from hoozin.db.session import get_db
from hoozin.services.google_client import GoogleClient
from hoozin.services.ingestion import IngestionPipeline
from hoozin.services.kv_store import Namespace, SqlKeyValueStore
from hoozin.services.request_cache import RequestCache
from hoozin.services.settings_store import SettingsStore


def get_settings_store(db: AsyncSession = Depends(get_db)) -> SettingsStore:
    """
    Settings namespace bound to the request's DB session.
    """
    settings = get_settings()
    return SettingsStore(SqlKeyValueStore(db, Namespace.SETTINGS, settings.STORAGE_QUOTA_CHARS))


def get_request_cache(db: AsyncSession = Depends(get_db)) -> RequestCache:
    """
    Response cache namespace bound to the request's DB session.
    """
    settings = get_settings()
    return RequestCache(SqlKeyValueStore(db, Namespace.CACHE, settings.STORAGE_QUOTA_CHARS))


def get_ingestion_pipeline(
    cache: RequestCache = Depends(get_request_cache),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> IngestionPipeline:
    """
    Wire a GoogleClient and IngestionPipeline from application settings.
    """
    settings = get_settings()
    client = GoogleClient(
        cache=cache,
        settings_store=settings_store,
        ttl=timedelta(seconds=settings.CACHE_TTL_SECONDS),
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
    return IngestionPipeline(
        client,
        people_base_url=settings.GOOGLE_PEOPLE_BASE_URL,
        calendar_base_url=settings.GOOGLE_CALENDAR_BASE_URL,
        time_zone=settings.CALENDAR_TIME_ZONE,
        people_page_size=settings.PEOPLE_PAGE_SIZE,
        events_max_results=settings.EVENTS_MAX_RESULTS,
        room_events_max_results=settings.ROOM_EVENTS_MAX_RESULTS,
    )
