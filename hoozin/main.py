# hoozin/main.py
from fastapi import FastAPI

from hoozin.api.routes import auth, health, locations, preferences, rooms
from hoozin.core.config import get_settings
from hoozin.core.logging import configure_logging
from hoozin.db.session import AsyncSessionLocal, init_db
from hoozin.services.kv_store import Namespace, SqlKeyValueStore
from hoozin.services.request_cache import RequestCache


async def purge_expired_cache() -> int:
    """
    Drop every expired response-cache entry once, at startup.
    """
    async with AsyncSessionLocal() as session:
        cache = RequestCache(SqlKeyValueStore(session, Namespace.CACHE))
        return await cache.purge_expired()


def create_app() -> FastAPI:
    """
    Application factory for the Hoozin service.
    """
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Shows who is in the office and who works remotely on the coming "
            "working days, from Google Calendar working-location events, and "
            "which meeting rooms are booked.\n"
            "Every Google call is served from a local TTL cache when possible."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(locations.router)
    app.include_router(rooms.router)
    app.include_router(preferences.router)

    @app.on_event("startup")
    async def on_startup() -> None:
        await init_db()
        await purge_expired_cache()

    return app


app = create_app()
