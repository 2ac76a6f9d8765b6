# hoozin/services/request_cache.py
from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from hoozin.services.kv_store import KeyValueStore, StorageQuotaExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Appended to every request before digesting. Bump whenever the persisted
# entry shape changes so old entries stop matching.
CACHE_SCHEMA_VERSION = "V2"


def normalize_request(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Canonical string form of a GET request.

    Scheme and host are lower-cased, query parameters from `url` and
    `params` are merged and sorted, and any fragment is dropped, so two
    logically equal requests always digest to the same cache key.
    """
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    for name, value in (params or {}).items():
        if value is None:
            continue
        query.append((name, str(value)))
    query.sort()

    return urlunsplit(
        (
            parts.scheme.lower(),
            parts.netloc.lower(),
            parts.path or "/",
            urlencode(query),
            "",
        )
    )


def cache_key(normalized_request: str) -> str:
    """
    Hex SHA-256 digest of the normalized request plus the schema version.
    """
    message = f"{normalized_request}{CACHE_SCHEMA_VERSION}".encode("utf-8")
    return hashlib.sha256(message).hexdigest()


def _parse_expires_at(entry: Any) -> Optional[datetime]:
    if not isinstance(entry, dict) or "expiresAt" not in entry:
        return None
    value = entry["expiresAt"]
    if not isinstance(value, str):
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        # Entries written by other tools may carry an offset; compare in local time.
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class RequestCache:
    """
    TTL cache in front of an arbitrary async fetch.

    Entries live in the cache namespace of a KeyValueStore as JSON:

        {"expiresAt": "<naive local ISO date-time>", "data": <payload>}

    Notes
    -----
    - `clock` returns naive local time and is injectable for tests.
    - The store is assumed to hold only cache entries, so a quota eviction
      can clear it wholesale without touching user settings.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock

    async def _lookup(self, key: str) -> tuple[bool, Any]:
        raw = await self.store.get(key)
        if raw is None:
            logger.debug("Cache miss for %s", key)
            return False, None

        try:
            entry = json.loads(raw)
        except ValueError:
            logger.info("Invalid cache data (not JSON) for %s", key)
            return False, None

        expires_at = _parse_expires_at(entry)
        if expires_at is None:
            logger.info("Invalid cache data (missing TTL) for %s", key)
            return False, None

        if self.clock() >= expires_at:
            logger.debug("Invalid cache data (expired) for %s", key)
            return False, None

        if "data" not in entry:
            logger.info("Invalid cache data (missing data key) for %s", key)
            return False, None

        return True, entry["data"]

    async def fetch_cached(
        self,
        request: str,
        ttl: timedelta,
        fetcher: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Return the cached payload for `request`, or fetch and store it.

        Parameters
        ----------
        request:
            Normalized request string (see `normalize_request`).
        ttl:
            Lifetime of a freshly fetched entry.
        fetcher:
            Zero-argument coroutine function performing the real call. Any
            exception it raises propagates and nothing is cached.
        """
        key = cache_key(request)

        hit, data = await self._lookup(key)
        if hit:
            return data

        data = await fetcher()

        entry = json.dumps(
            {
                "expiresAt": (self.clock() + ttl).isoformat(),
                "data": data,
            }
        )
        try:
            await self.store.set(key, entry)
        except StorageQuotaExceededError:
            await self.store.clear()
            logger.warning("Cleared cache due to quota exceeded")

        return data

    async def purge_expired(self) -> int:
        """
        Remove every entry whose `expiresAt` is at or before now.

        Entries that cannot be parsed are left alone. Returns the number of
        entries removed.
        """
        now = self.clock()
        expired: list[str] = []

        for key, raw in await self.store.items():
            try:
                entry = json.loads(raw)
            except ValueError:
                continue
            expires_at = _parse_expires_at(entry)
            if expires_at is not None and now >= expires_at:
                expired.append(key)

        for key in expired:
            await self.store.delete(key)

        if expired:
            logger.info("Purged %d expired cache entries", len(expired))
        return len(expired)
