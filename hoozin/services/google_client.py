# hoozin/services/google_client.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import httpx

from hoozin.services.request_cache import RequestCache, normalize_request
from hoozin.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class GoogleClientError(RuntimeError):
    """
    Raised when a Google API call fails in a non-recoverable way.
    """


class AuthenticationRequiredError(GoogleClientError):
    """
    Raised when no credential is stored or Google rejects it (HTTP 401).

    The sign-in flow has to run again before any further call can succeed.
    """


class GoogleClient:
    """
    Minimal Google REST client whose every GET goes through the RequestCache.

    Responsibilities
    ----------------
    - Normalize each request so equal requests share one cache entry.
    - Attach the stored bearer token on cache misses.
    - Clear the stored credential when Google answers 401.

    Notes
    -----
    - Errors are never cached: the fetch raises before the cache writes.
    - There is no retry; failures surface to the caller immediately.
    """

    def __init__(
        self,
        cache: RequestCache,
        settings_store: SettingsStore,
        ttl: timedelta = timedelta(minutes=5),
        timeout_seconds: float = 10.0,
    ) -> None:
        self._cache = cache
        self._settings_store = settings_store
        self._ttl = ttl
        self._timeout_seconds = timeout_seconds

    async def _fetch_json(self, url: str) -> Any:
        """
        Perform the authenticated GET for an already normalized URL.
        """
        token = await self._settings_store.get_token()
        if token is None:
            raise AuthenticationRequiredError("Not signed in, please sign in first")

        headers = {
            "Authorization": f"Bearer {token.access_token}",
            "Accept": "application/json",
        }

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.request(method="GET", url=url, headers=headers)

        if resp.status_code == 401:
            await self._settings_store.clear_token()
            logger.warning("Google rejected the stored credential; cleared it")
            raise AuthenticationRequiredError("Unauthorized, please sign in again")

        if resp.status_code // 100 != 2:
            raise GoogleClientError(
                f"Google GET failed (status={resp.status_code}): {resp.text}"
            )
        return resp.json()

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        ttl: Optional[timedelta] = None,
    ) -> Any:
        """
        Issue a cached GET request and return the JSON payload.

        Raises AuthenticationRequiredError on 401 and GoogleClientError on
        any other non-2xx response.
        """
        request = normalize_request(url, params)
        return await self._cache.fetch_cached(
            request,
            ttl or self._ttl,
            lambda: self._fetch_json(request),
        )
