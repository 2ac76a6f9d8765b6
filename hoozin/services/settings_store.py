# hoozin/services/settings_store.py
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ValidationError

from hoozin.schemas.locations import WorkLocation
from hoozin.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class SettingKey(str, Enum):
    """
    Every key the settings namespace may hold.
    """

    GOOGLE_TOKEN = "googleToken"
    IGNORE_PEOPLE = "ignorePeople"
    PREFERRED_LOCATION = "preferredLocation"


class TokenResponse(BaseModel):
    """
    Credential blob handed over by the sign-in flow.
    """

    access_token: str
    expires_in: int | None = None
    hd: str | None = None
    scope: str | None = None


class SettingsStore:
    """
    Typed access to the settings namespace.

    Values are stored as strings; reads are lenient and fall back to
    defaults on anything unexpected.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def get_token(self) -> Optional[TokenResponse]:
        raw = await self.store.get(SettingKey.GOOGLE_TOKEN.value)
        if raw is None:
            return None
        try:
            return TokenResponse.model_validate_json(raw)
        except ValidationError:
            logger.warning("Stored credential is malformed; ignoring it")
            return None

    async def set_token(self, token: TokenResponse) -> None:
        await self.store.set(SettingKey.GOOGLE_TOKEN.value, token.model_dump_json())

    async def clear_token(self) -> None:
        await self.store.delete(SettingKey.GOOGLE_TOKEN.value)

    async def get_preferred_location(self) -> WorkLocation:
        raw = await self.store.get(SettingKey.PREFERRED_LOCATION.value)
        return WorkLocation.parse(raw)

    async def set_preferred_location(self, location: WorkLocation) -> None:
        await self.store.set(SettingKey.PREFERRED_LOCATION.value, WorkLocation(location).value)

    async def get_ignore_people(self) -> frozenset[str]:
        raw = await self.store.get(SettingKey.IGNORE_PEOPLE.value)
        if not raw:
            return frozenset()
        try:
            parsed = json.loads(raw)
        except ValueError:
            return frozenset()
        if isinstance(parsed, list) and all(isinstance(item, str) for item in parsed):
            return frozenset(parsed)
        return frozenset()

    async def set_ignore_people(self, emails: frozenset[str]) -> None:
        await self.store.set(SettingKey.IGNORE_PEOPLE.value, json.dumps(sorted(emails)))
