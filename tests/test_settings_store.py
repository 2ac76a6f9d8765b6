# tests/test_settings_store.py
import json

import pytest

from hoozin.schemas.locations import WorkLocation
from hoozin.services.kv_store import MemoryKeyValueStore, Namespace
from hoozin.services.settings_store import SettingKey, SettingsStore, TokenResponse


def _store():
    raw = MemoryKeyValueStore(Namespace.SETTINGS)
    return raw, SettingsStore(raw)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "stored, expected",
    [
        (None, WorkLocation.UNKNOWN),
        ("officeLocation", WorkLocation.OFFICE),
        ("homeOffice", WorkLocation.HOME),
        ("unknown", WorkLocation.UNKNOWN),
        ("moon", WorkLocation.UNKNOWN),
    ],
)
async def test_preferred_location_reads_leniently(stored, expected):
    raw, settings = _store()
    if stored is not None:
        await raw.set(SettingKey.PREFERRED_LOCATION.value, stored)

    assert await settings.get_preferred_location() == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "stored, expected",
    [
        (None, frozenset()),
        ('["a@example.com", "b@example.com"]', frozenset({"a@example.com", "b@example.com"})),
        ("[1, 2]", frozenset()),
        ('{"a": true}', frozenset()),
        ("not json", frozenset()),
    ],
)
async def test_ignore_people_reads_leniently(stored, expected):
    raw, settings = _store()
    if stored is not None:
        await raw.set(SettingKey.IGNORE_PEOPLE.value, stored)

    assert await settings.get_ignore_people() == expected


@pytest.mark.asyncio
async def test_ignore_people_is_stored_as_json_array():
    raw, settings = _store()
    await settings.set_ignore_people(frozenset({"b@example.com", "a@example.com"}))

    assert json.loads(await raw.get("ignorePeople")) == ["a@example.com", "b@example.com"]


@pytest.mark.asyncio
async def test_token_round_trip_and_clear():
    raw, settings = _store()
    await settings.set_token(TokenResponse(access_token="abc", expires_in=3599, hd="example.com"))

    token = await settings.get_token()
    assert token.access_token == "abc"
    assert token.hd == "example.com"

    await settings.clear_token()
    assert await settings.get_token() is None


@pytest.mark.asyncio
async def test_malformed_token_is_ignored():
    raw, settings = _store()
    await raw.set(SettingKey.GOOGLE_TOKEN.value, '{"expires_in": 10}')

    assert await settings.get_token() is None
