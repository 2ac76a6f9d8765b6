# hoozin/services/kv_store.py
from __future__ import annotations

import abc
from enum import Enum
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hoozin.models.kv_entry import KeyValueEntry


class StorageQuotaExceededError(RuntimeError):
    """
    Raised when a write would push the persisted store past its size quota
    (counted in characters of keys plus values).

    Nothing is written when this is raised.
    """


class Namespace(str, Enum):
    """
    Logical partitions of the persisted key/value substrate.
    """

    CACHE = "cache"
    SETTINGS = "settings"


def _entry_size(key: str, value: str) -> int:
    return len(key) + len(value)


class KeyValueStore(abc.ABC):
    """
    String-keyed, string-valued store scoped to a single namespace.

    Implementations must never read or modify keys of another namespace,
    including in `clear()`.
    """

    namespace: Namespace

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abc.abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Insert or overwrite `key`. May raise StorageQuotaExceededError."""

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Remove `key` if present."""

    @abc.abstractmethod
    async def items(self) -> List[Tuple[str, str]]:
        """Snapshot of every (key, value) pair in this namespace."""

    @abc.abstractmethod
    async def clear(self) -> None:
        """Remove every key of this namespace."""


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process store over a plain dict.

    Several stores can share one `backing` dict to model namespaces living
    in the same substrate; the quota then applies to the shared total.
    """

    def __init__(
        self,
        namespace: Namespace,
        backing: Optional[Dict[Tuple[str, str], str]] = None,
        quota_chars: Optional[int] = None,
    ) -> None:
        self.namespace = Namespace(namespace)
        self.backing: Dict[Tuple[str, str], str] = backing if backing is not None else {}
        self.quota_chars = quota_chars

    def _ns(self) -> str:
        return self.namespace.value

    async def get(self, key: str) -> Optional[str]:
        return self.backing.get((self._ns(), key))

    async def set(self, key: str, value: str) -> None:
        if self.quota_chars is not None:
            used = sum(_entry_size(k, v) for (_, k), v in self.backing.items())
            previous = self.backing.get((self._ns(), key))
            if previous is not None:
                used -= _entry_size(key, previous)
            if used + _entry_size(key, value) > self.quota_chars:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} would exceed the {self.quota_chars} character quota"
                )
        self.backing[(self._ns(), key)] = value

    async def delete(self, key: str) -> None:
        self.backing.pop((self._ns(), key), None)

    async def items(self) -> List[Tuple[str, str]]:
        return [(k, v) for (ns, k), v in self.backing.items() if ns == self._ns()]

    async def clear(self) -> None:
        for composite in [c for c in self.backing if c[0] == self._ns()]:
            del self.backing[composite]


class SqlKeyValueStore(KeyValueStore):
    """
    Store backed by the `kv_entries` table.

    Every write commits immediately. Concurrent writers of the same key
    (e.g. two sessions sharing the database) are last-writer-wins.
    """

    def __init__(
        self,
        session: AsyncSession,
        namespace: Namespace,
        quota_chars: Optional[int] = None,
    ) -> None:
        self.session = session
        self.namespace = Namespace(namespace)
        self.quota_chars = quota_chars

    async def _row(self, key: str) -> Optional[KeyValueEntry]:
        stmt = select(KeyValueEntry).where(
            KeyValueEntry.namespace == self.namespace.value,
            KeyValueEntry.key == key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _used_chars(self) -> int:
        # Quota covers the whole table, not just this namespace.
        stmt = select(
            func.coalesce(
                func.sum(func.length(KeyValueEntry.key) + func.length(KeyValueEntry.value)),
                0,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def get(self, key: str) -> Optional[str]:
        row = await self._row(key)
        return row.value if row is not None else None

    async def set(self, key: str, value: str) -> None:
        row = await self._row(key)

        if self.quota_chars is not None:
            used = await self._used_chars()
            if row is not None:
                used -= _entry_size(row.key, row.value)
            if used + _entry_size(key, value) > self.quota_chars:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} would exceed the {self.quota_chars} character quota"
                )

        if row is None:
            row = KeyValueEntry(namespace=self.namespace.value, key=key, value=value)
            self.session.add(row)
        else:
            row.value = value

        await self.session.commit()

    async def delete(self, key: str) -> None:
        stmt = delete(KeyValueEntry).where(
            KeyValueEntry.namespace == self.namespace.value,
            KeyValueEntry.key == key,
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def items(self) -> List[Tuple[str, str]]:
        stmt = select(KeyValueEntry.key, KeyValueEntry.value).where(
            KeyValueEntry.namespace == self.namespace.value
        )
        result = await self.session.execute(stmt)
        return [(key, value) for key, value in result.all()]

    async def clear(self) -> None:
        stmt = delete(KeyValueEntry).where(KeyValueEntry.namespace == self.namespace.value)
        await self.session.execute(stmt)
        await self.session.commit()
