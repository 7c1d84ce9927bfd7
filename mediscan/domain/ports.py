# mediscan/domain/ports.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .models import HistoryEntry, Record


class StoreUnavailableError(RuntimeError):
    """An adapter could not complete a read or write. Safe to retry."""


class RecordStorePort(ABC):
    """Keyed lookup of product master data. A miss is None, never an error."""
    @abstractmethod
    async def get(self, code: str) -> Optional[Record]: ...

    @abstractmethod
    async def put(self, record: Record) -> None: ...


class HistoryStorePort(ABC):
    """
    Append-only event log.

    Adapters must make ``append`` atomic against concurrent ``append`` and
    ``list_all`` calls, and serialize ``clear`` with ``append``. ``list_all``
    order is unspecified; ordering belongs to the history projection.
    """
    @abstractmethod
    async def append(self, entry: HistoryEntry) -> None: ...

    @abstractmethod
    async def list_all(self) -> List[HistoryEntry]: ...

    @abstractmethod
    async def clear(self) -> None: ...


class CachePort(ABC):
    @abstractmethod
    async def get(self, key: str): ...
    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int = 43200): ...
    @abstractmethod
    async def delete(self, *keys: str) -> int: ...
