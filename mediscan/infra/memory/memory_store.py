# mediscan/infra/memory/memory_store.py
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from mediscan.domain.models import HistoryEntry, Record
from mediscan.domain.ports import HistoryStorePort, RecordStorePort


class InMemoryRecordStore(RecordStorePort):
    def __init__(self, records: Optional[List[Record]] = None) -> None:
        self._data: Dict[str, Record] = {r.id: r for r in (records or [])}

    async def get(self, code: str) -> Optional[Record]:
        return self._data.get(code)

    async def put(self, record: Record) -> None:
        self._data[record.id] = record


class InMemoryHistoryStore(HistoryStorePort):
    """
    Process-local log. One lock serializes append, list_all and clear, so a
    reader never sees half an append and a clear never drops an append.
    Entries are frozen models, handing them out does not expose the list.
    """

    def __init__(self) -> None:
        self._entries: List[HistoryEntry] = []
        self._lock = asyncio.Lock()

    async def append(self, entry: HistoryEntry) -> None:
        async with self._lock:
            self._entries.append(entry)

    async def list_all(self) -> List[HistoryEntry]:
        async with self._lock:
            return list(self._entries)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
