# mediscan/application/use_cases.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from mediscan.domain.history import build_entry, project, select
from mediscan.domain.models import Record
from mediscan.domain.ports import HistoryStorePort, RecordStorePort, StoreUnavailableError
from mediscan.domain.status import DEFAULT_REPORT_EMAIL, Status, evaluate

from .commands import AddMedicineCommand, VerifyCodeCommand

logger = logging.getLogger("mediscan.verify")
history_logger = logging.getLogger("mediscan.history")

Clock = Callable[[], datetime]

HISTORY_SAVE_FAILED = "history_save_failed"


class VerifyCodeUseCase:
    def __init__(
        self,
        records: RecordStorePort,
        history: HistoryStorePort,
        clock: Clock,
        report_email: str = DEFAULT_REPORT_EMAIL,
    ):
        self.records, self.history = records, history
        self.clock = clock
        self.report_email = report_email

    async def execute(self, cmd: VerifyCodeCommand) -> Dict[str, Any]:
        """
        Lookup -> verdict -> history entry -> append.

        A failed lookup raises StoreUnavailableError. A failed append does not:
        the verdict is still returned, flagged so the client can offer a retry.
        """
        record = await self.records.get(cmd.code)
        now = self.clock()

        verdict = evaluate(cmd.code, record, now, self.report_email)
        entry = build_entry(cmd.code, record, now)

        flags = []
        saved = True
        try:
            await self.history.append(entry)
        except StoreUnavailableError:
            logger.exception("[verify] failed to save scan code=%s", cmd.code)
            flags.append(HISTORY_SAVE_FAILED)
            saved = False

        logger.info(
            "[verify] code=%s found=%s genuine=%s exp=%s -> status=%s days=%d saved=%s",
            cmd.code, entry.was_found, entry.is_genuine, entry.expiration_date,
            verdict.status.value, verdict.freshness.days_remaining, saved,
        )

        return {
            "data": {
                "status": verdict.status.value,
                "title": verdict.title,
                "message": verdict.message,
                "freshness": verdict.freshness.freshness.value,
                "days_remaining": verdict.freshness.days_remaining,
                "record": record.to_wire() if record else None,
                "report_url": verdict.report_url,
            },
            "entry": entry.to_wire(),
            "saved": saved,
            "flags": flags,
        }


class RecordUseCase:
    """Direct reads and writes of product master data."""

    def __init__(self, records: RecordStorePort):
        self.records = records

    async def get(self, code: str) -> Optional[Record]:
        return await self.records.get(code.strip())

    async def add(self, cmd: AddMedicineCommand) -> Record:
        record = Record(**cmd.record_fields())
        await self.records.put(record)
        logger.info("[records] saved id=%s name=%s genuine=%s", record.id, record.name, record.genuine)
        return record


class HistoryUseCase:
    def __init__(self, history: HistoryStorePort, clock: Clock):
        self.history = history
        self.clock = clock

    async def list(self, status: Optional[Status] = None, limit: Optional[int] = None):
        entries = await self.history.list_all()
        items = select(project(entries, self.clock()), status=status, limit=limit)
        history_logger.info(
            "[history] listed total=%d returned=%d status=%s",
            len(entries), len(items), status.value if status else None,
        )
        return items

    async def clear(self) -> None:
        await self.history.clear()
        history_logger.info("[history] cleared")
