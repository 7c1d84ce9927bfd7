# mediscan/presentation/deps.py
from fastapi import Depends

from mediscan.application.use_cases import (
    Clock, HistoryUseCase, RecordUseCase, VerifyCodeUseCase,
)
from mediscan.container import get_clock, get_history_store, get_record_store, get_report_email
from mediscan.domain.ports import HistoryStorePort, RecordStorePort


def get_verify_uc(
    records: RecordStorePort = Depends(get_record_store),
    history: HistoryStorePort = Depends(get_history_store),
    clock: Clock = Depends(get_clock),
    report_email: str = Depends(get_report_email),
) -> VerifyCodeUseCase:
    return VerifyCodeUseCase(records=records, history=history, clock=clock, report_email=report_email)


def get_record_uc(records: RecordStorePort = Depends(get_record_store)) -> RecordUseCase:
    return RecordUseCase(records=records)


def get_history_uc(
    history: HistoryStorePort = Depends(get_history_store),
    clock: Clock = Depends(get_clock),
) -> HistoryUseCase:
    return HistoryUseCase(history=history, clock=clock)
