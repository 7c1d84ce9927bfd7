# mediscan/presentation/routers.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from mediscan.application.commands import AddMedicineCommand, VerifyCodeCommand
from mediscan.application.use_cases import HistoryUseCase, RecordUseCase, VerifyCodeUseCase
from mediscan.domain.ports import StoreUnavailableError
from mediscan.domain.status import Status
from mediscan.presentation.deps import get_history_uc, get_record_uc, get_verify_uc
from mediscan.presentation.schemas import (
    AddMedicineRequest,
    HistoryItem, HistoryResponse,
    VerificationResponse,
    VerifyRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")


def _unavailable(what: str, e: Exception) -> HTTPException:
    logger.error("%s failed: %s", what, e)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"{what} failed, please try again",
    )


def _unprocessable(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=e.errors(include_url=False, include_context=False),
    )


# ── VERIFY ────────────────────────────────────────────────────────
@router.post("/verify", response_model=VerificationResponse)
async def verify_code(req: VerifyRequest, uc: VerifyCodeUseCase = Depends(get_verify_uc)):
    try:
        cmd = VerifyCodeCommand(code=req.code)
    except ValidationError as e:
        raise _unprocessable(e)
    try:
        return await uc.execute(cmd)
    except StoreUnavailableError as e:
        raise _unavailable("lookup", e)


# ── RECORDS ───────────────────────────────────────────────────────
@router.get("/records/{code}")
async def get_record(code: str, uc: RecordUseCase = Depends(get_record_uc)):
    try:
        rec = await uc.get(code)
    except StoreUnavailableError as e:
        raise _unavailable("lookup", e)
    if rec is None:
        raise HTTPException(status_code=404, detail=f"No medicine registered for code {code!r}")
    return rec.to_wire()


@router.post("/records", status_code=status.HTTP_201_CREATED)
async def add_medicine(req: AddMedicineRequest, uc: RecordUseCase = Depends(get_record_uc)):
    try:
        cmd = AddMedicineCommand(**req.model_dump())
    except ValidationError as e:
        raise _unprocessable(e)
    try:
        rec = await uc.add(cmd)
    except StoreUnavailableError as e:
        raise _unavailable("save medicine", e)
    return rec.to_wire()


# ── HISTORY ───────────────────────────────────────────────────────
@router.get("/history", response_model=HistoryResponse)
async def list_history(
    status_filter: Optional[Status] = Query(None, alias="status"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    uc: HistoryUseCase = Depends(get_history_uc),
):
    try:
        items = await uc.list(status=status_filter, limit=limit)
    except StoreUnavailableError as e:
        raise _unavailable("load history", e)
    return HistoryResponse(items=[HistoryItem.from_projected(p) for p in items], count=len(items))


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(uc: HistoryUseCase = Depends(get_history_uc)):
    try:
        await uc.clear()
    except StoreUnavailableError as e:
        raise _unavailable("clear history", e)
