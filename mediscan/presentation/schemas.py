# mediscan/presentation/schemas.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from mediscan.domain.history import ProjectedEntry


# ── VERIFY ───────────────────────────────────────────────────────
class VerifyRequest(BaseModel):
    code: str = Field(..., description="Scanned or typed product code")

class VerificationPayload(BaseModel):
    status: str
    title: str
    message: str
    freshness: str
    days_remaining: int
    record: Optional[Dict[str, Any]] = None
    report_url: Optional[str] = None

class VerificationResponse(BaseModel):
    data: VerificationPayload
    entry: Dict[str, Any]
    saved: bool = True
    flags: List[str] = []


# ── RECORDS (add medicine) ───────────────────────────────────────
class AddMedicineRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Barcode / product code")
    name: str
    manufacturer: Optional[str] = None
    expiration_date: Optional[str] = Field(None, alias="expirationDate", description="YYYY-MM-DD")
    batch_number: Optional[str] = Field(None, alias="batchNumber")
    genuine: bool = True
    indication: Optional[str] = None
    dosage: Optional[str] = None
    side_effects: Optional[str] = Field(None, alias="sideEffects")
    warnings: Optional[str] = None


# ── HISTORY ──────────────────────────────────────────────────────
class HistoryItem(BaseModel):
    scannedCode: str
    drugName: str
    isGenuine: bool
    wasFound: bool
    scanDate: str
    timestamp: int
    expirationDate: Optional[str] = None
    status: str
    freshness: str
    days_remaining: int
    label: str

    @classmethod
    def from_projected(cls, p: ProjectedEntry) -> "HistoryItem":
        return cls(
            **p.entry.to_wire(),
            status=p.status.value,
            freshness=p.freshness.freshness.value,
            days_remaining=p.freshness.days_remaining,
            label=p.label,
        )

class HistoryResponse(BaseModel):
    items: List[HistoryItem]
    count: int
