# mediscan/domain/models.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

NO_DATE = "N/A"
UNKNOWN_MEDICINE = "Unknown Medicine"
NOT_PROVIDED = "Not provided"


def _present(data: Mapping[str, Any]) -> Dict[str, Any]:
    # null in stored data means "absent" so the field default applies
    return {k: v for k, v in data.items() if v is not None}


_RECORD_TEXT_KEYS = {
    "name", "manufacturer", "expirationDate", "expiration_date", "batchNumber", "batch_number",
    "indication", "dosage", "sideEffects", "side_effects", "warnings",
}


def _lenient_record_body(data: Mapping[str, Any]) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    for k, v in _present(data).items():
        if k in _RECORD_TEXT_KEYS and not isinstance(v, str):
            # exported data often stores batch numbers or dates as numbers
            if not isinstance(v, (int, float)):
                continue
            v = str(v)
        body[k] = v
    return body


class Record(BaseModel):
    """Master data for one product, keyed by its scanned code."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    name: str = UNKNOWN_MEDICINE
    manufacturer: str = "Unknown"
    expiration_date: str = Field(NO_DATE, alias="expirationDate")
    batch_number: str = Field("N/A", alias="batchNumber")
    genuine: bool = False
    indication: str = NOT_PROVIDED
    dosage: str = NOT_PROVIDED
    side_effects: str = Field(NOT_PROVIDED, alias="sideEffects")
    warnings: str = NOT_PROVIDED

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("record id must not be blank")
        return v

    @classmethod
    def from_wire(cls, code: str, data: Mapping[str, Any]) -> "Record":
        """
        Lenient decode of an untrusted document, field by field. Missing or
        null fields take their defaults, numeric text fields become strings,
        and any other field that fails validation is dropped so its default
        applies. The key ``code`` always wins over any ``id`` in the document.

        Raises ValidationError only when ``code`` itself is not a usable id.
        """
        body = _lenient_record_body(data)
        body["id"] = code
        try:
            return cls.model_validate(body)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"] and err["loc"][0] != "id"}
            if not bad:
                raise
            return cls.model_validate({k: v for k, v in body.items() if k not in bad})

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class HistoryEntry(BaseModel):
    """One verification event. Immutable once built."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    scanned_code: str = Field(..., alias="scannedCode")
    drug_name: str = Field(UNKNOWN_MEDICINE, alias="drugName")
    is_genuine: bool = Field(False, alias="isGenuine")
    was_found: bool = Field(False, alias="wasFound")
    scan_date: str = Field("", alias="scanDate")
    timestamp: int = 0
    expiration_date: Optional[str] = Field(None, alias="expirationDate")

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        return cls.model_validate(_present(data))

    def to_wire(self) -> Dict[str, Any]:
        # expirationDate is the only omittable key
        return self.model_dump(by_alias=True, exclude_none=True)
