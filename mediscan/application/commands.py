# mediscan/application/commands.py
from pydantic import BaseModel, Field, field_validator

from mediscan.domain.expiration import parse_date
from mediscan.domain.models import NO_DATE


class VerifyCodeCommand(BaseModel):
    code: str = Field(..., min_length=1)

    @field_validator("code")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code must not be blank")
        return v


def _blank(v: str | None) -> bool:
    return v is None or not v.strip()


class AddMedicineCommand(BaseModel):
    """Fields of the add-medicine form. Blank optionals fall back to sentinels."""

    id: str
    name: str
    manufacturer: str | None = None
    expiration_date: str | None = None
    batch_number: str | None = None
    genuine: bool = True
    indication: str | None = None
    dosage: str | None = None
    side_effects: str | None = None
    warnings: str | None = None

    @field_validator("id", "name")
    @classmethod
    def _required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("expiration_date")
    @classmethod
    def _date(cls, v: str | None) -> str:
        if _blank(v) or v.strip() == NO_DATE:
            return NO_DATE
        v = v.strip()
        if parse_date(v) is None:
            raise ValueError("expiration date must be YYYY-MM-DD")
        return v

    def record_fields(self) -> dict:
        # omitted keys take the Record defaults
        return {
            k: v.strip() if isinstance(v, str) else v
            for k, v in self.model_dump().items()
            if not (v is None or (isinstance(v, str) and not v.strip()))
        }
