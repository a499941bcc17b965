from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .time_entry_schema import TimeEntry, TimeEntryOut


class CorrectionErrorCode(str, Enum):
    not_authorized = "NOT_AUTHORIZED"
    no_entry_to_correct = "NO_ENTRY_TO_CORRECT"
    employee_not_found = "EMPLOYEE_NOT_FOUND"
    no_change_requested = "NO_CHANGE_REQUESTED"
    reason_too_short = "REASON_TOO_SHORT"
    future_time = "FUTURE_TIME"
    out_of_order = "OUT_OF_ORDER"
    shift_too_long = "SHIFT_TOO_LONG"
    persistence_failed = "PERSISTENCE_FAILED"


VALIDATION_ERROR_CODES = frozenset({
    CorrectionErrorCode.no_change_requested,
    CorrectionErrorCode.reason_too_short,
    CorrectionErrorCode.future_time,
    CorrectionErrorCode.out_of_order,
    CorrectionErrorCode.shift_too_long,
})


class CorrectionFailure(BaseModel):
    code: CorrectionErrorCode
    message: str

    @property
    def is_validation_error(self) -> bool:
        return self.code in VALIDATION_ERROR_CODES


class CorrectionInput(BaseModel):
    """What the manager submits: new clock-in and/or clock-out plus a reason."""

    new_clock_in: Optional[datetime] = None
    new_clock_out: Optional[datetime] = None
    reason: str = Field(default="", max_length=500)

    @field_validator("new_clock_in", "new_clock_out")
    @classmethod
    def to_kiosk_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored times are naive kiosk-local; offsets are converted, not dropped
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class CorrectionRequest(BaseModel):
    entry: TimeEntry
    new_clock_in: Optional[datetime] = None
    new_clock_out: Optional[datetime] = None
    reason: str = ""
    pay_rate: float = Field(default=0.0, ge=0)


class ValidatedCorrection(BaseModel):
    clock_in: datetime
    clock_out: Optional[datetime] = None
    reason: str
    pay_rate: float
    clock_in_changed: bool
    clock_out_changed: bool


class CorrectionOutcome(BaseModel):
    original: TimeEntry
    entry: TimeEntry
    summary: str


class CorrectionOutcomeOut(BaseModel):
    entry: TimeEntryOut
    summary: str
