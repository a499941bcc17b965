from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, Field


def _start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


class TimeEntry(BaseModel):
    """One shift. clock_in / clock_out are absolute; shift_date is the clock-in date."""

    entry_id: int
    employee_id: int
    shift_date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    total_hours: float = 0.0
    gross_pay: float = 0.0
    notes: str = ""
    created_date: datetime
    modified_date: datetime

    @property
    def is_open(self) -> bool:
        return self.clock_in is not None and self.clock_out is None

    @property
    def is_closed(self) -> bool:
        return self.clock_in is not None and self.clock_out is not None

    @property
    def clock_in_time(self) -> Optional[time]:
        return self.clock_in.time() if self.clock_in else None

    @property
    def clock_out_time(self) -> Optional[time]:
        return self.clock_out.time() if self.clock_out else None

    def to_document(self) -> dict:
        # Mongo stores datetimes only, so shift_date is kept as midnight
        return {
            "_id": self.entry_id,
            "employee_id": self.employee_id,
            "shift_date": _start_of_day(self.shift_date),
            "clock_in": self.clock_in,
            "clock_out": self.clock_out,
            "total_hours": float(self.total_hours),
            "gross_pay": float(self.gross_pay),
            "notes": self.notes,
            "is_active": self.is_open,
            "created_date": self.created_date,
            "modified_date": self.modified_date,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "TimeEntry":
        shift_date = doc["shift_date"]
        if isinstance(shift_date, datetime):
            shift_date = shift_date.date()
        return cls(
            entry_id=int(doc["_id"]),
            employee_id=int(doc["employee_id"]),
            shift_date=shift_date,
            clock_in=doc.get("clock_in"),
            clock_out=doc.get("clock_out"),
            total_hours=float(doc.get("total_hours") or 0.0),
            gross_pay=float(doc.get("gross_pay") or 0.0),
            notes=doc.get("notes") or "",
            created_date=doc["created_date"],
            modified_date=doc.get("modified_date") or doc["created_date"],
        )


class ShiftStatus(BaseModel):
    is_working: bool
    shift_started: Optional[datetime] = None
    is_cross_midnight: bool = False
    working_hours: float = 0.0
    today_completed_hours: float = 0.0
    last_clock_out: Optional[datetime] = None

    @property
    def can_clock_in(self) -> bool:
        return not self.is_working

    @property
    def can_clock_out(self) -> bool:
        return self.is_working


class PunchPayload(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=500)


class TimeEntryOut(BaseModel):
    id: int
    employee_id: int
    shift_date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    total_hours: float
    gross_pay: float
    notes: str
    is_open: bool
    modified_date: datetime

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "TimeEntryOut":
        return cls(
            id=entry.entry_id,
            employee_id=entry.employee_id,
            shift_date=entry.shift_date,
            clock_in=entry.clock_in,
            clock_out=entry.clock_out,
            total_hours=round(entry.total_hours, 2),
            gross_pay=round(entry.gross_pay, 2),
            notes=entry.notes,
            is_open=entry.is_open,
            modified_date=entry.modified_date,
        )


class ShiftStatusOut(BaseModel):
    employee_id: int
    is_working: bool
    shift_started: Optional[datetime] = None
    is_cross_midnight: bool
    working_hours: float
    today_completed_hours: float
    last_clock_out: Optional[datetime] = None
    can_clock_in: bool
    can_clock_out: bool


class PunchOut(BaseModel):
    message: str
    entry: TimeEntryOut
