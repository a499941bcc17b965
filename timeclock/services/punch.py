import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from timeclock.core.clock import Clock
from timeclock.core.locks import EmployeeLocks
from timeclock.db.employee_store import EmployeeDirectory
from timeclock.db.time_entry_store import TimeEntryStore
from timeclock.schemas.time_entry_schema import TimeEntry
from timeclock.services.pay import shift_totals
from timeclock.services.shift_status import ShiftStatusResolver


logger = logging.getLogger(__name__)

MIN_SHIFT = timedelta(minutes=1)


@dataclass
class PunchResult:
    success: bool
    message: str
    entry: Optional[TimeEntry] = None


def _join_notes(existing: str, extra: Optional[str]) -> str:
    extra = (extra or "").strip()
    if not extra:
        return existing or ""
    if not existing:
        return extra
    return f"{existing}; {extra}"


class PunchService:
    """Self-service clock-in / clock-out at the kiosk."""

    def __init__(
        self,
        store: TimeEntryStore,
        employees: EmployeeDirectory,
        resolver: ShiftStatusResolver,
        clock: Clock,
        locks: EmployeeLocks,
        cooldown_hours: int = 4,
        max_shift_hours: int = 16,
    ) -> None:
        self._store = store
        self._employees = employees
        self._resolver = resolver
        self._clock = clock
        self._locks = locks
        self.cooldown = timedelta(hours=cooldown_hours)
        self.max_shift = timedelta(hours=max_shift_hours)

    async def clock_in(self, employee_id: int, notes: str = "") -> PunchResult:
        async with self._locks.for_employee(employee_id):
            employee = await self._employees.get_employee(employee_id)
            if employee is None:
                return PunchResult(False, f"Employee {employee_id} not found")
            if not employee.active:
                return PunchResult(False, f"{employee.full_name} is not an active employee")

            now = self._clock.now()
            status = await self._resolver.resolve(employee_id, now)
            if status.is_working:
                return PunchResult(
                    False,
                    f"{employee.full_name} is already clocked in since "
                    f"{status.shift_started:%Y-%m-%d %H:%M}",
                )
            if status.last_clock_out is not None:
                rested = now - status.last_clock_out
                if rested < self.cooldown:
                    wait = self.cooldown - rested
                    minutes = int(wait.total_seconds() // 60) + 1
                    return PunchResult(
                        False,
                        f"Must wait {minutes} more minutes before clocking in again",
                    )

            entry = await self._store.create(employee_id, now, (notes or "").strip())
            logger.info("Employee %s clocked in at %s (entry %s)", employee_id, now.isoformat(), entry.entry_id)
            return PunchResult(True, f"{employee.full_name} clocked in at {now:%H:%M}", entry)

    async def clock_out(self, employee_id: int, notes: str = "") -> PunchResult:
        async with self._locks.for_employee(employee_id):
            entry = await self._store.get_open_entry(employee_id)
            if entry is None:
                return PunchResult(False, "Not currently clocked in")

            now = self._clock.now()
            worked = now - entry.clock_in
            if worked < MIN_SHIFT:
                return PunchResult(False, "Shift must be at least 1 minute long")
            if worked > self.max_shift:
                hours = int(self.max_shift.total_seconds() // 3600)
                return PunchResult(
                    False,
                    f"Shift is longer than {hours} hours; a manager must correct this entry",
                )

            pay_rate = await self._employees.get_pay_rate(employee_id)
            total_hours, gross_pay = shift_totals(entry.clock_in, now, pay_rate)
            closed = entry.model_copy(update={
                "clock_out": now,
                "total_hours": total_hours,
                "gross_pay": gross_pay,
                "notes": _join_notes(entry.notes, notes),
                "modified_date": now,
            })
            if not await self._store.update(closed):
                logger.error("Clock-out for entry %s was not saved", entry.entry_id)
                return PunchResult(False, "Failed to save clock-out; please try again")
            logger.info(
                "Employee %s clocked out at %s (%.2fh)", employee_id, now.isoformat(), total_hours
            )
            return PunchResult(True, f"Clocked out at {now:%H:%M}, worked {total_hours:.2f} hours", closed)
