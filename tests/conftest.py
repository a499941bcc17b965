from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from timeclock.core.clock import FixedClock
from timeclock.core.exceptions import StorageError
from timeclock.core.locks import EmployeeLocks
from timeclock.schemas.employee_schema import Employee
from timeclock.schemas.time_entry_schema import TimeEntry
from timeclock.services.correction_workflow import CorrectionWorkflow
from timeclock.services.manager_auth import ManagerSessionAuthenticator
from timeclock.services.pay import shift_totals
from timeclock.services.punch import PunchService
from timeclock.services.shift_status import ShiftStatusResolver
from timeclock.services.time_correction import TimeCorrectionEngine


MANAGER_PIN = "4321"
NOW = datetime(2026, 3, 10, 18, 0)


class FakeTimeEntryStore:
    """In-memory TimeEntryStore. Entries are copied in and out like a real database."""

    def __init__(self) -> None:
        self.entries: dict[int, TimeEntry] = {}
        self.update_result = True
        self.fail_with: Optional[Exception] = None
        self.read_calls = 0
        self._next_id = 1

    def add(self, entry: TimeEntry) -> TimeEntry:
        self.entries[entry.entry_id] = entry.model_copy()
        self._next_id = max(self._next_id, entry.entry_id + 1)
        return entry

    def _check(self, operation: str) -> None:
        if self.fail_with is not None:
            raise StorageError(operation, self.fail_with)

    def _for_employee(self, employee_id: int) -> list[TimeEntry]:
        rows = [e.model_copy() for e in self.entries.values() if e.employee_id == employee_id]
        return sorted(rows, key=lambda e: e.clock_in or datetime.min)

    async def get_open_entry(self, employee_id: int) -> Optional[TimeEntry]:
        self._check("get_open_entry")
        self.read_calls += 1
        open_entries = [e for e in self._for_employee(employee_id) if e.is_open]
        return open_entries[-1] if open_entries else None

    async def get_entries_for_date(self, employee_id: int, shift_date: date) -> list[TimeEntry]:
        self._check("get_entries_for_date")
        self.read_calls += 1
        return [e for e in self._for_employee(employee_id) if e.shift_date == shift_date]

    async def get_all_entries_for_employee(self, employee_id: int) -> list[TimeEntry]:
        self._check("get_all_entries_for_employee")
        self.read_calls += 1
        return self._for_employee(employee_id)

    async def get_most_recent_closed_entry(self, employee_id: int) -> Optional[TimeEntry]:
        self._check("get_most_recent_closed_entry")
        closed = [e for e in self._for_employee(employee_id) if e.is_closed]
        return max(closed, key=lambda e: e.clock_out) if closed else None

    async def get_entries_in_range(
        self, start: date, end: date, employee_id: Optional[int] = None
    ) -> list[TimeEntry]:
        self._check("get_entries_in_range")
        self.read_calls += 1
        rows = [
            e.model_copy()
            for e in self.entries.values()
            if start <= e.shift_date <= end and (employee_id is None or e.employee_id == employee_id)
        ]
        return sorted(rows, key=lambda e: (e.shift_date, e.clock_in or datetime.min))

    async def create(self, employee_id: int, clock_in: datetime, notes: str = "") -> TimeEntry:
        self._check("create")
        entry = TimeEntry(
            entry_id=self._next_id,
            employee_id=employee_id,
            shift_date=clock_in.date(),
            clock_in=clock_in,
            notes=notes,
            created_date=clock_in,
            modified_date=clock_in,
        )
        return self.add(entry)

    async def update(self, entry: TimeEntry) -> bool:
        self._check("update")
        if not self.update_result or entry.entry_id not in self.entries:
            return False
        self.entries[entry.entry_id] = entry.model_copy()
        return True


class FakeEmployeeDirectory:
    def __init__(self, *employees: Employee) -> None:
        self.employees = {e.employee_id: e for e in employees}

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    async def get_pay_rate(self, employee_id: int) -> float:
        employee = self.employees.get(employee_id)
        return employee.pay_rate if employee else 0.0


def make_entry(
    entry_id: int,
    clock_in: datetime,
    clock_out: Optional[datetime] = None,
    employee_id: int = 1,
    pay_rate: float = 15.0,
    notes: str = "",
) -> TimeEntry:
    total_hours, gross_pay = shift_totals(clock_in, clock_out, pay_rate)
    return TimeEntry(
        entry_id=entry_id,
        employee_id=employee_id,
        shift_date=clock_in.date(),
        clock_in=clock_in,
        clock_out=clock_out,
        total_hours=total_hours,
        gross_pay=gross_pay,
        notes=notes,
        created_date=clock_in,
        modified_date=clock_out or clock_in,
    )


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def store():
    return FakeTimeEntryStore()


@pytest.fixture
def employees():
    return FakeEmployeeDirectory(
        Employee(employee_id=1, first_name="Ana", last_name="Lopez", pay_rate=15.0),
        Employee(employee_id=2, first_name="Ben", last_name="Okafor", pay_rate=20.0, active=False),
    )


@pytest.fixture
def locks():
    return EmployeeLocks()


@pytest.fixture
def authenticator(clock):
    return ManagerSessionAuthenticator(MANAGER_PIN, timedelta(minutes=5), clock)


@pytest.fixture
def engine():
    return TimeCorrectionEngine(reason_min_length=10, max_shift_hours=24)


@pytest.fixture
def resolver(store):
    return ShiftStatusResolver(store)


@pytest.fixture
def workflow(store, employees, authenticator, engine, clock, locks):
    return CorrectionWorkflow(store, employees, authenticator, engine, clock, locks)


@pytest.fixture
def punch(store, employees, resolver, clock, locks):
    return PunchService(store, employees, resolver, clock, locks, cooldown_hours=4, max_shift_hours=16)
