"""
Manager time correction, end to end.

IDLE -> AUTHORIZING -> LOCATING -> VALIDATING -> PERSISTING -> SUCCEEDED
any step may end in FAILED with a CorrectionErrorCode.

Expected failures come back as CorrectionFailure values. StorageError raised
while locating the entry propagates to the caller; StorageError while saving is
reported as PERSISTENCE_FAILED.
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from timeclock.core.clock import Clock
from timeclock.core.exceptions import StorageError
from timeclock.core.locks import EmployeeLocks
from timeclock.db.employee_store import EmployeeDirectory
from timeclock.db.time_entry_store import TimeEntryStore
from timeclock.schemas.correction_schema import (
    CorrectionErrorCode,
    CorrectionFailure,
    CorrectionInput,
    CorrectionOutcome,
    CorrectionRequest,
)
from timeclock.schemas.time_entry_schema import TimeEntry
from timeclock.services.manager_auth import ManagerSessionAuthenticator
from timeclock.services.time_correction import TimeCorrectionEngine


logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    IDLE = "IDLE"
    AUTHORIZING = "AUTHORIZING"
    LOCATING = "LOCATING"
    VALIDATING = "VALIDATING"
    PERSISTING = "PERSISTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "(open)"


def build_summary(original: TimeEntry, corrected: TimeEntry) -> str:
    pay_diff = corrected.gross_pay - original.gross_pay
    sign = "+" if pay_diff >= 0 else "-"
    return (
        f"Clock in: {_fmt(original.clock_in)} -> {_fmt(corrected.clock_in)}; "
        f"Clock out: {_fmt(original.clock_out)} -> {_fmt(corrected.clock_out)}; "
        f"Duration: {corrected.total_hours:.2f}h; "
        f"Pay: ${corrected.gross_pay:.2f} ({sign}${abs(pay_diff):.2f})"
    )


class CorrectionWorkflow:
    def __init__(
        self,
        store: TimeEntryStore,
        employees: EmployeeDirectory,
        authenticator: ManagerSessionAuthenticator,
        engine: TimeCorrectionEngine,
        clock: Clock,
        locks: EmployeeLocks,
    ) -> None:
        self._store = store
        self._employees = employees
        self._authenticator = authenticator
        self._engine = engine
        self._clock = clock
        self._locks = locks

    def _enter(self, employee_id: int, state: WorkflowState) -> None:
        logger.info("Correction for employee %s: %s", employee_id, state.value)

    def _failed(self, employee_id: int, code: CorrectionErrorCode, message: str) -> CorrectionFailure:
        logger.info("Correction for employee %s: FAILED(%s) %s", employee_id, code.value, message)
        return CorrectionFailure(code=code, message=message)

    async def _locate_entry(self, employee_id: int, now: datetime) -> Optional[TimeEntry]:
        open_entry = await self._store.get_open_entry(employee_id)
        if open_entry is not None:
            return open_entry
        closed_today = [
            e for e in await self._store.get_entries_for_date(employee_id, now.date()) if e.is_closed
        ]
        if not closed_today:
            return None
        return max(closed_today, key=lambda e: e.clock_out)

    async def correct_time(
        self, employee_id: int, correction: CorrectionInput
    ) -> Union[CorrectionOutcome, CorrectionFailure]:
        if employee_id is None or isinstance(employee_id, bool) or not isinstance(employee_id, int):
            raise ValueError(f"employee_id must be an int, got {employee_id!r}")

        async with self._locks.for_employee(employee_id):
            self._enter(employee_id, WorkflowState.IDLE)

            self._enter(employee_id, WorkflowState.AUTHORIZING)
            if not self._authenticator.is_valid():
                return self._failed(
                    employee_id,
                    CorrectionErrorCode.not_authorized,
                    "Manager authentication required to correct time entries",
                )
            self._authenticator.extend_session()

            self._enter(employee_id, WorkflowState.LOCATING)
            now = self._clock.now()
            entry = await self._locate_entry(employee_id, now)
            if entry is None:
                return self._failed(
                    employee_id,
                    CorrectionErrorCode.no_entry_to_correct,
                    "No open shift or shift completed today to correct",
                )
            employee = await self._employees.get_employee(employee_id)
            if employee is None:
                return self._failed(
                    employee_id,
                    CorrectionErrorCode.employee_not_found,
                    f"Employee {employee_id} not found",
                )

            self._enter(employee_id, WorkflowState.VALIDATING)
            request = CorrectionRequest(
                entry=entry,
                new_clock_in=correction.new_clock_in,
                new_clock_out=correction.new_clock_out,
                reason=correction.reason,
                pay_rate=employee.pay_rate,
            )
            validated = self._engine.validate(request, now)
            if isinstance(validated, CorrectionFailure):
                return self._failed(employee_id, validated.code, validated.message)
            corrected = self._engine.apply(entry, validated, now)

            self._enter(employee_id, WorkflowState.PERSISTING)
            try:
                saved = await self._store.update(corrected)
            except StorageError as exc:
                logger.error("Saving correction for entry %s failed: %s", entry.entry_id, exc)
                saved = False
            if not saved:
                return self._failed(
                    employee_id,
                    CorrectionErrorCode.persistence_failed,
                    "Failed to save the correction; please try again",
                )

            self._enter(employee_id, WorkflowState.SUCCEEDED)
            return CorrectionOutcome(
                original=entry,
                entry=corrected,
                summary=build_summary(entry, corrected),
            )
