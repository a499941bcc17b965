import logging
from datetime import datetime
from typing import Optional

from timeclock.db.time_entry_store import TimeEntryStore
from timeclock.schemas.time_entry_schema import ShiftStatus, TimeEntry
from timeclock.services.pay import hours_between


logger = logging.getLogger(__name__)


class ShiftStatusResolver:
    """Works out whether an employee is on the clock, including shifts that cross midnight."""

    def __init__(self, store: TimeEntryStore) -> None:
        self._store = store

    async def resolve(self, employee_id: int, now: datetime) -> ShiftStatus:
        entries = await self._store.get_all_entries_for_employee(employee_id)
        today = now.date()

        open_entry: Optional[TimeEntry] = None
        last_clock_out: Optional[datetime] = None
        today_completed = 0.0
        for entry in entries:
            if entry.is_open:
                if open_entry is None or entry.clock_in > open_entry.clock_in:
                    open_entry = entry
            elif entry.is_closed:
                if entry.shift_date == today:
                    today_completed += float(entry.total_hours)
                if last_clock_out is None or entry.clock_out > last_clock_out:
                    last_clock_out = entry.clock_out

        status = ShiftStatus(
            is_working=False,
            today_completed_hours=today_completed,
            last_clock_out=last_clock_out,
        )
        if open_entry is None:
            return status

        started = open_entry.clock_in
        working_hours = hours_between(started, now)
        if working_hours < 0:
            logger.warning(
                "Open entry %s for employee %s starts in the future (%s > %s); treating elapsed time as 0",
                open_entry.entry_id, employee_id, started.isoformat(), now.isoformat(),
            )
            working_hours = 0.0
        status.is_working = True
        status.shift_started = started
        status.is_cross_midnight = started.date() != today
        status.working_hours = working_hours
        return status
