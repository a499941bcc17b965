"""
Hours and pay summaries for the manager dashboard.

Only closed shifts with hours count, and only for active employees. Entries are
bucketed by shift_date, so a shift that crosses midnight is reported on the day
it started.
"""
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from timeclock.db.employee_store import EmployeeDirectory
from timeclock.db.time_entry_store import TimeEntryStore
from timeclock.schemas.employee_schema import Employee
from timeclock.schemas.report_schema import ReportGroupBy, ReportSummary
from timeclock.schemas.time_entry_schema import TimeEntry


logger = logging.getLogger(__name__)


def week_key(d: date) -> str:
    year, week, _ = d.isocalendar()
    monday = d - timedelta(days=d.weekday())
    sunday = monday + timedelta(days=6)
    return f"{year}-W{week:02d} ({monday:%b %d} - {sunday:%b %d, %Y})"


def _group_key(group_by: ReportGroupBy, entry: TimeEntry, employee: Employee) -> str:
    if group_by is ReportGroupBy.job_title:
        return employee.job_title or "No Job Title"
    if group_by is ReportGroupBy.week:
        return week_key(entry.shift_date)
    if group_by is ReportGroupBy.month:
        return entry.shift_date.strftime("%Y-%m")
    if group_by is ReportGroupBy.date:
        return entry.shift_date.isoformat()
    return employee.full_name


class ReportService:
    def __init__(self, store: TimeEntryStore, employees: EmployeeDirectory) -> None:
        self._store = store
        self._employees = employees

    async def _active_employees(self, entries: list[TimeEntry]) -> dict[int, Employee]:
        found: dict[int, Employee] = {}
        for employee_id in sorted({e.employee_id for e in entries}):
            employee = await self._employees.get_employee(employee_id)
            if employee is None:
                logger.warning("Report skips entries for unknown employee %s", employee_id)
                continue
            if employee.active:
                found[employee_id] = employee
        return found

    async def summarize(
        self,
        start: date,
        end: date,
        group_by: ReportGroupBy = ReportGroupBy.employee,
        employee_id: Optional[int] = None,
    ) -> list[ReportSummary]:
        if start > end:
            raise ValueError("start date must not be after end date")

        entries = [
            e for e in await self._store.get_entries_in_range(start, end, employee_id)
            if e.is_closed and e.total_hours > 0
        ]
        employees = await self._active_employees(entries)

        groups: dict[str, list[tuple[TimeEntry, Employee]]] = defaultdict(list)
        for entry in entries:
            employee = employees.get(entry.employee_id)
            if employee is None:
                continue
            groups[_group_key(group_by, entry, employee)].append((entry, employee))

        summaries = []
        for key, rows in groups.items():
            total_hours = sum(e.total_hours for e, _ in rows)
            days_worked = len({e.shift_date for e, _ in rows})
            summary = ReportSummary(
                group_key=key,
                group_type=group_by,
                total_hours=round(total_hours, 2),
                total_pay=round(sum(e.gross_pay for e, _ in rows), 2),
                days_worked=days_worked,
                average_hours_per_day=round(total_hours / days_worked, 2) if days_worked else 0.0,
                start_date=start,
                end_date=end,
            )
            if group_by is ReportGroupBy.employee:
                first = rows[0][1]
                summary.employee_name = first.full_name
                summary.job_title = first.job_title or ""
            elif group_by is ReportGroupBy.job_title:
                summary.job_title = key
                summary.employee_name = f"{len({emp.employee_id for _, emp in rows})} employees"
            summaries.append(summary)

        logger.debug("Report %s..%s by %s: %d groups", start, end, group_by.value, len(summaries))
        return sorted(summaries, key=lambda s: s.group_key)
