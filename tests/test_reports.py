import asyncio
from datetime import date, datetime

import pytest

from timeclock.schemas.employee_schema import Employee
from timeclock.schemas.report_schema import ReportGroupBy
from timeclock.services.reports import ReportService, week_key

from conftest import FakeEmployeeDirectory, make_entry


@pytest.fixture
def staff():
    return FakeEmployeeDirectory(
        Employee(employee_id=1, first_name="Ana", last_name="Lopez", pay_rate=15.0, job_title="Cashier"),
        Employee(employee_id=3, first_name="Chloe", last_name="Nguyen", pay_rate=20.0, job_title="Cashier"),
        Employee(employee_id=4, first_name="Dev", last_name="Patel", pay_rate=18.0, job_title="Cook"),
        Employee(employee_id=5, first_name="Eli", last_name="Moss", pay_rate=30.0, active=False),
    )


@pytest.fixture
def reports(store, staff):
    # Week of Mar 9 plus Monday Mar 16
    store.add(make_entry(1, datetime(2026, 3, 9, 9, 0), datetime(2026, 3, 9, 17, 0), employee_id=1, pay_rate=15.0))
    store.add(make_entry(2, datetime(2026, 3, 10, 9, 0), datetime(2026, 3, 10, 13, 0), employee_id=1, pay_rate=15.0))
    store.add(make_entry(3, datetime(2026, 3, 10, 22, 0), datetime(2026, 3, 11, 2, 0), employee_id=3, pay_rate=20.0))
    store.add(make_entry(4, datetime(2026, 3, 16, 6, 0), datetime(2026, 3, 16, 12, 0), employee_id=4, pay_rate=18.0))
    # open shift, inactive employee, and entry outside the range are all left out
    store.add(make_entry(5, datetime(2026, 3, 16, 13, 0), employee_id=1, pay_rate=15.0))
    store.add(make_entry(6, datetime(2026, 3, 10, 9, 0), datetime(2026, 3, 10, 17, 0), employee_id=5, pay_rate=30.0))
    store.add(make_entry(7, datetime(2026, 3, 1, 9, 0), datetime(2026, 3, 1, 17, 0), employee_id=1, pay_rate=15.0))
    return ReportService(store, staff)


def _summarize(reports, group_by=ReportGroupBy.employee, employee_id=None):
    return asyncio.run(reports.summarize(date(2026, 3, 9), date(2026, 3, 16), group_by, employee_id))


def test_by_employee(reports):
    groups = {g.group_key: g for g in _summarize(reports)}
    assert list(groups) == ["Ana Lopez", "Chloe Nguyen", "Dev Patel"]
    ana = groups["Ana Lopez"]
    assert ana.total_hours == 12.0
    assert ana.total_pay == 180.0
    assert ana.days_worked == 2
    assert ana.average_hours_per_day == 6.0
    assert ana.job_title == "Cashier"
    assert groups["Chloe Nguyen"].total_pay == 80.0


def test_by_week(reports):
    groups = _summarize(reports, ReportGroupBy.week)
    assert [g.group_key for g in groups] == [week_key(date(2026, 3, 9)), week_key(date(2026, 3, 16))]
    assert groups[0].total_hours == 16.0
    assert groups[0].total_pay == 260.0
    assert groups[1].total_hours == 6.0
    assert groups[1].total_pay == 108.0


def test_cross_midnight_shift_counts_on_start_day(reports):
    groups = {g.group_key: g for g in _summarize(reports, ReportGroupBy.date)}
    assert groups["2026-03-10"].total_hours == 8.0
    assert "2026-03-11" not in groups


def test_by_job_title(reports):
    groups = {g.group_key: g for g in _summarize(reports, ReportGroupBy.job_title)}
    assert groups["Cashier"].total_hours == 16.0
    assert groups["Cashier"].employee_name == "2 employees"
    assert groups["Cook"].total_pay == 108.0


def test_filter_by_employee(reports):
    groups = _summarize(reports, employee_id=3)
    assert len(groups) == 1
    assert groups[0].employee_name == "Chloe Nguyen"


def test_empty_range(store, staff):
    service = ReportService(store, staff)
    assert asyncio.run(service.summarize(date(2026, 1, 1), date(2026, 1, 31))) == []


def test_reversed_range_rejected(reports):
    with pytest.raises(ValueError):
        asyncio.run(reports.summarize(date(2026, 3, 16), date(2026, 3, 9)))


def test_week_key_format():
    assert week_key(date(2026, 3, 11)) == "2026-W11 (Mar 09 - Mar 15, 2026)"
