from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class ReportGroupBy(str, Enum):
    employee = "employee"
    job_title = "job_title"
    week = "week"
    month = "month"
    date = "date"


class ReportSummary(BaseModel):
    group_key: str
    group_type: ReportGroupBy
    employee_name: str = ""
    job_title: str = ""
    total_hours: float = 0.0
    total_pay: float = 0.0
    days_worked: int = 0
    average_hours_per_day: float = 0.0
    start_date: date
    end_date: date


class ReportSummaryOut(BaseModel):
    start_date: date
    end_date: date
    group_by: ReportGroupBy
    employee_id: Optional[int] = None
    total_hours: float
    total_pay: float
    groups: list[ReportSummary]
