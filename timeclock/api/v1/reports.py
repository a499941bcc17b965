from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from timeclock.api.deps import get_report_service
from timeclock.core.exceptions import ValidationException
from timeclock.core.security import require_manager_session
from timeclock.schemas.report_schema import ReportGroupBy, ReportSummaryOut
from timeclock.services.reports import ReportService


router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummaryOut)
async def report_summary(
    start: date = Query(...),
    end: date = Query(...),
    group_by: ReportGroupBy = Query(ReportGroupBy.employee),
    employee_id: Optional[int] = Query(None, ge=1),
    _manager=Depends(require_manager_session),
    reports: ReportService = Depends(get_report_service),
):
    if start > end:
        raise ValidationException(detail="start must be on or before end", error_code="INVALID_DATE_RANGE")
    groups = await reports.summarize(start, end, group_by, employee_id)
    return ReportSummaryOut(
        start_date=start,
        end_date=end,
        group_by=group_by,
        employee_id=employee_id,
        total_hours=round(sum(g.total_hours for g in groups), 2),
        total_pay=round(sum(g.total_pay for g in groups), 2),
        groups=groups,
    )
