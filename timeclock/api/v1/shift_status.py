from typing import Optional

from fastapi import APIRouter, Depends, Path

from timeclock.api.deps import get_clock, get_punch_service, get_shift_status_resolver
from timeclock.core.clock import Clock
from timeclock.core.exceptions import PunchRejectedException
from timeclock.schemas.time_entry_schema import PunchOut, PunchPayload, ShiftStatusOut, TimeEntryOut
from timeclock.services.punch import PunchResult, PunchService
from timeclock.services.shift_status import ShiftStatusResolver


router = APIRouter(prefix="/employees", tags=["shift-status"])


def _punch_out(result: PunchResult) -> PunchOut:
    if not result.success:
        raise PunchRejectedException(detail=result.message)
    return PunchOut(message=result.message, entry=TimeEntryOut.from_entry(result.entry))


@router.get("/{employee_id}/shift-status", response_model=ShiftStatusOut)
async def get_shift_status(
    employee_id: int = Path(..., ge=1),
    resolver: ShiftStatusResolver = Depends(get_shift_status_resolver),
    clock: Clock = Depends(get_clock),
):
    status = await resolver.resolve(employee_id, clock.now())
    return ShiftStatusOut(
        employee_id=employee_id,
        is_working=status.is_working,
        shift_started=status.shift_started,
        is_cross_midnight=status.is_cross_midnight,
        working_hours=round(status.working_hours, 2),
        today_completed_hours=round(status.today_completed_hours, 2),
        last_clock_out=status.last_clock_out,
        can_clock_in=status.can_clock_in,
        can_clock_out=status.can_clock_out,
    )


@router.post("/{employee_id}/clock-in", response_model=PunchOut)
async def clock_in(
    payload: Optional[PunchPayload] = None,
    employee_id: int = Path(..., ge=1),
    punch: PunchService = Depends(get_punch_service),
):
    notes = payload.notes if payload else ""
    return _punch_out(await punch.clock_in(employee_id, notes or ""))


@router.post("/{employee_id}/clock-out", response_model=PunchOut)
async def clock_out(
    payload: Optional[PunchPayload] = None,
    employee_id: int = Path(..., ge=1),
    punch: PunchService = Depends(get_punch_service),
):
    notes = payload.notes if payload else ""
    return _punch_out(await punch.clock_out(employee_id, notes or ""))
