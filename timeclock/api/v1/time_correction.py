from fastapi import APIRouter, Depends, Path

from timeclock.api.deps import get_correction_workflow
from timeclock.core.exceptions import (
    NotFoundException,
    ServiceUnavailableException,
    UnauthorizedException,
    ValidationException,
)
from timeclock.core.security import require_manager_session
from timeclock.schemas.correction_schema import (
    CorrectionErrorCode,
    CorrectionFailure,
    CorrectionInput,
    CorrectionOutcomeOut,
)
from timeclock.schemas.time_entry_schema import TimeEntryOut
from timeclock.services.correction_workflow import CorrectionWorkflow


router = APIRouter(prefix="/employees", tags=["time-correction"])


def _raise_for_failure(failure: CorrectionFailure) -> None:
    code = failure.code
    if code is CorrectionErrorCode.not_authorized:
        raise UnauthorizedException(detail=failure.message, error_code=code.value)
    if code in (CorrectionErrorCode.no_entry_to_correct, CorrectionErrorCode.employee_not_found):
        raise NotFoundException(detail=failure.message, error_code=code.value)
    if code is CorrectionErrorCode.persistence_failed:
        raise ServiceUnavailableException(detail=failure.message, error_code=code.value)
    raise ValidationException(detail=failure.message, error_code=code.value)


@router.post("/{employee_id}/time-correction", response_model=CorrectionOutcomeOut)
async def correct_time(
    payload: CorrectionInput,
    employee_id: int = Path(..., ge=1),
    _manager=Depends(require_manager_session),
    workflow: CorrectionWorkflow = Depends(get_correction_workflow),
):
    result = await workflow.correct_time(employee_id, payload)
    if isinstance(result, CorrectionFailure):
        _raise_for_failure(result)
    return CorrectionOutcomeOut(entry=TimeEntryOut.from_entry(result.entry), summary=result.summary)
