import logging
from datetime import datetime, timedelta
from typing import Union

from timeclock.schemas.correction_schema import (
    CorrectionErrorCode,
    CorrectionFailure,
    CorrectionRequest,
    ValidatedCorrection,
)
from timeclock.schemas.time_entry_schema import TimeEntry
from timeclock.services.pay import shift_totals


logger = logging.getLogger(__name__)

AUDIT_NOTE_TEMPLATE = " | MANAGER CORRECTED: {stamp} - {reason}"


def _fail(code: CorrectionErrorCode, message: str) -> CorrectionFailure:
    return CorrectionFailure(code=code, message=message)


class TimeCorrectionEngine:
    """
    Validates a manager correction against the business rules and builds the
    corrected entry. No I/O; the caller supplies `now` and the pay rate.

    Rules run in order and the first failure wins:
    no change, reason length, future clock-in, future clock-out, ordering, maximum length.
    """

    def __init__(self, reason_min_length: int = 10, max_shift_hours: int = 24) -> None:
        self.reason_min_length = reason_min_length
        self.max_shift = timedelta(hours=max_shift_hours)

    def validate(
        self, request: CorrectionRequest, now: datetime
    ) -> Union[ValidatedCorrection, CorrectionFailure]:
        entry = request.entry

        if request.new_clock_in is None and request.new_clock_out is None:
            return _fail(
                CorrectionErrorCode.no_change_requested,
                "Enter a new clock-in or clock-out time to correct",
            )

        reason = (request.reason or "").strip()
        if len(reason) < self.reason_min_length:
            return _fail(
                CorrectionErrorCode.reason_too_short,
                f"Reason must be at least {self.reason_min_length} characters",
            )

        if request.new_clock_in is not None and request.new_clock_in > now:
            return _fail(CorrectionErrorCode.future_time, "Clock-in time cannot be in the future")
        if request.new_clock_out is not None and request.new_clock_out > now:
            return _fail(CorrectionErrorCode.future_time, "Clock-out time cannot be in the future")

        clock_in = request.new_clock_in if request.new_clock_in is not None else entry.clock_in
        clock_out = request.new_clock_out if request.new_clock_out is not None else entry.clock_out

        if clock_out is not None:
            if clock_in is None:
                return _fail(
                    CorrectionErrorCode.out_of_order,
                    "Clock-out cannot be set on an entry without a clock-in time",
                )
            if clock_in >= clock_out:
                return _fail(
                    CorrectionErrorCode.out_of_order,
                    "Clock-in time must be before clock-out time",
                )
            if clock_out - clock_in > self.max_shift:
                hours = int(self.max_shift.total_seconds() // 3600)
                return _fail(
                    CorrectionErrorCode.shift_too_long,
                    f"Shift cannot be longer than {hours} hours",
                )

        return ValidatedCorrection(
            clock_in=clock_in,
            clock_out=clock_out,
            reason=reason,
            pay_rate=request.pay_rate,
            clock_in_changed=request.new_clock_in is not None and request.new_clock_in != entry.clock_in,
            clock_out_changed=request.new_clock_out is not None and request.new_clock_out != entry.clock_out,
        )

    def apply(self, entry: TimeEntry, validated: ValidatedCorrection, now: datetime) -> TimeEntry:
        total_hours, gross_pay = shift_totals(validated.clock_in, validated.clock_out, validated.pay_rate)
        note = AUDIT_NOTE_TEMPLATE.format(stamp=now.strftime("%Y-%m-%d %H:%M"), reason=validated.reason)
        corrected = entry.model_copy(update={
            "clock_in": validated.clock_in,
            "clock_out": validated.clock_out,
            "shift_date": validated.clock_in.date(),
            "total_hours": total_hours,
            "gross_pay": gross_pay,
            "notes": (entry.notes or "") + note,
            "modified_date": now,
        })
        logger.debug(
            "Correction built for entry %s: %.2fh, %.2f pay", entry.entry_id, total_hours, gross_pay
        )
        return corrected
