from datetime import datetime


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0


def shift_totals(clock_in: datetime, clock_out: datetime | None, pay_rate: float) -> tuple[float, float]:
    """(total_hours, gross_pay) for a shift; an open shift has no totals yet."""
    if clock_out is None:
        return 0.0, 0.0
    total_hours = hours_between(clock_in, clock_out)
    return total_hours, total_hours * float(pay_rate)
