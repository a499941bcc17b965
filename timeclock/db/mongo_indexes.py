from motor.motor_asyncio import AsyncIOMotorDatabase
from timeclock.db.mongo import get_mongo_db


async def ensure_indexes(db: AsyncIOMotorDatabase | None = None) -> None:
    """Create required MongoDB indexes (idempotent)."""
    if db is None:
        db = get_mongo_db()

    employees = db["employees"]
    await employees.create_index([("active", 1), ("last_name", 1)], name="idx_emp_active_last_name")

    time_entries = db["time_entries"]
    # Per-day lookups (today's entries, completed hours)
    await time_entries.create_index([("employee_id", 1), ("shift_date", 1)], name="idx_te_emp_shift_date")
    # Date-range reports across all employees
    await time_entries.create_index([("shift_date", 1)], name="idx_te_shift_date")
    # Latest clock-out across dates
    await time_entries.create_index([("employee_id", 1), ("clock_out", -1)], name="idx_te_emp_clock_out")
    # At most one open entry per employee
    await time_entries.create_index(
        [("employee_id", 1)],
        unique=True,
        partialFilterExpression={"is_active": True},
        name="uniq_te_open_entry_per_emp",
    )
