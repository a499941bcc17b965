from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Sequence

from timeclock.db.mongo import get_mongo_db, close_mongo_client
from timeclock.db.mongo_indexes import ensure_indexes
from timeclock.schemas.time_entry_schema import TimeEntry
from timeclock.services.pay import shift_totals


async def seed_employees(db):
    now = datetime.now()
    items: Sequence[tuple[int, str, str, float, str]] = [
        (1, "Ana", "Lopez", 15.00, "Cashier"),
        (2, "Ben", "Okafor", 17.50, "Line Cook"),
        (3, "Chloe", "Nguyen", 21.00, "Shift Lead"),
    ]
    employees = []
    for emp_id, first, last, rate, title in items:
        doc = {
            "_id": emp_id,
            "first_name": first,
            "last_name": last,
            "pay_rate": rate,
            "job_title": title,
            "active": True,
            "created_at": now,
        }
        await db["employees"].update_one({"_id": emp_id}, {"$setOnInsert": doc}, upsert=True)
        employees.append(doc)
    return employees


async def seed_counters(db, start_at: int):
    # Entry ids continue after whatever the seed inserted
    await db["counters"].update_one(
        {"_id": "time_entries"}, {"$max": {"seq": start_at}}, upsert=True
    )


async def seed_time_entries(db, employees) -> int:
    yesterday = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=1)
    clock_in = yesterday.replace(hour=9)
    clock_out = yesterday.replace(hour=17)
    emp = employees[0]
    total_hours, gross_pay = shift_totals(clock_in, clock_out, emp["pay_rate"])
    entry = TimeEntry(
        entry_id=1,
        employee_id=emp["_id"],
        shift_date=clock_in.date(),
        clock_in=clock_in,
        clock_out=clock_out,
        total_hours=total_hours,
        gross_pay=gross_pay,
        notes="Seed shift",
        created_date=clock_in,
        modified_date=clock_out,
    )
    await db["time_entries"].update_one(
        {"_id": entry.entry_id}, {"$setOnInsert": entry.to_document()}, upsert=True
    )
    return entry.entry_id


async def main():
    db = get_mongo_db()
    # Ensure indexes before inserting
    await ensure_indexes(db)

    employees = await seed_employees(db)
    last_entry_id = await seed_time_entries(db, employees)
    await seed_counters(db, last_entry_id)

    print("MongoDB seed completed.")
    close_mongo_client()


if __name__ == "__main__":
    asyncio.run(main())
