from datetime import date, datetime
from typing import Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from timeclock.core.exceptions import StorageError
from timeclock.schemas.time_entry_schema import TimeEntry


class TimeEntryStore(Protocol):
    """Clock-event storage used by the status resolver, punches and corrections."""

    async def get_open_entry(self, employee_id: int) -> Optional[TimeEntry]: ...

    async def get_entries_for_date(self, employee_id: int, shift_date: date) -> list[TimeEntry]: ...

    async def get_all_entries_for_employee(self, employee_id: int) -> list[TimeEntry]: ...

    async def get_most_recent_closed_entry(self, employee_id: int) -> Optional[TimeEntry]: ...

    async def get_entries_in_range(
        self, start: date, end: date, employee_id: Optional[int] = None
    ) -> list[TimeEntry]: ...

    async def create(self, employee_id: int, clock_in: datetime, notes: str = "") -> TimeEntry: ...

    async def update(self, entry: TimeEntry) -> bool: ...


def _start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


class MongoTimeEntryStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def _entries(self):
        return self._db["time_entries"]

    async def _next_entry_id(self) -> int:
        counter = await self._db["counters"].find_one_and_update(
            {"_id": "time_entries"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["seq"])

    async def get_open_entry(self, employee_id: int) -> Optional[TimeEntry]:
        try:
            doc = await self._entries.find_one(
                {"employee_id": employee_id, "clock_in": {"$ne": None}, "clock_out": None},
                sort=[("clock_in", -1)],
            )
        except PyMongoError as exc:
            raise StorageError("get_open_entry", exc) from exc
        return TimeEntry.from_document(doc) if doc else None

    async def get_entries_for_date(self, employee_id: int, shift_date: date) -> list[TimeEntry]:
        try:
            cursor = self._entries.find(
                {"employee_id": employee_id, "shift_date": _start_of_day(shift_date)}
            ).sort("clock_in", 1)
            return [TimeEntry.from_document(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("get_entries_for_date", exc) from exc

    async def get_all_entries_for_employee(self, employee_id: int) -> list[TimeEntry]:
        try:
            cursor = self._entries.find({"employee_id": employee_id}).sort("clock_in", 1)
            return [TimeEntry.from_document(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("get_all_entries_for_employee", exc) from exc

    async def get_most_recent_closed_entry(self, employee_id: int) -> Optional[TimeEntry]:
        try:
            doc = await self._entries.find_one(
                {"employee_id": employee_id, "clock_in": {"$ne": None}, "clock_out": {"$ne": None}},
                sort=[("clock_out", -1)],
            )
        except PyMongoError as exc:
            raise StorageError("get_most_recent_closed_entry", exc) from exc
        return TimeEntry.from_document(doc) if doc else None

    async def get_entries_in_range(
        self, start: date, end: date, employee_id: Optional[int] = None
    ) -> list[TimeEntry]:
        """Entries whose shift_date falls in [start, end], both ends inclusive."""
        q: dict = {"shift_date": {"$gte": _start_of_day(start), "$lte": _start_of_day(end)}}
        if employee_id is not None:
            q["employee_id"] = employee_id
        try:
            cursor = self._entries.find(q).sort([("shift_date", 1), ("clock_in", 1)])
            return [TimeEntry.from_document(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("get_entries_in_range", exc) from exc

    async def create(self, employee_id: int, clock_in: datetime, notes: str = "") -> TimeEntry:
        try:
            entry = TimeEntry(
                entry_id=await self._next_entry_id(),
                employee_id=employee_id,
                shift_date=clock_in.date(),
                clock_in=clock_in,
                clock_out=None,
                notes=notes,
                created_date=clock_in,
                modified_date=clock_in,
            )
            await self._entries.insert_one(entry.to_document())
        except PyMongoError as exc:
            raise StorageError("create", exc) from exc
        return entry

    async def update(self, entry: TimeEntry) -> bool:
        try:
            res = await self._entries.replace_one(
                {"_id": entry.entry_id, "employee_id": entry.employee_id},
                entry.to_document(),
            )
        except PyMongoError as exc:
            raise StorageError("update", exc) from exc
        return res.matched_count == 1
