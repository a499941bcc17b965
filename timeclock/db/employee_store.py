from typing import Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from timeclock.core.exceptions import StorageError
from timeclock.schemas.employee_schema import Employee, EmployeeDocument


class EmployeeDirectory(Protocol):
    async def get_employee(self, employee_id: int) -> Optional[Employee]: ...

    async def get_pay_rate(self, employee_id: int) -> float: ...


class MongoEmployeeDirectory:
    """Read-only employee lookups; employee maintenance happens elsewhere."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        try:
            doc = await self._db["employees"].find_one({"_id": employee_id})
        except PyMongoError as exc:
            raise StorageError("get_employee", exc) from exc
        if not doc:
            return None
        return EmployeeDocument.model_validate(doc).to_employee()

    async def get_pay_rate(self, employee_id: int) -> float:
        employee = await self.get_employee(employee_id)
        return employee.pay_rate if employee else 0.0
