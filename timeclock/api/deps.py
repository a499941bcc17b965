from datetime import timedelta

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from timeclock.core.clock import Clock, SystemClock
from timeclock.core.config import settings
from timeclock.core.locks import EmployeeLocks
from timeclock.db.employee_store import EmployeeDirectory, MongoEmployeeDirectory
from timeclock.db.mongo import get_mongo_db
from timeclock.db.time_entry_store import MongoTimeEntryStore, TimeEntryStore
from timeclock.services.correction_workflow import CorrectionWorkflow
from timeclock.services.manager_auth import ManagerSessionAuthenticator
from timeclock.services.punch import PunchService
from timeclock.services.reports import ReportService
from timeclock.services.shift_status import ShiftStatusResolver
from timeclock.services.time_correction import TimeCorrectionEngine


# One kiosk process, one manager session slot
_clock = SystemClock()
_locks = EmployeeLocks()
_authenticator = ManagerSessionAuthenticator(
    settings.MANAGER_PIN,
    timedelta(minutes=settings.MANAGER_SESSION_TIMEOUT_MINUTES),
    _clock,
)


def get_clock() -> Clock:
    return _clock


def get_locks() -> EmployeeLocks:
    return _locks


def get_authenticator() -> ManagerSessionAuthenticator:
    return _authenticator


def get_time_entry_store(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> TimeEntryStore:
    return MongoTimeEntryStore(db)


def get_employee_directory(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> EmployeeDirectory:
    return MongoEmployeeDirectory(db)


def get_shift_status_resolver(
    store: TimeEntryStore = Depends(get_time_entry_store),
) -> ShiftStatusResolver:
    return ShiftStatusResolver(store)


def get_correction_workflow(
    store: TimeEntryStore = Depends(get_time_entry_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
    authenticator: ManagerSessionAuthenticator = Depends(get_authenticator),
    clock: Clock = Depends(get_clock),
    locks: EmployeeLocks = Depends(get_locks),
) -> CorrectionWorkflow:
    engine = TimeCorrectionEngine(
        reason_min_length=settings.CORRECTION_REASON_MIN_LENGTH,
        max_shift_hours=settings.MAX_SHIFT_HOURS,
    )
    return CorrectionWorkflow(store, employees, authenticator, engine, clock, locks)


def get_punch_service(
    store: TimeEntryStore = Depends(get_time_entry_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
    resolver: ShiftStatusResolver = Depends(get_shift_status_resolver),
    clock: Clock = Depends(get_clock),
    locks: EmployeeLocks = Depends(get_locks),
) -> PunchService:
    return PunchService(
        store,
        employees,
        resolver,
        clock,
        locks,
        cooldown_hours=settings.CLOCK_IN_COOLDOWN_HOURS,
        max_shift_hours=settings.MAX_SELF_SERVICE_SHIFT_HOURS,
    )


def get_report_service(
    store: TimeEntryStore = Depends(get_time_entry_store),
    employees: EmployeeDirectory = Depends(get_employee_directory),
) -> ReportService:
    return ReportService(store, employees)
