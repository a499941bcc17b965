import asyncio
import weakref


class EmployeeLocks:
    """One asyncio.Lock per employee id.

    Punches and manager corrections for the same employee run one at a time;
    different employees never wait on each other. A lock only lives while some
    caller holds or awaits it, so the map stays as small as the set of busy
    employees.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def for_employee(self, employee_id: int) -> asyncio.Lock:
        lock = self._locks.get(employee_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[employee_id] = lock
        return lock
