"""
Manager session for the shared kiosk.

One manager session at a time. A successful PIN check opens it, it lasts for a
fixed timeout and is extended whenever a manager action goes through. Nothing
runs in the background: expiry is noticed the next time someone asks is_valid().

States:
UNAUTHENTICATED -> AUTHENTICATED -> EXPIRED -> UNAUTHENTICATED
"""
import hmac
import logging
import secrets
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from timeclock.core.clock import Clock, SystemClock


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED = "AUTHENTICATED"
    EXPIRED = "EXPIRED"


def is_valid_pin_format(pin: Optional[str]) -> bool:
    """Manager PINs are exactly four digits."""
    if pin is None:
        return False
    clean = pin.strip()
    return len(clean) == 4 and clean.isdigit()


class ManagerSessionAuthenticator:
    def __init__(self, pin: str, timeout: timedelta, clock: Clock | None = None) -> None:
        self._pin = (pin or "").strip()
        self._timeout = timeout
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._state = SessionState.UNAUTHENTICATED
        self._authenticated_at: Optional[datetime] = None
        self._session_id: Optional[str] = None
        if not self._pin:
            logger.warning("No manager PIN configured; manager authentication is disabled")

    @property
    def timeout(self) -> timedelta:
        return self._timeout

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def authenticated_at(self) -> Optional[datetime]:
        with self._lock:
            return self._authenticated_at

    @property
    def session_id(self) -> Optional[str]:
        with self._lock:
            return self._session_id

    def authenticate(self, pin: Optional[str]) -> bool:
        if pin is None or not pin.strip():
            logger.info("Manager authentication failed: empty PIN")
            return False
        if not self._pin:
            logger.warning("Manager authentication attempted but no PIN is configured")
            return False
        candidate = pin.strip()
        if not hmac.compare_digest(candidate.encode("utf-8"), self._pin.encode("utf-8")):
            logger.info("Manager authentication failed: incorrect PIN")
            return False
        with self._lock:
            self._state = SessionState.AUTHENTICATED
            self._authenticated_at = self._clock.now()
            self._session_id = secrets.token_urlsafe(16)
        logger.info("Manager authenticated")
        return True

    def _expired(self, now: datetime) -> bool:
        return now - self._authenticated_at > self._timeout

    def _reset(self) -> None:
        self._state = SessionState.UNAUTHENTICATED
        self._authenticated_at = None
        self._session_id = None

    def is_valid(self) -> bool:
        """True while the session is inside its timeout; clears it once it is not."""
        with self._lock:
            if self._state is not SessionState.AUTHENTICATED or self._authenticated_at is None:
                return False
            if self._expired(self._clock.now()):
                self._state = SessionState.EXPIRED
                logger.info("Manager session expired; clearing authentication")
                self._reset()
                return False
            return True

    def extend_session(self) -> bool:
        with self._lock:
            if self._state is not SessionState.AUTHENTICATED or self._authenticated_at is None:
                return False
            now = self._clock.now()
            if self._expired(now):
                logger.info("Manager session expired before it could be extended")
                self._reset()
                return False
            self._authenticated_at = now
        logger.debug("Manager session extended")
        return True

    def clear_authentication(self) -> None:
        with self._lock:
            self._reset()
        logger.info("Manager authentication cleared")

    def remaining_time(self) -> timedelta:
        with self._lock:
            if self._state is not SessionState.AUTHENTICATED or self._authenticated_at is None:
                return timedelta(0)
            remaining = self._timeout - (self._clock.now() - self._authenticated_at)
        return max(remaining, timedelta(0))

    def status_message(self) -> str:
        with self._lock:
            was_authenticated = self._state is SessionState.AUTHENTICATED
        if not was_authenticated:
            return "Manager authentication required"
        if not self.is_valid():
            return "Manager session expired"
        remaining = self.remaining_time()
        seconds = int(remaining.total_seconds())
        if seconds <= 0:
            return "Manager session expired"
        minutes, seconds = divmod(seconds, 60)
        if minutes >= 1:
            return f"Manager authenticated ({minutes} min {seconds} sec remaining)"
        return f"Manager authenticated ({seconds} sec remaining)"
