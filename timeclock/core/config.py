import os
from dotenv import load_dotenv


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val.strip())


class Settings:
    def __init__(self) -> None:
        # Load variables from .env into environment
        load_dotenv()
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
        self.MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        self.MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "timeclock")
        # Kiosk front end (used in CORS)
        self.FRONTEND_BASE_URL: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:5173")
        # Optional comma-separated list of additional allowed origins for CORS
        self.ALLOWED_ORIGINS: list[str] = [
            o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()
        ]
        # Manager PIN comes from the environment only; empty disables manager login
        self.MANAGER_PIN: str = os.getenv("MANAGER_PIN", "").strip()
        self.MANAGER_SESSION_TIMEOUT_MINUTES: int = _as_int(os.getenv("MANAGER_SESSION_TIMEOUT_MINUTES"), 5)
        # Time correction rules
        self.CORRECTION_REASON_MIN_LENGTH: int = _as_int(os.getenv("CORRECTION_REASON_MIN_LENGTH"), 10)
        self.MAX_SHIFT_HOURS: int = _as_int(os.getenv("MAX_SHIFT_HOURS"), 24)
        # Self-service punch rules
        self.CLOCK_IN_COOLDOWN_HOURS: int = _as_int(os.getenv("CLOCK_IN_COOLDOWN_HOURS"), 4)
        self.MAX_SELF_SERVICE_SHIFT_HOURS: int = _as_int(os.getenv("MAX_SELF_SERVICE_SHIFT_HOURS"), 16)


settings = Settings()
