import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from timeclock.core.config import settings
from timeclock.core.exceptions import StorageError, TimeclockException
from timeclock.api.v1.manager_session import router as manager_session_router
from timeclock.api.v1.time_correction import router as time_correction_router
from timeclock.api.v1.shift_status import router as shift_status_router
from timeclock.api.v1.reports import router as reports_router
from timeclock.db.mongo import get_mongo_client, close_mongo_client
from timeclock.db.mongo_indexes import ensure_indexes

app = FastAPI(title="Timeclock Kiosk Backend")

# Build CORS allowlist from local dev + configured origins
_base_origins = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}
if settings.FRONTEND_BASE_URL:
    _base_origins.add(settings.FRONTEND_BASE_URL)
for o in settings.ALLOWED_ORIGINS:
    _base_origins.add(o)
# Normalize by stripping trailing slashes to match Origin header format
_allowed_origins = sorted({o.rstrip('/') for o in _base_origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_origin_regex=r"^http(s)?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TimeclockException)
async def timeclock_exception_handler(request: Request, exc: TimeclockException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logging.getLogger("uvicorn.error").error("Storage failure during %s: %s", exc.operation, exc.cause)
    return JSONResponse(
        status_code=503,
        content={"detail": "Time entry storage is unavailable; please try again", "error_code": "STORAGE_UNAVAILABLE"},
    )


@app.get("/")
def read_root():
    return {"message": "Welcome to Timeclock Kiosk Backend"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Mount API routers
app.include_router(manager_session_router, prefix="/api/v1")
app.include_router(time_correction_router, prefix="/api/v1")
app.include_router(shift_status_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup():
    # Initialize Mongo client
    get_mongo_client()
    # Create required indexes (non-fatal on failure)
    try:
        await ensure_indexes()
    except Exception as exc:
        logging.getLogger("uvicorn.error").warning(
            "Mongo index initialization failed: %s", exc
        )


@app.on_event("shutdown")
async def on_shutdown():
    # Close Mongo client
    close_mongo_client()
