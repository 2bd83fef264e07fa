"""FastAPI application entry point."""
import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.errors import DomainError, TransientStoreError
from app.services.reminder_dispatch import NotificationReminderDispatcher
from app.services.reminder_sweeper import ReminderSweeper

# Import routers
from app.routers import events, notifications, reminders

# Import all models so Base.metadata knows about them
from app.models.event import Event               # noqa: F401
from app.models.rsvp import EventRSVP            # noqa: F401
from app.models.notification import Notification  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create SQLite tables, wire the reminder sweeper, and run it on its interval."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    sweeper = ReminderSweeper(SessionLocal, NotificationReminderDispatcher(SessionLocal))
    app.state.reminder_sweeper = sweeper

    sweep_task = None
    if settings.REMINDER_SWEEP_ENABLED:
        sweep_task = asyncio.create_task(sweeper.run_periodically(settings.REMINDER_SWEEP_INTERVAL_SECONDS))
    yield
    if sweep_task is not None:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
        logger.info("Reminder sweeper stopped")


app = FastAPI(
    title="Artist Events",
    description="Artist events, RSVPs with a consistent attendee count, and pre-event reminders",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(reminders.router, prefix="/api/reminders", tags=["Reminders"])


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Uniform body for service-layer errors: detail plus a stable code."""
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(OperationalError)
async def store_error_handler(request: Request, exc: OperationalError):
    """Storage conflicts/timeouts outside the ledger's own handling."""
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable, retry the request", "code": TransientStoreError.code},
    )


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
