from fastapi import FastAPI
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo
import logging

from app.core.config import get_settings
from app.core.db import init_db, close_db
from app.core.logging_config import setup_logging
from app.routers import tasks
from app.services.reminder_service import build_reminder_pipeline
from app.workers.reminders.scheduler import create_reminder_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    setup_logging(settings.log_level)
    await init_db()

    reminder_scheduler = None
    if settings.reminders_enabled:
        pipeline = build_reminder_pipeline(settings, tz=ZoneInfo(settings.timezone))
        reminder_scheduler = create_reminder_scheduler(pipeline, settings)
        reminder_scheduler.start()
    else:
        logger.info("Напоминания отключены (REMINDERS_ENABLED=false)")
    app.state.reminder_scheduler = reminder_scheduler

    yield

    # Shutdown
    if reminder_scheduler is not None:
        reminder_scheduler.shutdown()
    await close_db()


app = FastAPI(
    title="Todo API",
    description="API для управления личными задачами с ежедневными напоминаниями по email",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


__all__ = ["app"]
