"""
Ежедневный запуск рассылки напоминаний.

ReminderTrigger гарантирует, что одновременно выполняется не более одного
запуска, и помнит день последнего запуска (только в памяти процесса:
после рестарта около времени запуска возможен пропуск или повтор).
ReminderScheduler вызывает trigger по cron через APScheduler.
"""
import asyncio
import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import Settings, get_settings
from app.schemas.reminder import ReminderBatchReport
from app.services.reminder_service import ReminderPipeline
from app.services.reminder_window import get_scheduler_timezone, utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

JOB_ID = "daily_task_reminders"


class ReminderTrigger:
    def __init__(self, pipeline: ReminderPipeline, *, clock: Clock = utc_now, tz: Optional[tzinfo] = None):
        self.pipeline = pipeline
        self.clock = clock
        self.tz = tz or get_scheduler_timezone()
        self.last_fired_day: Optional[date] = None
        self.last_report: Optional[ReminderBatchReport] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def fire(self, force: bool = False) -> Optional[ReminderBatchReport]:
        """
        Запускает конвейер, если он не выполняется и сегодня еще не запускался.

        Args:
            force: Игнорировать отметку о запуске сегодня (но не текущий запуск)

        Returns:
            Отчет запуска или None, если запуск пропущен
        """
        if self._lock.locked():
            logger.warning("Предыдущий запуск напоминаний еще выполняется, срабатывание пропущено")
            return None

        async with self._lock:
            now = self.clock()
            today = now.astimezone(self.tz).date() if now.tzinfo else now.date()
            if not force and self.last_fired_day == today:
                logger.warning(f"Напоминания за {today} уже запускались, срабатывание пропущено")
                return None
            self.last_fired_day = today

            try:
                report = await self.pipeline.run(now)
            except Exception:
                logger.exception("Необработанная ошибка в запуске напоминаний")
                return None

            self.last_report = report
            if report.aborted:
                logger.error(f"Запуск напоминаний за {today} прерван: {report.error}")
            else:
                logger.info(
                    f"Запуск напоминаний за {today} завершен: отправлено {report.sent}, ошибок {report.failed}"
                )
            return report


class ReminderScheduler:
    """Обертка над AsyncIOScheduler с одной ежедневной задачей"""

    def __init__(
        self,
        trigger: ReminderTrigger,
        *,
        hour: int = 9,
        minute: int = 0,
        tz: Optional[tzinfo] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.trigger = trigger
        self.hour = hour
        self.minute = minute
        self.tz = tz or trigger.tz
        self.scheduler = scheduler or AsyncIOScheduler(
            timezone=self.tz,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 300,
            },
        )

    def start(self) -> None:
        self.scheduler.add_job(
            self.trigger.fire,
            CronTrigger(hour=self.hour, minute=self.minute, timezone=self.tz),
            id=JOB_ID,
            name="Daily task reminders",
            replace_existing=True,
        )
        self.scheduler.start()
        job = self.scheduler.get_job(JOB_ID)
        logger.info(f"Планировщик напоминаний запущен, следующий запуск: {job.next_run_time if job else None}")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Планировщик напоминаний остановлен")


def create_reminder_scheduler(
    pipeline: ReminderPipeline,
    settings: Optional[Settings] = None,
    clock: Clock = utc_now,
) -> ReminderScheduler:
    settings = settings or get_settings()
    tz = ZoneInfo(settings.timezone)
    trigger = ReminderTrigger(pipeline, clock=clock, tz=tz)
    return ReminderScheduler(trigger, hour=settings.reminder_hour, minute=settings.reminder_minute, tz=tz)
