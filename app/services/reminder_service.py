"""
Конвейер ежедневных напоминаний: окно -> выборка задач -> рассылка.
"""
import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from app.core.config import Settings, get_settings
from app.core.exceptions import SelectionError
from app.repositories.task_repository import TaskRepository
from app.repositories.user_repository import UserRepository
from app.schemas.reminder import ReminderBatchReport
from app.services.mail_client import MailClient, SmtpMailClient
from app.services.reminder_dispatcher import ReminderDispatcher, ReminderRenderer
from app.services.reminder_window import compute_selection_window, utc_now
from app.services.task_selector import TaskSelector

logger = logging.getLogger(__name__)


class ReminderPipeline:
    def __init__(
        self,
        selector: TaskSelector,
        dispatcher: ReminderDispatcher,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.selector = selector
        self.dispatcher = dispatcher
        self.tz = tz
        self.clock = clock

    async def run(self, now: datetime) -> ReminderBatchReport:
        """
        Один запуск рассылки на момент now.

        Ошибка выборки (хранилище недоступно) не пробрасывается: запуск
        прерывается, отчет возвращается с aborted=True. Следующий запуск
        по расписанию повторит попытку.

        started_at берется из now, finished_at из self.clock.
        """
        window = compute_selection_window(now, self.tz)
        if now.tzinfo is None:
            now = now.replace(tzinfo=window.start.tzinfo)
        report = ReminderBatchReport(
            started_at=now.astimezone(timezone.utc),
            window_start=window.start,
            window_end=window.end,
        )
        logger.info(f"Запуск напоминаний: окно {window.start.isoformat()} - {window.end.isoformat()}")

        try:
            targets = await self.selector.select(window)
        except SelectionError as e:
            logger.exception("Запуск напоминаний прерван: выборка задач не удалась")
            report.aborted = True
            report.error = str(e)
            report.finished_at = self.clock()
            return report

        await self.dispatcher.dispatch(targets, report)
        report.finished_at = self.clock()
        return report


def build_reminder_pipeline(
    settings: Optional[Settings] = None,
    mailer: Optional[MailClient] = None,
    tz: Optional[tzinfo] = None,
    clock: Callable[[], datetime] = utc_now,
) -> ReminderPipeline:
    """Собирает конвейер с репозиториями Tortoise и SMTP клиентом"""
    settings = settings or get_settings()
    mailer = mailer or SmtpMailClient(settings)
    selector = TaskSelector(TaskRepository(), UserRepository())
    dispatcher = ReminderDispatcher(
        mailer,
        concurrency=settings.reminder_concurrency,
        renderer=ReminderRenderer(tz=tz),
        clock=clock,
    )
    return ReminderPipeline(selector, dispatcher, tz=tz, clock=clock)
