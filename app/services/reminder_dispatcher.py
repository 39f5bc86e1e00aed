"""
Отправка писем-напоминаний по выбранным задачам.

Каждая пара (задача, пользователь) обрабатывается независимо: ошибка
рендеринга или отправки одной пары записывается в отчет и не мешает
остальным. Повторных попыток внутри запуска нет, незавершенная задача
попадет в выборку на следующий день.
"""
import asyncio
import html
import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional, Sequence

from app.schemas.reminder import DeliveryStatus, ReminderBatchReport, ReminderOutcome
from app.services.mail_client import MailClient
from app.services.reminder_window import get_scheduler_timezone, utc_now
from app.services.task_selector import ReminderTarget
from app.utils.template_manager import TemplateManager, template_manager

logger = logging.getLogger(__name__)

REMINDER_TEMPLATE = "task_reminder"
NO_DESCRIPTION = "No description"


class ReminderRenderer:
    """Формирует тему и HTML тело напоминания"""

    def __init__(self, templates: Optional[TemplateManager] = None, tz: Optional[tzinfo] = None):
        self.templates = templates or template_manager
        self.tz = tz

    def subject(self, target: ReminderTarget) -> str:
        return f"Todo Reminder: {target.task.title}"

    def body(self, target: ReminderTarget) -> str:
        task = target.task
        return self.templates.render(
            REMINDER_TEMPLATE,
            title=html.escape(task.title),
            due_date=html.escape(self._format_due_date(task.due_date)),
            description=html.escape(task.description or NO_DESCRIPTION),
            priority=html.escape(str(_enum_value(task.priority))),
            status=html.escape(str(_enum_value(task.status))),
        )

    def _format_due_date(self, due_date: Optional[datetime]) -> str:
        if due_date is None:
            return "no due date"
        if due_date.tzinfo is None:
            due_date = due_date.replace(tzinfo=timezone.utc)
        return due_date.astimezone(self.tz or get_scheduler_timezone()).strftime("%Y-%m-%d")


def _enum_value(value):
    return getattr(value, "value", value)


class ReminderDispatcher:
    def __init__(
        self,
        mailer: MailClient,
        *,
        concurrency: int = 1,
        renderer: Optional[ReminderRenderer] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.mailer = mailer
        self.concurrency = max(1, int(concurrency))
        self.renderer = renderer or ReminderRenderer()
        self.clock = clock

    async def dispatch(
        self,
        targets: Sequence[ReminderTarget],
        report: Optional[ReminderBatchReport] = None,
    ) -> ReminderBatchReport:
        """
        Отправляет напоминания по всем парам.

        Args:
            targets: Пары (задача, пользователь)
            report: Отчет, в который добавляются результаты. Если не передан, создается новый

        Returns:
            ReminderBatchReport с результатом по каждой паре в порядке targets
        """
        if report is None:
            report = ReminderBatchReport(started_at=self.clock())

        if self.concurrency == 1:
            outcomes = [await self._send_one(target) for target in targets]
        else:
            semaphore = asyncio.Semaphore(self.concurrency)

            async def limited(target: ReminderTarget) -> ReminderOutcome:
                async with semaphore:
                    return await self._send_one(target)

            outcomes = await asyncio.gather(*(limited(t) for t in targets))

        report.outcomes.extend(outcomes)
        logger.info(
            f"Напоминания: попыток {report.attempted}, отправлено {report.sent}, ошибок {report.failed}"
        )
        return report

    async def _send_one(self, target: ReminderTarget) -> ReminderOutcome:
        task, user = target.task, target.user
        try:
            subject = self.renderer.subject(target)
            body = self.renderer.body(target)
            result = await self.mailer.send(user.email, subject, body)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.error(f"Задача {task.id}: не удалось отправить напоминание на {user.email}: {reason}")
            return self._outcome(target, DeliveryStatus.FAILED, reason)

        if not result.success:
            logger.error(f"Задача {task.id}: почтовый сервис отклонил письмо на {user.email}: {result.error}")
            return self._outcome(target, DeliveryStatus.FAILED, result.error or "unknown error")

        logger.info(f"Задача {task.id}: напоминание отправлено на {user.email} ('{task.title}')")
        return self._outcome(target, DeliveryStatus.SENT)

    @staticmethod
    def _outcome(target: ReminderTarget, status: DeliveryStatus, error: Optional[str] = None) -> ReminderOutcome:
        return ReminderOutcome(task_id=target.task.id, email=target.user.email, status=status, error=error)
