"""
Окно выборки задач для напоминаний.

Окно начинается в полночь текущего дня и заканчивается в 23:59:59.999
следующего дня (по часовому поясу планировщика).
"""
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.config import get_settings

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class SelectionWindow:
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_scheduler_timezone() -> ZoneInfo:
    return ZoneInfo(get_settings().timezone)


def compute_selection_window(now: datetime, tz: Optional[tzinfo] = None) -> SelectionWindow:
    """
    Вычисляет окно [start, end] для момента now.

    Args:
        now: Текущий момент. Наивное время считается локальным для tz.
        tz: Часовой пояс календарного дня, по умолчанию settings.timezone
    """
    tz = tz or get_scheduler_timezone()
    local_now = now.replace(tzinfo=tz) if now.tzinfo is None else now.astimezone(tz)

    today = local_now.date()
    # Границы - календарные дни tz. В дни перевода часов окно длиннее
    # или короче 48 часов на час (49 ч при переводе назад, 47 ч вперед)
    start = datetime.combine(today, time.min, tzinfo=tz)
    end = datetime.combine(today + timedelta(days=1), END_OF_DAY, tzinfo=tz)
    return SelectionWindow(start=start, end=end)
