#!/usr/bin/env python3
"""
Разовый запуск рассылки напоминаний (без ожидания расписания)

Usage:
    python app/run_reminders.py

Требования:
    - PostgreSQL доступен (DB_* в .env)
    - SMTP настроен (SMTP_HOST, MAIL_FROM и при необходимости SMTP_USERNAME/SMTP_PASSWORD)
"""

import asyncio
import logging
import sys
import os
from zoneinfo import ZoneInfo

# Добавляем корневую директорию в путь для импортов
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import get_settings
from app.core.db import init_db, close_db
from app.core.logging_config import setup_logging
from app.services.reminder_service import build_reminder_pipeline
from app.workers.reminders.scheduler import ReminderTrigger


async def run_once():
    settings = get_settings()
    tz = ZoneInfo(settings.timezone)
    await init_db()
    try:
        trigger = ReminderTrigger(build_reminder_pipeline(settings, tz=tz), tz=tz)
        return await trigger.fire(force=True)
    finally:
        await close_db()


def main():
    """Запускает конвейер один раз и возвращает код выхода"""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger("app.run_reminders")

    report = asyncio.run(run_once())
    if report is None or report.aborted:
        logger.error("Рассылка напоминаний не выполнена")
        sys.exit(1)

    logger.info(f"Готово: попыток {report.attempted}, отправлено {report.sent}, ошибок {report.failed}")


if __name__ == "__main__":
    main()
