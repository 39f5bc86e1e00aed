"""
Иерархия ошибок конвейера напоминаний.

SelectionError - ошибка уровня всего запуска (хранилище недоступно),
MailError и наследники - ошибки отдельной отправки.
"""


class ReminderError(Exception):
    """Базовая ошибка конвейера напоминаний"""


class SelectionError(ReminderError):
    """Не удалось получить набор задач для рассылки"""


class MailError(ReminderError):
    """Ошибка отправки письма"""


class MailConfigurationError(MailError):
    """SMTP не настроен (нет хоста, отправителя или учетных данных)"""


class MailDeliveryError(MailError):
    """SMTP сервер отклонил письмо"""
