"""
SMTP клиент для отправки писем-напоминаний
"""
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

import aiosmtplib

from app.core.config import Settings, get_settings
from app.core.exceptions import MailConfigurationError, MailDeliveryError

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


@dataclass(frozen=True)
class MailResult:
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "MailResult":
        return cls(success=True)

    @classmethod
    def failure(cls, reason: str) -> "MailResult":
        return cls(success=False, error=reason)


class MailClient(Protocol):
    async def send(self, to_address: str, subject: str, html_body: str) -> MailResult: ...


class SmtpMailClient:
    """Клиент для отправки писем через SMTP (aiosmtplib)"""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.timeout = settings.smtp_timeout
        self.sender = settings.sender_address

        if not self.is_configured:
            logger.warning("SMTP не настроен: напоминания будут выбираться, но не отправляться")

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.sender)

    def _build_message(self, to_address: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content("Откройте письмо в почтовом клиенте с поддержкой HTML.")
        message.add_alternative(html_body, subtype="html")
        return message

    async def send(self, to_address: str, subject: str, html_body: str) -> MailResult:
        """
        Отправляет HTML письмо

        Args:
            to_address: Адрес получателя
            subject: Тема письма
            html_body: HTML тело письма

        Returns:
            MailResult. Если сервер отклонил получателя (SMTPRecipientsRefused
            или запись в словаре ошибок), success=False

        Raises:
            MailConfigurationError: SMTP не настроен
            MailDeliveryError: Ошибка соединения, таймаут или ошибка SMTP
        """
        if not self.is_configured:
            raise MailConfigurationError("SMTP не настроен: укажите SMTP_HOST и MAIL_FROM")
        if not to_address:
            raise ValueError("Адрес получателя не может быть пустым")

        message = self._build_message(to_address, subject, html_body)
        implicit_tls = self.port == SMTP_SSL_PORT

        try:
            logger.debug(f"Отправка письма на {to_address}: {subject}")
            errors, response = await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=implicit_tls,
                start_tls=self.use_tls and not implicit_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPRecipientsRefused as e:
            # Единственный получатель отклонен: aiosmtplib бросает исключение вместо словаря errors
            reason = "; ".join(f"{r.code} {r.message}" for r in e.recipients) or str(e)
            logger.error(f"SMTP сервер отклонил получателя {to_address}: {reason}")
            return MailResult.failure(reason)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Ошибка SMTP при отправке на {to_address}: {str(e)}")
            raise MailDeliveryError(str(e)) from e

        if to_address in errors:
            reason = str(errors[to_address])
            logger.error(f"SMTP сервер отклонил получателя {to_address}: {reason}")
            return MailResult.failure(reason)

        logger.info(f"Письмо успешно отправлено на {to_address}")
        return MailResult.ok()
