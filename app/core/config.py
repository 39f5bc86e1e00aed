from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Параметры базы данных
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="taskmind")
    db_user: str = Field(default="user")
    db_password: str = Field(default="password")

    # SMTP для отправки напоминаний
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_username: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    smtp_timeout: float = Field(default=30.0)
    mail_from: Optional[str] = Field(default=None)

    # Ежедневные напоминания
    reminders_enabled: bool = Field(default=True)
    reminder_hour: int = Field(default=9, ge=0, le=23)
    reminder_minute: int = Field(default=0, ge=0, le=59)
    reminder_concurrency: int = Field(default=1, ge=1)

    # Остальные настройки
    timezone: str = "UTC"
    log_level: str = "INFO"

    @property
    def sender_address(self) -> Optional[str]:
        """Адрес отправителя: mail_from или логин SMTP"""
        return self.mail_from or self.smtp_username

    @property
    def postgres_dsn(self) -> str:
        """Конструирует DSN для PostgreSQL из отдельных параметров"""
        return f"postgres://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"


settings = None

def get_settings() -> Settings:
    """Получить настройки приложения с ленивой инициализацией"""
    global settings
    if settings is None:
        settings = Settings()
    return settings

def reset_settings():
    """Сбросить кэшированные настройки (для тестирования)"""
    global settings
    settings = None


settings = get_settings()
