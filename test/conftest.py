import pytest
import pytest_asyncio
import os
import sys
from tortoise import Tortoise

# Добавляем корневую директорию проекта в путь Python
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from app.core.db import MODEL_MODULES
from app.core.logging_config import setup_test_logging

# Настройка для pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

setup_test_logging()


# Пометки для группировки тестов
def pytest_configure(config):
    """Регистрируем кастомные маркеры"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may be slow)"
    )
    config.addinivalue_line(
        "markers", "database: marks tests that use database"
    )


@pytest_asyncio.fixture
async def db():
    """In-memory SQLite для тестов репозиториев и выборки"""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": MODEL_MODULES},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()

    yield

    # Закрываем соединения после теста
    await Tortoise.close_connections()
