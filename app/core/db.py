from tortoise import Tortoise
from app.core.config import get_settings

# Получаем настройки
settings = get_settings()

MODEL_MODULES = [
    "app.models.user",
    "app.models.task",
]

TORTOISE_ORM = {
    "connections": {"default": settings.postgres_dsn},
    "apps": {
        "models": {
            "models": [*MODEL_MODULES, "aerich.models"],
            "default_connection": "default",
        }
    },
    # Все даты храним в UTC, окно выборки приводится к UTC перед запросом
    "use_tz": True,
    "timezone": "UTC",
}

async def init_db() -> None:
    await Tortoise.init(config=TORTOISE_ORM)
    # Generate schemas only in dev (migrations handle prod)
    # await Tortoise.generate_schemas()


async def close_db() -> None:
    await Tortoise.close_connections()
