"""
Тесты API списка задач.
Фильтрация, поиск и сортировка должны совпадать с правилами query_builder.
"""

import pytest
import pytest_asyncio
import httpx
import uuid
from datetime import datetime
from zoneinfo import ZoneInfo

from app.main import app
from app.models.task import Task, TaskPriority, TaskStatus
from app.models.user import User


UTC = ZoneInfo("UTC")


@pytest_asyncio.fixture
async def client(db):
    # ASGITransport не запускает lifespan: БД уже поднята фикстурой db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def owner(db):
    user = await User.create(email="owner@example.com")
    await Task.create(
        user=user, title="Complete Project", description="Finish the todo app project",
        due_date=datetime(2024, 3, 20, tzinfo=UTC), priority=TaskPriority.HIGH, status=TaskStatus.IN_PROGRESS,
    )
    await Task.create(
        user=user, title="Buy milk", description=None,
        due_date=datetime(2024, 3, 19, tzinfo=UTC), priority=TaskPriority.LOW,
    )
    await Task.create(
        user=user, title="Call plumber", description="about the kitchen project",
        due_date=datetime(2024, 3, 25, tzinfo=UTC), priority=TaskPriority.MEDIUM, status=TaskStatus.COMPLETED,
    )
    other = await User.create(email="other@example.com")
    await Task.create(user=other, title="Project for someone else")
    return user


@pytest.mark.database
@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.database
@pytest.mark.asyncio
async def test_list_default_order_is_creation_order(client, owner):
    response = await client.get("/tasks", params={"user_id": str(owner.id)})

    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["Complete Project", "Buy milk", "Call plumber"]


@pytest.mark.database
@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(client, owner):
    """Сценарий: q=Proj находит "Complete Project", но не "Buy milk"."""
    response = await client.get("/tasks", params={"user_id": str(owner.id), "q": "Proj"})
    titles = [t["title"] for t in response.json()]

    assert "Complete Project" in titles
    assert "Buy milk" not in titles
    # Совпадение по описанию, другой регистр
    assert "Call plumber" in titles
    # Чужие задачи не попадают
    assert "Project for someone else" not in titles


@pytest.mark.database
@pytest.mark.asyncio
async def test_status_filter(client, owner):
    response = await client.get("/tasks", params={"user_id": str(owner.id), "status": "Completed"})

    assert [t["title"] for t in response.json()] == ["Call plumber"]
    assert response.json()[0]["status"] == "Completed"


@pytest.mark.database
@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["completed", "Done", "pending"])
async def test_non_exact_status_returns_empty_list(client, owner, status):
    """Неточный статус не снимает фильтр: ни открытые, ни завершенные задачи не возвращаются."""
    response = await client.get("/tasks", params={"user_id": str(owner.id), "status": status})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.database
@pytest.mark.asyncio
async def test_sort_by_due_date(client, owner):
    response = await client.get("/tasks", params={"user_id": str(owner.id), "sortBy": "dueDate"})

    assert [t["title"] for t in response.json()] == ["Buy milk", "Complete Project", "Call plumber"]


@pytest.mark.database
@pytest.mark.asyncio
async def test_unknown_sort_matches_default(client, owner):
    default = await client.get("/tasks", params={"user_id": str(owner.id)})
    unknown = await client.get("/tasks", params={"user_id": str(owner.id), "sortBy": "unknownValue"})

    assert [t["id"] for t in unknown.json()] == [t["id"] for t in default.json()]


@pytest.mark.database
@pytest.mark.asyncio
async def test_unknown_user_gets_empty_list(client, owner):
    response = await client.get("/tasks", params={"user_id": str(uuid.uuid4())})

    assert response.status_code == 200
    assert response.json() == []
