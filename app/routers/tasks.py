from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from app.schemas.task import TaskOut
from app.repositories.task_repository import TaskRepository
from app.services.query_builder import build_task_query
import uuid

router = APIRouter()

async def get_task_repository() -> TaskRepository:
    return TaskRepository()

@router.get("", response_model=List[TaskOut],
    summary="Список задач",
    description="Задачи пользователя с фильтром по статусу, поиском по заголовку/описанию и сортировкой (dueDate, createdAt, priority)."
)
async def list_tasks(
    user_id: uuid.UUID,
    status: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    q: Optional[str] = None,
    repo: TaskRepository = Depends(get_task_repository),
):
    # user_id приходит от слоя аутентификации, здесь он уже проверен
    query = build_task_query(user_id, status=status, search=q, sort_by=sort_by)
    return await repo.find(query)
