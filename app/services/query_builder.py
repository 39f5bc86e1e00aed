"""
Построение условий выборки задач.

Один и тот же набор правил используется списком задач (GET /tasks)
и выборкой для напоминаний, чтобы фильтрация не расходилась.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from tortoise.expressions import Q

from app.models.task import TaskStatus

logger = logging.getLogger(__name__)

# Разрешенные ключи сортировки -> поле модели
SORT_FIELDS = {
    "dueDate": "due_date",
    "createdAt": "created_at",
    "priority": "priority",
}
DEFAULT_SORT_FIELD = "created_at"

_STATUS_VALUES = {s.value: s for s in TaskStatus}


@dataclass(frozen=True)
class TaskQuery:
    """Условие выборки задач одного владельца и поле сортировки"""

    owner_id: uuid.UUID
    status: Optional[TaskStatus] = None
    search: Optional[str] = None
    order_by: str = DEFAULT_SORT_FIELD
    # Передан статус, которого нет в TaskStatus: ни одна задача не подходит
    matches_nothing: bool = False

    def to_q(self) -> Q:
        """Преобразует условие в Q-выражение Tortoise"""
        q = Q(user_id=self.owner_id)
        if self.matches_nothing:
            return q & Q(id__in=[])
        if self.status is not None:
            q &= Q(status=self.status)
        if self.search:
            q &= Q(title__icontains=self.search) | Q(description__icontains=self.search)
        return q


def resolve_sort_key(sort_by: Optional[str]) -> str:
    """Ключ сортировки из белого списка, иначе created_at"""
    if sort_by is None:
        return DEFAULT_SORT_FIELD
    return SORT_FIELDS.get(sort_by, DEFAULT_SORT_FIELD)


def resolve_status(status: Optional[str]) -> Optional[TaskStatus]:
    """Статус должен совпадать со значением TaskStatus дословно"""
    if not status:
        return None
    resolved = _STATUS_VALUES.get(status)
    if resolved is None:
        logger.debug(f"Неизвестный статус '{status}', ни одна задача не подойдет")
    return resolved


def build_task_query(
    owner_id: uuid.UUID,
    *,
    status: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
) -> TaskQuery:
    """
    Собирает условие выборки задач пользователя.

    Args:
        owner_id: ID владельца задач (обязателен)
        status: Точное значение статуса ("Pending", "In Progress", "Completed").
            Любое другое непустое значение дает пустую выборку
        search: Подстрока для поиска по заголовку или описанию без учета регистра
        sort_by: dueDate / createdAt / priority

    Returns:
        TaskQuery. Некорректные параметры не вызывают ошибок.
    """
    resolved_status = resolve_status(status)
    return TaskQuery(
        owner_id=owner_id,
        status=resolved_status,
        search=search or None,
        order_by=resolve_sort_key(sort_by),
        matches_nothing=bool(status) and resolved_status is None,
    )
