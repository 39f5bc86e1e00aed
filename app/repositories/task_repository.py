from app.models.task import Task, TaskStatus
from app.services.query_builder import TaskQuery
from typing import Optional, List
from datetime import datetime, timezone


class TaskRepository:

    async def find(self, query: TaskQuery) -> List[Task]:
        """Задачи владельца по условию из query_builder"""
        if query.matches_nothing:
            return []
        return await Task.filter(query.to_q()).order_by(query.order_by).all()

    async def find_in_window(
        self,
        start: datetime,
        end: datetime,
        exclude_status: Optional[TaskStatus] = TaskStatus.COMPLETED,
    ) -> List[Task]:
        """
        Задачи со сроком в интервале [start, end] включительно.

        Args:
            start: Начало интервала (aware datetime)
            end: Конец интервала (aware datetime)
            exclude_status: Статус, задачи с которым не попадают в выборку
        """
        # Границы приводим к UTC: в БД даты хранятся в UTC
        query = Task.filter(
            due_date__gte=start.astimezone(timezone.utc),
            due_date__lte=end.astimezone(timezone.utc),
        )
        if exclude_status is not None:
            query = query.exclude(status=exclude_status)
        return await query.order_by("due_date", "created_at").all()
