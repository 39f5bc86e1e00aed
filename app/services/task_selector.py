"""
Выборка задач для напоминаний и разрешение их владельцев.
"""
import logging
from dataclasses import dataclass
from typing import List

from app.core.exceptions import SelectionError
from app.models.task import Task, TaskStatus
from app.models.user import User
from app.repositories.task_repository import TaskRepository
from app.repositories.user_repository import UserRepository
from app.services.reminder_window import SelectionWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderTarget:
    """Задача и пользователь, которому отправляется напоминание"""
    task: Task
    user: User


class TaskSelector:
    def __init__(self, task_repo: TaskRepository, user_repo: UserRepository):
        self.task_repo = task_repo
        self.user_repo = user_repo

    async def select(self, window: SelectionWindow) -> List[ReminderTarget]:
        """
        Незавершенные задачи со сроком в окне вместе с их владельцами.

        Задачи без владельца или без email у владельца пропускаются.

        Raises:
            SelectionError: Хранилище недоступно, выборка не получена
        """
        try:
            tasks = await self.task_repo.find_in_window(
                window.start, window.end, exclude_status=TaskStatus.COMPLETED
            )
            # Один запрос на всех владельцев вместо запроса на каждую задачу
            users = await self.user_repo.get_many(task.user_id for task in tasks)
        except Exception as e:
            raise SelectionError(f"Не удалось выбрать задачи для напоминаний: {e}") from e

        targets: List[ReminderTarget] = []
        for task in tasks:
            user = users.get(str(task.user_id))
            if user is None:
                logger.warning(f"Задача {task.id}: владелец {task.user_id} не найден, пропускаем")
                continue
            if not user.email:
                logger.warning(f"Задача {task.id}: у пользователя {user.id} нет email, пропускаем")
                continue
            targets.append(ReminderTarget(task=task, user=user))

        logger.info(f"Выбрано задач для напоминаний: {len(targets)} из {len(tasks)}")
        return targets
