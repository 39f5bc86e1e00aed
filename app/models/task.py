from tortoise import fields, models
from enum import Enum
import uuid


class TaskStatus(str, Enum):
    """Статусы задачи"""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    """Приоритеты задачи"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Task(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="tasks", on_delete=fields.CASCADE)
    title = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    due_date = fields.DatetimeField(null=True, description="Срок выполнения")

    priority = fields.CharEnumField(TaskPriority, default=TaskPriority.MEDIUM, description="Приоритет задачи")
    status = fields.CharEnumField(TaskStatus, default=TaskStatus.PENDING, description="Статус выполнения")

    # Временные метки
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "tasks"
        indexes = [
            models.Index(fields=["user_id"], name="idx_task_user"),
            models.Index(fields=["created_at"], name="idx_task_created"),
            models.Index(fields=["due_date"], name="idx_task_due_date"),
            models.Index(fields=["status"], name="idx_task_status"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"
