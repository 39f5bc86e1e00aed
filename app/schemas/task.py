from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
import uuid

from app.models.task import TaskPriority, TaskStatus


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: Optional[str]
    due_date: Optional[datetime]
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime
