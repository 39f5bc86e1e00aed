from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import uuid


class DeliveryStatus(str, Enum):
    """Результат отправки одного напоминания"""
    SENT = "sent"
    FAILED = "failed"


class ReminderOutcome(BaseModel):
    task_id: uuid.UUID
    email: str
    status: DeliveryStatus
    error: Optional[str] = None


class ReminderBatchReport(BaseModel):
    """Итог одного запуска рассылки напоминаний"""

    started_at: datetime
    finished_at: Optional[datetime] = None
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    outcomes: List[ReminderOutcome] = Field(default_factory=list)
    aborted: bool = False
    error: Optional[str] = None

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.status == DeliveryStatus.SENT)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == DeliveryStatus.FAILED)
