"""Pydantic schemas for tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (all optional)
- TaskRead: what the API returns

None of them has an owner or timestamp field the client can set. The
owner comes from the token and the timestamps from the service.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from taskguard.db.models import TaskStatus


class TaskCreate(BaseModel):
    title: Optional[str] = None  # required; checked by validate_task_fields
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(BaseModel):
    """Partial update — only non-None fields are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = Field(
        None, description="Any status may be set from any other"
    )


class TaskRead(BaseModel):
    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
