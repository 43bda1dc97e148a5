"""Task service — owner-scoped task CRUD.

Learn: Every method takes the caller's user id explicitly, and every
single-task operation goes through _get_owned(), which looks a task up
by (task id, owner id) together. That lookup is the whole authorization
model: there is no separate permission check on top.

A task that belongs to someone else is reported exactly like a task
that doesn't exist (TaskNotFound), so ids can't be probed across
accounts.

Status is a plain field. PENDING → IN_PROGRESS → COMPLETED is the usual
path, but any status may be set to any other; only ownership is
enforced.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.db.models import Task, TaskStatus, utcnow
from taskguard.errors import TaskNotFound

logger = structlog.get_logger()


class TaskService:
    """Business logic for tasks, always scoped to one owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_owned(self, task_id: int, owner_id: int) -> Task:
        result = await self.db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == owner_id)
        )
        task = result.scalars().first()
        if not task:
            raise TaskNotFound()
        return task

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        """Create a task owned by owner_id. Timestamps are set here, never by the client."""
        now = utcnow()
        task = Task(
            user_id=owner_id,
            title=title.strip(),
            description=description,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)

        logger.info("taskguard.tasks.created", task_id=task.id, owner_id=owner_id)
        return task

    # ─── Read ────────────────────────────────────────────

    async def get_task(self, task_id: int, owner_id: int) -> Task:
        return await self._get_owned(task_id, owner_id)

    async def list_tasks(
        self,
        owner_id: int,
        status: Optional[TaskStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Task]:
        """List the owner's tasks, newest first.

        Learn: id DESC breaks ties between tasks created within the same
        clock tick, so the order is stable.
        """
        query = (
            select(Task)
            .where(Task.user_id == owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit)
            .offset(offset)
        )
        if status:
            query = query.where(Task.status == status)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        task_id: int,
        owner_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> Task:
        """Update the given fields. The owner is not an updatable field."""
        task = await self._get_owned(task_id, owner_id)

        changes = []
        if title is not None:
            task.title = title.strip()
            changes.append("title")
        if description is not None:
            task.description = description
            changes.append("description")
        if status is not None:
            task.status = status
            changes.append("status")

        if changes:
            task.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(task)
            logger.info("taskguard.tasks.updated", task_id=task.id, fields=changes)
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, task_id: int, owner_id: int) -> None:
        task = await self._get_owned(task_id, owner_id)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("taskguard.tasks.deleted", task_id=task_id, owner_id=owner_id)
