"""Task API routes.

Learn: These routes are thin. Each one:
1. gets the caller's id from get_current_user_id (401 if there is none)
2. runs the explicit field checks from taskguard.validation
3. hands (task id, owner id, fields) to TaskService

Routes never look a task up by id alone. TaskNotFound from the service
becomes a 404 in the app-wide error handler, whether the task is
missing or owned by someone else.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.auth.dependencies import get_current_user_id
from taskguard.db.engine import get_db
from taskguard.db.models import TaskStatus
from taskguard.schemas.task import TaskCreate, TaskRead, TaskUpdate
from taskguard.services.task_service import TaskService
from taskguard.validation import validate_task_fields

router = APIRouter(prefix="/tasks")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    status: Optional[TaskStatus] = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    owner_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's tasks, newest first."""
    return await svc.list_tasks(
        owner_id=owner_id, status=status, limit=limit, offset=offset
    )


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    owner_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    validate_task_fields(body.title, body.description).raise_for_errors()
    return await svc.create_task(
        owner_id=owner_id,
        title=body.title,
        description=body.description,
        status=body.status,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    owner_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    return await svc.get_task(task_id, owner_id)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    owner_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Update title, description and/or status. Omitted fields are left alone."""
    validate_task_fields(
        body.title, body.description, require_title=False
    ).raise_for_errors()
    return await svc.update_task(
        task_id,
        owner_id,
        title=body.title,
        description=body.description,
        status=body.status,
    )


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    owner_id: int = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    await svc.delete_task(task_id, owner_id)
    return Response(status_code=204)
