"""Storage operations for tasks."""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.task import Task
from schemas.task import TaskCreate, TaskPatch, TaskRecord
from schemas.validators import parse_id
from services.exceptions import NotFoundError
from services.utils import decode_row, decode_rows

logger = logging.getLogger(__name__)

ENTITY = "task"


async def get_all_tasks(db: AsyncSession) -> list[TaskRecord]:
    """Get every task, newest first. Not scoped to an owner."""
    result = await db.execute(
        select(Task).order_by(Task.created_at.desc(), Task.id.desc()),
    )
    return decode_rows(TaskRecord, ENTITY, result.scalars().all())


async def get_task(db: AsyncSession, task_id: str) -> TaskRecord | None:
    """Get a task by ID. Returns None if not found."""
    pk = parse_id(task_id)
    if pk is None:
        return None
    result = await db.execute(select(Task).where(Task.id == pk))
    task = result.scalar_one_or_none()
    if task is None:
        return None
    return decode_row(TaskRecord, ENTITY, task)


async def create_task(
    db: AsyncSession,
    data: TaskCreate,
    created_by: str,
) -> TaskRecord:
    """
    Create a new task owned by created_by.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    task = Task(
        title=data.title,
        description=data.description,
        completed=False,
        created_by=created_by,
    )
    db.add(task)
    await db.flush()
    await db.refresh(task)
    logger.info("Created task %s for %s", task.id, created_by)
    return decode_row(TaskRecord, ENTITY, task)


async def update_task(db: AsyncSession, task_id: str, patch: TaskPatch) -> None:
    """
    Apply a partial update to a task.

    Only the fields in the patch are written. An empty patch writes nothing
    but still requires the task to exist.

    Raises:
        NotFoundError: If no task has this id.
    """
    pk = parse_id(task_id)
    if pk is None:
        raise NotFoundError(ENTITY, task_id)

    if patch.is_empty():
        exists = await db.scalar(select(Task.id).where(Task.id == pk))
        if exists is None:
            raise NotFoundError(ENTITY, task_id)
        return

    result = await db.execute(
        update(Task)
        .where(Task.id == pk)
        .values(**patch.changes()),
    )
    if result.rowcount == 0:
        raise NotFoundError(ENTITY, task_id)


async def delete_task(db: AsyncSession, task_id: str) -> None:
    """
    Delete a task permanently.

    Raises:
        NotFoundError: If no task has this id.
    """
    pk = parse_id(task_id)
    if pk is None:
        raise NotFoundError(ENTITY, task_id)

    result = await db.execute(
        delete(Task)
        .where(Task.id == pk),
    )
    if result.rowcount == 0:
        raise NotFoundError(ENTITY, task_id)
    logger.info("Deleted task %s", task_id)
