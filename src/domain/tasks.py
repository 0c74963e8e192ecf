"""Task domain operations: authenticate, then delegate to storage."""
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthService
from schemas.task import TaskCreate, TaskPatch, TaskRecord
from services import task_service


class TaskDomain:
    """
    Task operations for one request.

    Tasks are not owner-scoped: any authenticated caller can read, update and
    delete any task. The principal is only recorded as created_by.
    """

    def __init__(self, auth: AuthService, db: AsyncSession) -> None:
        self._auth = auth
        self._db = db

    async def get_all_tasks(self, token: str) -> list[TaskRecord]:
        await self._auth.authenticate(token)
        return await task_service.get_all_tasks(self._db)

    async def get_task_by_id(self, token: str, task_id: str) -> TaskRecord | None:
        await self._auth.authenticate(token)
        return await task_service.get_task(self._db, task_id)

    async def create_task(self, token: str, data: TaskCreate) -> TaskRecord:
        principal = await self._auth.authenticate(token)
        return await task_service.create_task(self._db, data, created_by=principal.username)

    async def update_task(self, token: str, task_id: str, patch: TaskPatch) -> None:
        await self._auth.authenticate(token)
        await task_service.update_task(self._db, task_id, patch)

    async def delete_task(self, token: str, task_id: str) -> None:
        await self._auth.authenticate(token)
        await task_service.delete_task(self._db, task_id)
