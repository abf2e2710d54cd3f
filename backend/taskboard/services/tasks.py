"""Task visibility, field-level updates and the kanban workflow."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policy
from taskboard.core.errors import Forbidden, NotFound
from taskboard.core.logs import get_logger
from taskboard.core.policy import CurrentUser, Role, TaskScope, TaskUpdateScope
from taskboard.models.base import as_utc
from taskboard.models.task import Task
from taskboard.schemas.common import parse
from taskboard.schemas.task import (
    KanbanBoard,
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskResponse,
    TaskStats,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from taskboard.services.projects import ProjectAccess
from taskboard.services.store import ensure_users_exist, store_guard

log = get_logger("tasks")

Payload = Mapping[str, Any]


class TaskAccess:
    def __init__(self, db: AsyncSession, projects: Optional[ProjectAccess] = None):
        self.db = db
        self.projects = projects or ProjectAccess(db)

    async def fetch(self, task_id: int) -> Task:
        query = (
            select(Task)
            .where(Task.id == task_id)
            .execution_options(populate_existing=True)
        )
        async with store_guard(self.db, "fetch_task"):
            result = await self.db.execute(query)
            task = result.unique().scalar_one_or_none()
        if task is None:
            raise NotFound("task", task_id)
        return task

    async def _find(self, query) -> List[TaskResponse]:
        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        async with store_guard(self.db, "list_tasks"):
            result = await self.db.execute(query)
            tasks = result.unique().scalars().all()
        return [TaskResponse.from_task(t) for t in tasks]

    async def list(self, user: CurrentUser,
                   filters: Union[TaskFilters, Payload, None] = None) -> List[TaskResponse]:
        filters = parse(TaskFilters, filters or {})
        query = select(Task)

        if policy.task_list_scope(user) is TaskScope.assigned:
            query = query.where(Task.assigned_to_id == user.id)
        if filters.project_id is not None:
            query = query.where(Task.project_id == filters.project_id)
        if filters.status is not None:
            query = query.where(Task.status == filters.status.value)

        return await self._find(query)

    async def my_tasks(self, user: CurrentUser) -> List[TaskResponse]:
        return await self._find(select(Task).where(Task.assigned_to_id == user.id))

    async def get(self, user: CurrentUser, task_id: int) -> TaskResponse:
        task = await self.fetch(task_id)
        if not policy.can_view_task(user, task):
            log.info("User %s denied view of task %s", user.id, task_id)
            raise Forbidden("view", "task", task_id)
        return TaskResponse.from_task(task)

    async def create(self, user: CurrentUser, payload: Union[TaskCreate, Payload]) -> TaskResponse:
        if not policy.can_create_tasks(user):
            raise Forbidden("create", "task")

        data = parse(TaskCreate, payload)
        await ensure_users_exist(self.db, [data.assigned_to], "assigned_to")

        project = await self.projects.fetch(data.project_id)
        if not policy.can_manage_project(user, project):
            log.info("User %s denied task creation in project %s", user.id, project.id)
            raise Forbidden("create", "task", project.id)

        task = Task(
            title=data.title,
            description=data.description,
            status=(data.status or TaskStatus.todo).value,
            priority=(data.priority or TaskPriority.medium).value,
            project_id=project.id,
            assigned_to_id=data.assigned_to,
            created_by_id=user.id,
            due_date=data.due_date,
        )
        async with store_guard(self.db, "create_task"):
            self.db.add(task)
            await self.db.commit()

        log.info("Task %s created in project %s by user %s", task.id, project.id, user.id)
        return await self._reload(task.id)

    async def update(self, user: CurrentUser, task_id: int,
                     payload: Union[TaskUpdate, Payload]) -> TaskResponse:
        data = parse(TaskUpdate, payload)
        task = await self.fetch(task_id)

        scope = policy.task_update_scope(user, task)
        if scope is TaskUpdateScope.none:
            log.info("User %s denied update of task %s", user.id, task_id)
            raise Forbidden("update", "task", task_id)

        # All lookups run before the first attribute write
        if scope is TaskUpdateScope.full and data.assigned_to:
            await ensure_users_exist(self.db, [data.assigned_to], "assigned_to")

        supplied = data.model_dump(exclude_unset=True)
        if scope is TaskUpdateScope.status_and_description:
            # Anything else a member sends is ignored
            if data.status is not None:
                task.status = data.status.value
            if "description" in supplied:
                task.description = data.description
        else:
            if user.role is Role.manager and task.project.created_by_id != user.id:
                log.info("Manager %s editing task %s outside their own project %s",
                         user.id, task_id, task.project_id)
            if data.title:
                task.title = data.title
            if "description" in supplied:
                task.description = data.description
            if data.status:
                task.status = data.status.value
            if data.assigned_to:
                task.assigned_to_id = data.assigned_to
            if data.priority:
                task.priority = data.priority.value
            if "due_date" in supplied:
                task.due_date = data.due_date

        async with store_guard(self.db, "update_task"):
            await self.db.commit()

        log.info("Task %s updated by user %s", task_id, user.id)
        return await self._reload(task_id)

    async def update_status(self, user: CurrentUser, task_id: int,
                            status: Union[TaskStatus, str]) -> TaskResponse:
        data = parse(TaskStatusUpdate, {"status": status})
        task = await self.fetch(task_id)
        if policy.task_update_scope(user, task) is TaskUpdateScope.none:
            log.info("User %s denied status change of task %s", user.id, task_id)
            raise Forbidden("update_status", "task", task_id)

        task.status = data.status.value
        async with store_guard(self.db, "update_task_status"):
            await self.db.commit()

        log.info("Task %s moved to %s by user %s", task_id, data.status.value, user.id)
        return await self._reload(task_id)

    async def delete(self, user: CurrentUser, task_id: int) -> None:
        task = await self.fetch(task_id)
        if not policy.can_delete_task(user):
            log.info("User %s denied delete of task %s", user.id, task_id)
            raise Forbidden("delete", "task", task_id)

        async with store_guard(self.db, "delete_task"):
            await self.db.delete(task)
            await self.db.commit()
        log.info("Task %s deleted by user %s", task_id, user.id)

    async def board(self, user: CurrentUser, project_id: int) -> KanbanBoard:
        project = await self.projects.fetch(project_id)
        if not policy.can_view_project(user, project):
            raise Forbidden("view", "project", project_id)

        columns: Dict[TaskStatus, List[TaskResponse]] = {status: [] for status in TaskStatus}
        for task in await self.list(user, TaskFilters(project_id=project_id)):
            columns[task.status].append(task)
        return KanbanBoard(project_id=project_id, columns=columns)

    async def stats(self, user: CurrentUser) -> TaskStats:
        tasks = await self.my_tasks(user)
        now = datetime.now(timezone.utc)

        def count(status):
            return sum(1 for t in tasks if t.status is status)

        return TaskStats(
            total_tasks=len(tasks),
            todo_tasks=count(TaskStatus.todo),
            in_progress_tasks=count(TaskStatus.in_progress),
            done_tasks=count(TaskStatus.done),
            overdue_tasks=sum(
                1 for t in tasks
                if t.due_date is not None and as_utc(t.due_date) < now and t.status is not TaskStatus.done
            ),
        )

    async def _reload(self, task_id: int) -> TaskResponse:
        self.db.expire_all()
        return TaskResponse.from_task(await self.fetch(task_id))
