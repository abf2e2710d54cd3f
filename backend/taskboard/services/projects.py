"""Project listing, visibility and lifecycle, gated by role."""
from typing import Any, List, Mapping, Union

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policy
from taskboard.core.errors import Forbidden, NotFound
from taskboard.core.logs import get_logger
from taskboard.core.policy import CurrentUser, ProjectScope
from taskboard.models.base import utcnow
from taskboard.models.project import Project, ProjectMember
from taskboard.models.task import Task
from taskboard.schemas.common import parse
from taskboard.schemas.project import ProjectCreate, ProjectDetail, ProjectResponse, ProjectUpdate
from taskboard.schemas.task import TaskResponse
from taskboard.services.store import ensure_users_exist, store_guard

log = get_logger("projects")


def _members(user_ids: List[int]) -> List[ProjectMember]:
    return [ProjectMember(user_id=uid, position=i) for i, uid in enumerate(user_ids)]


class ProjectAccess:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch(self, project_id: int) -> Project:
        """Load a project by id without any access check."""
        query = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        async with store_guard(self.db, "fetch_project"):
            result = await self.db.execute(query)
            project = result.unique().scalar_one_or_none()
        if project is None:
            raise NotFound("project", project_id)
        return project

    async def list(self, user: CurrentUser) -> List[ProjectResponse]:
        query = select(Project)
        member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user.id)

        scope = policy.project_list_scope(user)
        if scope is ProjectScope.created_or_member:
            query = query.where(or_(Project.created_by_id == user.id, Project.id.in_(member_of)))
        elif scope is ProjectScope.member:
            query = query.where(Project.id.in_(member_of))

        query = query.order_by(Project.created_at.desc(), Project.id.desc())
        async with store_guard(self.db, "list_projects"):
            result = await self.db.execute(query)
            projects = result.unique().scalars().all()
        return [ProjectResponse.model_validate(p) for p in projects]

    async def get(self, user: CurrentUser, project_id: int) -> ProjectDetail:
        project = await self.fetch(project_id)
        if not policy.can_view_project(user, project):
            log.info("User %s denied view of project %s", user.id, project_id)
            raise Forbidden("view", "project", project_id)

        query = (
            select(Task)
            .where(Task.project_id == project.id)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        async with store_guard(self.db, "list_project_tasks"):
            result = await self.db.execute(query)
            tasks = result.unique().scalars().all()

        return ProjectDetail(
            project=ProjectResponse.model_validate(project),
            tasks=[TaskResponse.from_task(t) for t in tasks],
        )

    async def create(self, user: CurrentUser, payload: Union[ProjectCreate, Mapping[str, Any]]) -> ProjectResponse:
        if not policy.can_create_project(user):
            raise Forbidden("create", "project")

        data = parse(ProjectCreate, payload)
        await ensure_users_exist(self.db, data.team_members, "team_members")

        project = Project(
            name=data.name,
            description=data.description,
            created_by_id=user.id,
            members=_members(data.team_members),
        )
        async with store_guard(self.db, "create_project"):
            self.db.add(project)
            await self.db.commit()

        log.info("Project %s created by user %s", project.id, user.id)
        return await self._reload(project.id)

    async def update(self, user: CurrentUser, project_id: int,
                     payload: Union[ProjectUpdate, Mapping[str, Any]]) -> ProjectResponse:
        data = parse(ProjectUpdate, payload)
        project = await self.fetch(project_id)
        if not policy.can_manage_project(user, project):
            log.info("User %s denied update of project %s", user.id, project_id)
            raise Forbidden("update", "project", project_id)

        # All lookups run before the first attribute write
        if data.team_members is not None:
            await ensure_users_exist(self.db, data.team_members, "team_members")

        supplied = data.model_dump(exclude_unset=True)
        if data.name:
            project.name = data.name
        if "description" in supplied:
            project.description = data.description
        if data.team_members is not None:
            project.members = _members(data.team_members)
        project.updated_at = utcnow()

        async with store_guard(self.db, "update_project"):
            await self.db.commit()

        log.info("Project %s updated by user %s", project_id, user.id)
        return await self._reload(project_id)

    async def delete(self, user: CurrentUser, project_id: int) -> None:
        project = await self.fetch(project_id)
        if not policy.can_manage_project(user, project):
            log.info("User %s denied delete of project %s", user.id, project_id)
            raise Forbidden("delete", "project", project_id)

        # Tasks go first, in the same transaction as the project row
        async with store_guard(self.db, "delete_project"):
            result = await self.db.execute(delete(Task).where(Task.project_id == project_id))
            await self.db.delete(project)
            await self.db.commit()

        log.info("Project %s deleted by user %s with %s task(s)", project_id, user.id, result.rowcount)

    async def _reload(self, project_id: int) -> ProjectResponse:
        self.db.expire_all()
        return ProjectResponse.model_validate(await self.fetch(project_id))
