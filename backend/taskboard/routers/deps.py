from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.policy import CurrentUser
from taskboard.services.projects import ProjectAccess
from taskboard.services.tasks import TaskAccess
from taskboard.services.users import UserDirectory

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_project_access(db: AsyncSession = Depends(get_db)) -> ProjectAccess:
    return ProjectAccess(db)


def get_task_access(projects: ProjectAccess = Depends(get_project_access)) -> TaskAccess:
    return TaskAccess(projects.db, projects)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    users: UserDirectory = Depends(get_user_directory),
) -> CurrentUser:
    return await users.resolve_user(token)
