from fastapi import APIRouter, Depends, status

from taskboard.core.policy import CurrentUser
from taskboard.routers.deps import get_current_user, get_project_access, get_task_access
from taskboard.schemas.project import ProjectCreate, ProjectUpdate
from taskboard.services.projects import ProjectAccess
from taskboard.services.tasks import TaskAccess

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    responses={404: {"description": "Not found"}},
)

@router.get("/")
async def get_projects(
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectAccess = Depends(get_project_access),
):
    data = await projects.list(current_user)
    return {"success": True, "count": len(data), "data": data}

@router.get("/{project_id}")
async def get_project(
    project_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectAccess = Depends(get_project_access),
):
    return {"success": True, "data": await projects.get(current_user, project_id)}

@router.get("/{project_id}/board")
async def get_project_board(
    project_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.board(current_user, project_id)}

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectAccess = Depends(get_project_access),
):
    return {"success": True, "data": await projects.create(current_user, project_in)}

@router.put("/{project_id}")
async def update_project(
    project_id: int,
    project_in: ProjectUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectAccess = Depends(get_project_access),
):
    return {"success": True, "data": await projects.update(current_user, project_id, project_in)}

@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectAccess = Depends(get_project_access),
):
    await projects.delete(current_user, project_id)
    return {"success": True, "data": {"id": project_id}}
