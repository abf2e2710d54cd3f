from typing import Optional

from fastapi import APIRouter, Depends, status

from taskboard.core.policy import CurrentUser
from taskboard.routers.deps import get_current_user, get_task_access
from taskboard.schemas.task import TaskCreate, TaskFilters, TaskStatus, TaskStatusUpdate, TaskUpdate
from taskboard.services.tasks import TaskAccess

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={404: {"description": "Not found"}},
)

@router.get("/")
async def get_tasks(
    project_id: Optional[int] = None,
    status: Optional[TaskStatus] = None,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    data = await tasks.list(current_user, TaskFilters(project_id=project_id, status=status))
    return {"success": True, "count": len(data), "data": data}

@router.get("/my-tasks")
async def get_my_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    data = await tasks.my_tasks(current_user)
    return {"success": True, "count": len(data), "data": data}

@router.get("/stats")
async def get_task_stats(
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.stats(current_user)}

@router.get("/{task_id}")
async def get_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.get(current_user, task_id)}

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.create(current_user, task_in)}

@router.put("/{task_id}")
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.update(current_user, task_id, task_in)}

@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: int,
    status_in: TaskStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    return {"success": True, "data": await tasks.update_status(current_user, task_id, status_in.status)}

@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskAccess = Depends(get_task_access),
):
    await tasks.delete(current_user, task_id)
    return {"success": True, "data": {"id": task_id}}
