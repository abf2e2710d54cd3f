from fastapi import APIRouter, Depends

from taskboard.core.policy import CurrentUser
from taskboard.routers.deps import get_current_user, get_user_directory
from taskboard.schemas.user import UserUpdate
from taskboard.services.users import UserDirectory

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)

@router.get("/")
async def get_users(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory),
):
    data = await users.list_users(current_user)
    return {"success": True, "count": len(data), "data": data}

@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory),
):
    return {"success": True, "data": await users.get_user(current_user, user_id)}

@router.put("/{user_id}")
async def update_user(
    user_id: int,
    user_in: UserUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory),
):
    return {"success": True, "data": await users.update_user(current_user, user_id, user_in)}

@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory),
):
    await users.delete_user(current_user, user_id)
    return {"success": True, "data": {"id": user_id}}
