from fastapi import APIRouter, Depends, status

from taskboard.core.policy import CurrentUser
from taskboard.routers.deps import get_current_user, get_user_directory
from taskboard.schemas.user import UserLogin, UserRegister
from taskboard.services.users import UserDirectory

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user_in: UserRegister, users: UserDirectory = Depends(get_user_directory)):
    return {"success": True, "data": await users.register(user_in)}

@router.post("/login")
async def login(credentials: UserLogin, users: UserDirectory = Depends(get_user_directory)):
    return {"success": True, "data": await users.login(credentials)}

@router.get("/me")
async def get_current_user_info(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserDirectory = Depends(get_user_directory),
):
    """Get current user profile information"""
    return {"success": True, "data": await users.profile(current_user)}
