"""User directory: registration, login, token resolution and admin user management."""
from typing import Any, List, Mapping, Union

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policy
from taskboard.core.errors import AuthError, Forbidden, NotFound, ValidationError
from taskboard.core.logs import get_logger
from taskboard.core.policy import CurrentUser, Role
from taskboard.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from taskboard.models.project import Project, ProjectMember
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.schemas.common import parse
from taskboard.schemas.user import Token, UserLogin, UserProfile, UserRegister, UserUpdate
from taskboard.services.store import store_guard

log = get_logger("users")


def issue_token(user: User) -> Token:
    access_token = create_access_token(
        data={"sub": user.email, "user_id": user.id, "role": user.role}
    )
    return Token(access_token=access_token, user=UserProfile.model_validate(user))


class UserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _by_email(self, email: str):
        async with store_guard(self.db, "lookup_user"):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def fetch(self, user_id: int) -> User:
        async with store_guard(self.db, "fetch_user"):
            user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    async def register(self, payload: Union[UserRegister, Mapping[str, Any]]) -> Token:
        data = parse(UserRegister, payload)
        if await self._by_email(data.email):
            raise ValidationError.for_field("email", "already_registered")

        if data.role is Role.admin:
            # Only the very first account may claim admin for itself
            async with store_guard(self.db, "count_users"):
                existing = await self.db.scalar(select(func.count(User.id)))
            if existing:
                raise Forbidden("register", "admin")

        user = User(
            name=data.name,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            role=data.role.value,
        )
        async with store_guard(self.db, "register_user"):
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)

        log.info("Registered user %s with role %s", user.id, user.role)
        return issue_token(user)

    async def login(self, payload: Union[UserLogin, Mapping[str, Any]]) -> Token:
        data = parse(UserLogin, payload)
        user = await self._by_email(data.email)
        if not user or not verify_password(data.password, user.hashed_password):
            raise AuthError("invalid_credentials")
        return issue_token(user)

    async def resolve_user(self, token: str) -> CurrentUser:
        """Turn a bearer token into the acting user. The role is read from the store."""
        payload = decode_access_token(token)
        async with store_guard(self.db, "resolve_user"):
            user = await self.db.get(User, payload["user_id"])
        if user is None:
            raise AuthError("unknown_user")
        return CurrentUser(id=user.id, role=Role(user.role))

    async def profile(self, current: CurrentUser) -> UserProfile:
        return UserProfile.model_validate(await self.fetch(current.id))

    def _require_admin(self, current: CurrentUser, action: str, user_id=None):
        if not policy.can_manage_users(current):
            raise Forbidden(action, "user", user_id)

    async def list_users(self, current: CurrentUser) -> List[UserProfile]:
        self._require_admin(current, "list")
        async with store_guard(self.db, "list_users"):
            result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
            users = result.scalars().all()
        return [UserProfile.model_validate(u) for u in users]

    async def get_user(self, current: CurrentUser, user_id: int) -> UserProfile:
        self._require_admin(current, "view", user_id)
        return UserProfile.model_validate(await self.fetch(user_id))

    async def update_user(self, current: CurrentUser, user_id: int,
                          payload: Union[UserUpdate, Mapping[str, Any]]) -> UserProfile:
        self._require_admin(current, "update", user_id)
        data = parse(UserUpdate, payload)
        user = await self.fetch(user_id)

        if data.email and data.email != user.email:
            if await self._by_email(data.email):
                raise ValidationError.for_field("email", "already_registered")
            user.email = data.email
        if data.name:
            user.name = data.name
        if data.role:
            user.role = data.role.value

        async with store_guard(self.db, "update_user"):
            await self.db.commit()
            await self.db.refresh(user)
        log.info("User %s updated by admin %s", user_id, current.id)
        return UserProfile.model_validate(user)

    async def delete_user(self, current: CurrentUser, user_id: int) -> None:
        self._require_admin(current, "delete", user_id)
        if user_id == current.id:
            raise ValidationError.for_field("id", "cannot_delete_self")
        user = await self.fetch(user_id)

        async with store_guard(self.db, "delete_user"):
            owned_projects = await self.db.scalar(
                select(func.count(Project.id)).where(Project.created_by_id == user.id)
            )
            linked_tasks = await self.db.scalar(
                select(func.count(Task.id)).where(
                    or_(Task.assigned_to_id == user.id, Task.created_by_id == user.id)
                )
            )
        if owned_projects or linked_tasks:
            raise ValidationError.for_field(
                "id", "user_in_use", projects=owned_projects, tasks=linked_tasks
            )

        async with store_guard(self.db, "delete_user"):
            await self.db.execute(delete(ProjectMember).where(ProjectMember.user_id == user.id))
            await self.db.delete(user)
            await self.db.commit()
        self.db.expire_all()
        log.info("User %s deleted by admin %s", user_id, current.id)
