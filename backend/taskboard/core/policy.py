"""Role model and per-operation access policies.

Every policy branches on each ``Role`` member explicitly and ends in
``_unhandled``, so a role added to the enum without a matching branch is
rejected rather than let through.
"""
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    admin = "admin"
    manager = "manager"
    member = "member"


@dataclass(frozen=True)
class CurrentUser:
    """The acting user, resolved from the access token before every operation."""
    id: int
    role: Role

    def __post_init__(self):
        object.__setattr__(self, "role", Role(self.role))


class ProjectScope(str, Enum):
    all = "all"
    created_or_member = "created_or_member"
    member = "member"


class TaskScope(str, Enum):
    all = "all"
    assigned = "assigned"


class TaskUpdateScope(str, Enum):
    full = "full"
    status_and_description = "status_and_description"
    none = "none"


def _unhandled(user: CurrentUser):
    raise ValueError(f"Unhandled role: {user.role!r}")


def project_list_scope(user: CurrentUser) -> ProjectScope:
    if user.role is Role.admin:
        return ProjectScope.all
    elif user.role is Role.manager:
        return ProjectScope.created_or_member
    elif user.role is Role.member:
        return ProjectScope.member
    return _unhandled(user)


def can_view_project(user: CurrentUser, project) -> bool:
    if user.role is Role.admin or user.role is Role.manager:
        return True
    elif user.role is Role.member:
        return user.id in project.team_member_ids
    return _unhandled(user)


def can_create_project(user: CurrentUser) -> bool:
    if user.role is Role.admin or user.role is Role.manager:
        return True
    elif user.role is Role.member:
        return False
    return _unhandled(user)


def can_manage_project(user: CurrentUser, project) -> bool:
    """Update, delete and task creation: admin, or the manager who created it."""
    if user.role is Role.admin:
        return True
    elif user.role is Role.manager:
        return project.created_by_id == user.id
    elif user.role is Role.member:
        return False
    return _unhandled(user)


def task_list_scope(user: CurrentUser) -> TaskScope:
    if user.role is Role.admin or user.role is Role.manager:
        return TaskScope.all
    elif user.role is Role.member:
        return TaskScope.assigned
    return _unhandled(user)


def can_view_task(user: CurrentUser, task) -> bool:
    if task_list_scope(user) is TaskScope.all:
        return True
    return task.assigned_to_id == user.id


def task_update_scope(user: CurrentUser, task) -> TaskUpdateScope:
    # Any manager gets full edit rights here, not only the project's creator.
    if user.role is Role.admin or user.role is Role.manager:
        return TaskUpdateScope.full
    elif user.role is Role.member:
        if task.assigned_to_id == user.id:
            return TaskUpdateScope.status_and_description
        return TaskUpdateScope.none
    return _unhandled(user)


def can_delete_task(user: CurrentUser) -> bool:
    if user.role is Role.admin or user.role is Role.manager:
        return True
    elif user.role is Role.member:
        return False
    return _unhandled(user)


def can_manage_users(user: CurrentUser) -> bool:
    if user.role is Role.admin:
        return True
    elif user.role is Role.manager or user.role is Role.member:
        return False
    return _unhandled(user)


def can_create_tasks(user: CurrentUser) -> bool:
    """Role gate ahead of the per-project creator check."""
    return can_create_project(user)
