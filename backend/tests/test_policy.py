"""Unit tests for the role policies."""
from types import SimpleNamespace

import pytest

from taskboard.core import policy
from taskboard.core.policy import CurrentUser, ProjectScope, Role, TaskScope, TaskUpdateScope

ADMIN = CurrentUser(id=1, role=Role.admin)
MANAGER = CurrentUser(id=2, role=Role.manager)
MEMBER = CurrentUser(id=3, role=Role.member)


def project(created_by_id=2, members=()):
    return SimpleNamespace(created_by_id=created_by_id, team_member_ids=list(members))


def task(assigned_to_id=3):
    return SimpleNamespace(assigned_to_id=assigned_to_id)


class TestRole:
    def test_role_coerced_from_string(self):
        assert CurrentUser(id=9, role="manager").role is Role.manager

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            CurrentUser(id=9, role="owner")


class TestProjectPolicies:
    def test_list_scope_by_role(self):
        assert policy.project_list_scope(ADMIN) is ProjectScope.all
        assert policy.project_list_scope(MANAGER) is ProjectScope.created_or_member
        assert policy.project_list_scope(MEMBER) is ProjectScope.member

    def test_member_views_only_projects_they_belong_to(self):
        assert policy.can_view_project(MEMBER, project(members=[3]))
        assert not policy.can_view_project(MEMBER, project(members=[4]))

    def test_elevated_roles_view_regardless_of_membership(self):
        assert policy.can_view_project(ADMIN, project(created_by_id=8))
        assert policy.can_view_project(MANAGER, project(created_by_id=8))

    def test_manage_requires_admin_or_creator(self):
        assert policy.can_manage_project(ADMIN, project(created_by_id=8))
        assert policy.can_manage_project(MANAGER, project(created_by_id=2))
        assert not policy.can_manage_project(MANAGER, project(created_by_id=8))

    def test_member_never_manages_even_as_creator(self):
        assert not policy.can_manage_project(MEMBER, project(created_by_id=3))

    def test_create(self):
        assert policy.can_create_project(ADMIN)
        assert policy.can_create_project(MANAGER)
        assert not policy.can_create_project(MEMBER)


class TestTaskPolicies:
    def test_list_scope(self):
        assert policy.task_list_scope(ADMIN) is TaskScope.all
        assert policy.task_list_scope(MANAGER) is TaskScope.all
        assert policy.task_list_scope(MEMBER) is TaskScope.assigned

    def test_view(self):
        assert policy.can_view_task(MEMBER, task(assigned_to_id=3))
        assert not policy.can_view_task(MEMBER, task(assigned_to_id=4))
        assert policy.can_view_task(MANAGER, task(assigned_to_id=4))

    def test_update_scope(self):
        assert policy.task_update_scope(ADMIN, task(4)) is TaskUpdateScope.full
        assert policy.task_update_scope(MANAGER, task(4)) is TaskUpdateScope.full
        assert policy.task_update_scope(MEMBER, task(3)) is TaskUpdateScope.status_and_description
        assert policy.task_update_scope(MEMBER, task(4)) is TaskUpdateScope.none

    def test_delete_ignores_assignment(self):
        assert policy.can_delete_task(ADMIN)
        assert policy.can_delete_task(MANAGER)
        assert not policy.can_delete_task(MEMBER)

    def test_only_admin_manages_users(self):
        assert policy.can_manage_users(ADMIN)
        assert not policy.can_manage_users(MANAGER)
        assert not policy.can_manage_users(MEMBER)
