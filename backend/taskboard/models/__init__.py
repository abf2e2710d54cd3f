from taskboard.models.user import User
from taskboard.models.project import Project, ProjectMember
from taskboard.models.task import Task

__all__ = ["User", "Project", "ProjectMember", "Task"]
