from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum

def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive values are taken as UTC; SQLite stores no offset
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in-progress"
    done = "done"

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = TaskStatus.todo
    project_id: int
    assigned_to: int
    priority: Optional[TaskPriority] = TaskPriority.medium
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalise_due_date(cls, v):
        return _to_utc(v)

    class Config:
        str_strip_whitespace = True

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = None
    assigned_to: Optional[int] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    @field_validator('due_date')
    @classmethod
    def normalise_due_date(cls, v):
        return _to_utc(v)

    class Config:
        str_strip_whitespace = True

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskFilters(BaseModel):
    project_id: Optional[int] = None
    status: Optional[TaskStatus] = None

class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    project_id: int
    assigned_to: int
    created_by: int
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]

    # Related data
    project_name: Optional[str] = None
    assignee_name: Optional[str] = None
    assignee_email: Optional[str] = None
    creator_name: Optional[str] = None

    @classmethod
    def from_task(cls, task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            project_id=task.project_id,
            assigned_to=task.assigned_to_id,
            created_by=task.created_by_id,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
            project_name=task.project.name if task.project else None,
            assignee_name=task.assigned_to.name if task.assigned_to else None,
            assignee_email=task.assigned_to.email if task.assigned_to else None,
            creator_name=task.created_by.name if task.created_by else None,
        )

class KanbanBoard(BaseModel):
    project_id: int
    columns: Dict[TaskStatus, List[TaskResponse]]

class TaskStats(BaseModel):
    total_tasks: int
    todo_tasks: int
    in_progress_tasks: int
    done_tasks: int
    overdue_tasks: int
