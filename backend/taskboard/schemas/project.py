from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from taskboard.schemas.common import UserSummary
from taskboard.schemas.task import TaskResponse

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    team_members: Optional[List[int]] = Field(default_factory=list)

    @field_validator('team_members')
    @classmethod
    def dedupe_members(cls, v):
        # first occurrence wins, order kept for display
        return list(dict.fromkeys(v or []))

    class Config:
        str_strip_whitespace = True

class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    team_members: Optional[List[int]] = None

    @field_validator('team_members')
    @classmethod
    def dedupe_members(cls, v):
        return v if v is None else list(dict.fromkeys(v))

    class Config:
        str_strip_whitespace = True

class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    created_by: UserSummary
    team_members: List[UserSummary]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True

class ProjectDetail(BaseModel):
    project: ProjectResponse
    tasks: List[TaskResponse]
