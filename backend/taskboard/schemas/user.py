from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime

from taskboard.core.policy import Role

class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = Role.member

    class Config:
        str_strip_whitespace = True

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None

    class Config:
        str_strip_whitespace = True

class UserProfile(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserProfile
