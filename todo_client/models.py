from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    email: str
    name: str = ""


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str = ""
    completed: bool = False
    user_id: Optional[str] = Field(default=None, alias="userId")


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class AuthResponse(BaseModel):
    message: str = ""
    token: str
    user: User


class SessionStatus(str, Enum):
    UNRESOLVED = "unresolved"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    status: SessionStatus = SessionStatus.UNRESOLVED
    token: Optional[str] = None
    user: Optional[User] = None
