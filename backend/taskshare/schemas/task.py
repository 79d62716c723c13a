"""Task & Share Schemas — task CRUD bodies and the per-actor task view.

Invariants:
    - TaskUpdate requires at least one of title/completed
    - TaskResponse always carries the caller's role and capabilities, so clients
      never re-derive permissions
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=500)
    completed: bool | None = None

    @model_validator(mode="after")
    def require_some_field(self):
        if self.title is None and self.completed is None:
            raise ValueError("provide title and/or completed")
        return self


class ShareEntryResponse(BaseModel):
    identity: str
    role: str


class TaskResponse(BaseModel):
    id: UUID
    title: str
    completed: bool
    owner: str
    role: Literal["owner", "editor", "viewer"]
    capabilities: list[str]
    shares: list[ShareEntryResponse] | None = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]


class ShareCreate(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    role: str = Field(min_length=1, max_length=20)


class ShareUpdate(BaseModel):
    role: str = Field(min_length=1, max_length=20)
