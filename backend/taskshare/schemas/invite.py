"""Invite Schemas."""

from pydantic import BaseModel, Field


class InviteCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=254)


class InviteResponse(BaseModel):
    name: str
    email: str
    status: str = "sent"


class InvitePreview(BaseModel):
    name: str
    email: str
