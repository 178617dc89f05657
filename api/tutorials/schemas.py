"""
Tutorial API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TutorialCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    published: bool = False


class TutorialUpdate(BaseModel):
    # Omitted fields keep their stored value.
    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    published: bool | None = None


class TutorialResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    published: bool
