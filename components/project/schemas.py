"""Pydantic schemas for project data validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    """Schema for project creation."""
    name: str = Field(..., min_length=1, max_length=200)
    owner_id: int


class Project(ProjectCreate):
    """Schema for project response."""
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
