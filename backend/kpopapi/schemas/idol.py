"""Pydantic schemas for idols."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class IdolBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    group_name: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)


class IdolCreate(IdolBase):
    """Schema for creating an idol."""


class IdolUpdate(IdolBase):
    """Schema for replacing an idol's fields (PUT)."""


class IdolResponse(IdolBase):
    """Schema for idol response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str
    version: int


class DeletedResponse(BaseModel):
    status: str = "deleted"
