"""Saved filter preset schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterPresetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    filters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class FilterPresetUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = Field(None, min_length=1, max_length=100)
    filters: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class FilterPresetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    filters: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class FilterPresetResponse(BaseModel):
    preset: FilterPresetRead


class FilterPresetListResponse(BaseModel):
    presets: list[FilterPresetRead]
