"""Saved filter preset API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.filter_preset import (
    FilterPresetCreate,
    FilterPresetListResponse,
    FilterPresetRead,
    FilterPresetResponse,
    FilterPresetUpdate,
)
from tasklane.services import filter_preset_service
from tasklane.services.access import Identity

router = APIRouter()


@router.get("", response_model=FilterPresetListResponse)
def api_list_presets(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> FilterPresetListResponse:
    presets = filter_preset_service.list_presets(db, identity)
    return FilterPresetListResponse(
        presets=[FilterPresetRead.model_validate(p) for p in presets]
    )


@router.post("", response_model=FilterPresetResponse, status_code=status.HTTP_201_CREATED)
def api_create_preset(
    body: FilterPresetCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> FilterPresetResponse:
    preset = filter_preset_service.create_preset(db, identity, body)
    return FilterPresetResponse(preset=FilterPresetRead.model_validate(preset))


@router.patch("/{preset_id}", response_model=FilterPresetResponse)
def api_update_preset(
    preset_id: int,
    body: FilterPresetUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> FilterPresetResponse:
    preset = filter_preset_service.update_preset(db, identity, preset_id, body)
    return FilterPresetResponse(preset=FilterPresetRead.model_validate(preset))


@router.delete("/{preset_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_preset(
    preset_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> None:
    """Delete one of the caller's presets; other users' presets are not found."""
    filter_preset_service.delete_preset(db, identity, preset_id)
