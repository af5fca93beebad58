"""Saved task-list filter presets, private to the user who saved them."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tasklane.models.filter_preset import FilterPreset
from tasklane.schemas.filter_preset import FilterPresetCreate, FilterPresetUpdate
from tasklane.services.access import Identity
from tasklane.services.errors import NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)


def list_presets(db: Session, identity: Identity) -> list[FilterPreset]:
    return (
        db.query(FilterPreset)
        .filter(FilterPreset.user_id == identity.user_id)
        .order_by(FilterPreset.created_at.desc(), FilterPreset.id.desc())
        .all()
    )


def _get_own_preset(db: Session, identity: Identity, preset_id: int) -> FilterPreset:
    preset = db.get(FilterPreset, preset_id)
    if preset is None or preset.user_id != identity.user_id:
        raise NotFoundError("Preset not found")
    return preset


def create_preset(db: Session, identity: Identity, data: FilterPresetCreate) -> FilterPreset:
    preset = FilterPreset(user_id=identity.user_id, name=data.name, filters=data.filters)
    db.add(preset)
    db.commit()
    db.refresh(preset)
    logger.info("filter_preset_created: preset_id=%s user_id=%s", preset.id, identity.user_id)
    return preset


def update_preset(
    db: Session, identity: Identity, preset_id: int, data: FilterPresetUpdate
) -> FilterPreset:
    preset = _get_own_preset(db, identity, preset_id)
    fields = data.model_fields_set
    if "name" in fields:
        if data.name is None:
            raise ValidationFailedError("name cannot be null")
        preset.name = data.name
    if "filters" in fields:
        if data.filters is None:
            raise ValidationFailedError("filters cannot be null")
        preset.filters = data.filters
    db.commit()
    db.refresh(preset)
    logger.info("filter_preset_updated: preset_id=%s fields=%s", preset.id, ",".join(sorted(fields)))
    return preset


def delete_preset(db: Session, identity: Identity, preset_id: int) -> None:
    preset = _get_own_preset(db, identity, preset_id)
    db.delete(preset)
    db.commit()
    logger.info("filter_preset_deleted: preset_id=%s user_id=%s", preset_id, identity.user_id)
