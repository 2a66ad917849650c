from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from ...domain.errors import NotFoundError
from ...infra.farm_store import FarmStore
from ...observability.logging_utils import log_event
from ...schemas import (
    FieldBed,
    FieldBedCreate,
    FieldBedCrop,
    FieldBedCropAssign,
    FieldBedWithCrops,
    SessionUser,
)
from .crop_service import is_crop_visible


def list_field_beds(store: FarmStore, user: SessionUser) -> List[FieldBedWithCrops]:
    field_beds = store.list_field_beds(user.user_id)
    log_event("field_beds_listed", count=len(field_beds))
    return field_beds


def create_field_bed(store: FarmStore, user: SessionUser, body: FieldBedCreate) -> FieldBed:
    field_bed = FieldBed(
        id=str(uuid.uuid4()),
        user_id=user.user_id,
        created_at=datetime.now(timezone.utc),
        **body.model_dump(),
    )
    store.insert_field_bed(field_bed)
    log_event(
        "field_bed_created",
        field_bed_id=field_bed.id,
        name=field_bed.name,
        type=field_bed.type,
        irrigation_type=field_bed.irrigation_type,
        soil_type=field_bed.soil_type,
    )
    return field_bed


def assign_crop(
    store: FarmStore, user: SessionUser, field_bed_id: str, body: FieldBedCropAssign
) -> FieldBedCrop:
    """Plant a crop in one of the caller's fields/beds."""
    field_bed = store.get_field_bed(field_bed_id)
    if field_bed is None or field_bed.user_id != user.user_id:
        raise NotFoundError("Field bed", field_bed_id)
    crop = store.get_crop(body.crop_id)
    if crop is None or not is_crop_visible(crop, user):
        raise NotFoundError("Crop", body.crop_id)
    assignment = FieldBedCrop(
        id=str(uuid.uuid4()),
        field_bed_id=field_bed_id,
        crop_id=crop.id,
        planting_date=body.planting_date,
        created_at=datetime.now(timezone.utc),
    )
    store.insert_field_bed_crop(assignment)
    log_event(
        "crop_assigned",
        field_bed_crop_id=assignment.id,
        field_bed_id=field_bed_id,
        crop_id=crop.id,
        planting_date=assignment.planting_date,
    )
    return assignment


def delete_field_bed(store: FarmStore, user: SessionUser, field_bed_id: str) -> None:
    store.delete_field_bed(field_bed_id, user.user_id)
    log_event("field_bed_deleted", field_bed_id=field_bed_id)
