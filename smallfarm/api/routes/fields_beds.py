from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ...application.services import field_bed_service
from ...domain.errors import NotFoundError
from ...infra.farm_store import FarmStore
from ...observability.logging_utils import log_failures
from ...schemas import (
    FieldBed,
    FieldBedCreate,
    FieldBedCrop,
    FieldBedCropAssign,
    FieldBedWithCrops,
    SessionUser,
    SuccessResponse,
)
from ..deps import get_store, require_session


router = APIRouter(prefix="/api/fields-beds", tags=["fields-beds"])


@router.get("", response_model=List[FieldBedWithCrops])
def list_field_beds(
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("field_beds_list"):
        return field_bed_service.list_field_beds(store, user)


@router.post("", response_model=FieldBed)
def create_field_bed(
    body: FieldBedCreate,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("field_bed_create", name=body.name, type=body.type):
        return field_bed_service.create_field_bed(store, user, body)


@router.post("/{field_bed_id}/crops", response_model=FieldBedCrop)
def assign_crop(
    field_bed_id: str,
    body: FieldBedCropAssign,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures(
        "crop_assign",
        expected=(NotFoundError,),
        field_bed_id=field_bed_id,
        crop_id=body.crop_id,
    ):
        return field_bed_service.assign_crop(store, user, field_bed_id, body)


@router.delete("/{field_bed_id}", response_model=SuccessResponse)
def delete_field_bed(
    field_bed_id: str,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("field_bed_delete", field_bed_id=field_bed_id):
        field_bed_service.delete_field_bed(store, user, field_bed_id)
    return SuccessResponse()
