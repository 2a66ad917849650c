from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from ...application.services import crop_service
from ...infra.farm_store import FarmStore
from ...observability.logging_utils import log_failures
from ...schemas import Crop, CustomCropCreate, SessionUser
from ..deps import get_crop_details_provider, get_store, optional_session, require_session


router = APIRouter(prefix="/api/crops", tags=["crops"])


@router.get("/public", response_model=List[Crop])
def list_public_crops(store: FarmStore = Depends(get_store)):
    with log_failures("public_crops_list"):
        return crop_service.list_public_crops(store)


@router.get("", response_model=List[Crop])
def list_crops(
    user: Optional[SessionUser] = Depends(optional_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("crops_list"):
        return crop_service.list_crops(store, user)


@router.post("/custom", response_model=Crop)
def create_custom_crop(
    body: CustomCropCreate,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
    details_provider=Depends(get_crop_details_provider),
):
    with log_failures("custom_crop_create", name=body.name, category=body.category):
        return crop_service.create_custom_crop(
            store, user, body, details_provider=details_provider
        )
