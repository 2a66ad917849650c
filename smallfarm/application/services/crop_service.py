from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ...domain.crop_catalog import system_crop_rows
from ...domain.enums import CropCategory
from ...infra.config import AppConfig
from ...infra.farm_store import FarmStore
from ...infra.llm_extract import llm_structured_extract
from ...observability.logging_utils import log_error, log_event
from ...prompts.crop_details import CROP_DETAILS_SYSTEM_PROMPT, build_crop_details_prompt
from ...schemas import Crop, CropDetails, CustomCropCreate, SessionUser


CropDetailsProvider = Callable[[str, CropCategory], CropDetails]


def generate_crop_details(
    name: str, category: CropCategory, *, cfg: Optional[AppConfig] = None
) -> CropDetails:
    payload = llm_structured_extract(
        build_crop_details_prompt(name, CropCategory(category).value),
        schema=CropDetails,
        system_prompt=CROP_DETAILS_SYSTEM_PROMPT,
        cfg=cfg,
    )
    return CropDetails.model_validate(payload)


def seed_system_crops(store: FarmStore) -> int:
    """Insert catalogue crops missing from the store; failures are logged, not raised."""
    log_event("crop_seed_started")
    seeded = 0
    try:
        for row in system_crop_rows():
            if store.has_system_crop(str(row["name"])):
                continue
            store.insert_crop(
                Crop(
                    id=str(uuid.uuid4()),
                    is_custom=False,
                    user_id=None,
                    created_at=datetime.now(timezone.utc),
                    **row,
                )
            )
            seeded += 1
    except Exception as exc:
        log_error("crop_seed_failed", exc, seeded=seeded)
        return seeded
    log_event("crop_seed_completed", seeded=seeded)
    return seeded


def list_public_crops(store: FarmStore) -> List[Crop]:
    crops = store.list_system_crops()
    log_event("public_crops_listed", count=len(crops))
    return crops


def list_crops(store: FarmStore, user: Optional[SessionUser]) -> List[Crop]:
    crops = store.list_system_crops()
    custom: List[Crop] = []
    if user is not None:
        custom = store.list_custom_crops(user.user_id)
    log_event("crops_listed", total=len(crops) + len(custom), custom=len(custom))
    return crops + custom


def create_custom_crop(
    store: FarmStore,
    user: SessionUser,
    body: CustomCropCreate,
    *,
    details_provider: Optional[CropDetailsProvider] = None,
) -> Crop:
    log_event("custom_crop_create_started", name=body.name, category=body.category)
    provider = details_provider or generate_crop_details
    details = provider(body.name, body.category)
    crop = Crop(
        id=str(uuid.uuid4()),
        name=body.name,
        category=body.category,
        is_custom=True,
        user_id=user.user_id,
        created_at=datetime.now(timezone.utc),
        **details.model_dump(),
    )
    store.insert_crop(crop)
    log_event(
        "custom_crop_created",
        crop_id=crop.id,
        name=crop.name,
        days_to_maturity=crop.days_to_maturity,
    )
    return crop


def is_crop_visible(crop: Crop, user: SessionUser) -> bool:
    return not crop.is_custom or crop.user_id == user.user_id
