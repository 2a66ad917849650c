from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ...application.services import schedule_service
from ...domain.errors import NotFoundError
from ...infra.config import AppConfig
from ...infra.farm_store import FarmStore
from ...observability.logging_utils import log_failures
from ...schemas import (
    GenerateScheduleRequest,
    ScheduleTask,
    ScheduleTaskDetail,
    ScheduleTaskPatch,
    ScheduleWeatherView,
    SessionUser,
    SuccessResponse,
    WeatherRecommendationResult,
    WeatherRecommendationUpdate,
)
from ..deps import get_settings, get_store, require_session


router = APIRouter(prefix="/api/schedules", tags=["schedules"])


@router.get("", response_model=List[ScheduleTaskDetail])
def list_schedules(
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("schedules_list"):
        return schedule_service.list_schedule(store, user)


@router.get("/with-weather", response_model=List[ScheduleWeatherView])
def list_schedules_with_weather(
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("schedules_with_weather_list"):
        return schedule_service.list_schedule_with_weather(store, user)


@router.post("/generate", response_model=List[ScheduleTask])
def generate_schedule(
    body: GenerateScheduleRequest,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
    settings: AppConfig = Depends(get_settings),
):
    with log_failures(
        "schedule_generate",
        expected=(NotFoundError,),
        field_bed_crop_id=body.field_bed_crop_id,
    ):
        return schedule_service.generate_schedule(
            store,
            user,
            body.field_bed_crop_id,
            replace_existing=settings.schedule_regenerate_mode == "replace",
        )


@router.patch("/{schedule_id}", response_model=ScheduleTask)
def update_schedule(
    schedule_id: str,
    patch: ScheduleTaskPatch,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("schedule_update", expected=(NotFoundError,), schedule_id=schedule_id):
        return schedule_service.update_schedule_task(store, user, schedule_id, patch)


@router.patch("/{schedule_id}/weather", response_model=WeatherRecommendationResult)
def update_schedule_weather(
    schedule_id: str,
    body: WeatherRecommendationUpdate,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures(
        "schedule_weather_update", expected=(NotFoundError,), schedule_id=schedule_id
    ):
        return schedule_service.set_weather_recommendation(store, user, schedule_id, body)


@router.delete("/{schedule_id}", response_model=SuccessResponse)
def delete_schedule(
    schedule_id: str,
    user: SessionUser = Depends(require_session),
    store: FarmStore = Depends(get_store),
):
    with log_failures("schedule_delete", schedule_id=schedule_id):
        schedule_service.delete_schedule_task(store, user, schedule_id)
    return SuccessResponse()
