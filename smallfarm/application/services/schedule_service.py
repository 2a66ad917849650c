"""Care schedule generation and task bookkeeping for crop assignments."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from ...domain.errors import NotFoundError
from ...domain.schedule import describe_task, plan_care_tasks
from ...infra.farm_store import FarmStore
from ...observability.logging_utils import log_event, log_warning
from ...schemas import (
    NamedRef,
    ScheduleTask,
    ScheduleTaskDetail,
    ScheduleTaskPatch,
    ScheduleWeatherView,
    SessionUser,
    WeatherRecommendationResult,
    WeatherRecommendationUpdate,
)


def list_schedule(store: FarmStore, user: SessionUser) -> List[ScheduleTaskDetail]:
    tasks = store.list_schedule_tasks(user.user_id)
    log_event("schedules_listed", count=len(tasks))
    return tasks


def list_schedule_with_weather(
    store: FarmStore, user: SessionUser
) -> List[ScheduleWeatherView]:
    views = []
    for task in store.list_schedule_tasks(user.user_id):
        assignment = task.field_bed_crop
        views.append(
            ScheduleWeatherView(
                id=task.id,
                field_bed=NamedRef(id=assignment.field_bed.id, name=assignment.field_bed.name),
                crop=NamedRef(id=assignment.crop.id, name=assignment.crop.name),
                task_type=task.task_type,
                task_description=describe_task(task.task_type, assignment.crop.name),
                due_date=task.due_date,
                completed=task.completed,
                weather_recommendation=task.weather_recommendation,
                weather_priority=task.weather_priority,
                notes=task.notes,
            )
        )
    log_event("schedules_with_weather_listed", count=len(views))
    return views


def generate_schedule(
    store: FarmStore,
    user: SessionUser,
    field_bed_crop_id: str,
    *,
    replace_existing: bool = True,
) -> List[ScheduleTask]:
    """
    Derive and persist the care tasks for one crop assignment.

    Raises:
        NotFoundError: the assignment does not exist or its field/bed belongs
            to another user. Nothing is written in that case.
    """
    log_event("schedule_generate_started", field_bed_crop_id=field_bed_crop_id)
    assignment = store.get_field_bed_crop(field_bed_crop_id)
    if assignment is None or assignment.field_bed.user_id != user.user_id:
        log_warning("schedule_generate_not_found", field_bed_crop_id=field_bed_crop_id)
        raise NotFoundError("Field bed crop", field_bed_crop_id)

    created_at = datetime.now(timezone.utc)
    tasks = [
        ScheduleTask(
            id=str(uuid.uuid4()),
            user_id=user.user_id,
            field_bed_crop_id=field_bed_crop_id,
            task_type=planned.task_type,
            due_date=planned.due_date,
            notes=planned.note,
            created_at=created_at,
        )
        for planned in plan_care_tasks(
            assignment.planting_date, assignment.crop.days_to_maturity
        )
    ]
    saved = store.save_schedule_batch(
        user.user_id,
        field_bed_crop_id,
        tasks,
        replace_existing=replace_existing,
    )
    log_event(
        "schedule_generated",
        field_bed_crop_id=field_bed_crop_id,
        task_count=len(saved),
        replaced=replace_existing,
    )
    return saved


def update_schedule_task(
    store: FarmStore, user: SessionUser, task_id: str, patch: ScheduleTaskPatch
) -> ScheduleTask:
    changes = patch.changes()
    log_event("schedule_update_started", schedule_id=task_id, fields=sorted(changes))
    task = store.update_schedule_task(task_id, user.user_id, changes)
    if task is None:
        raise NotFoundError("Schedule", task_id)
    log_event("schedule_updated", schedule_id=task_id, completed=task.completed)
    return task


def delete_schedule_task(store: FarmStore, user: SessionUser, task_id: str) -> None:
    store.delete_schedule_task(task_id, user.user_id)
    log_event("schedule_deleted", schedule_id=task_id)


def set_weather_recommendation(
    store: FarmStore,
    user: SessionUser,
    task_id: str,
    body: WeatherRecommendationUpdate,
) -> WeatherRecommendationResult:
    task = store.update_schedule_task(
        task_id,
        user.user_id,
        {
            "weather_recommendation": body.weather_recommendation,
            "weather_priority": body.weather_priority,
        },
    )
    if task is None:
        log_warning("schedule_weather_not_found", schedule_id=task_id)
        raise NotFoundError("Schedule", task_id)
    log_event(
        "schedule_weather_updated",
        schedule_id=task_id,
        priority=task.weather_priority,
    )
    return WeatherRecommendationResult(
        id=task.id,
        weather_recommendation=task.weather_recommendation,
        weather_priority=task.weather_priority,
    )
