from __future__ import annotations

from .enums import (
    CropCategory,
    FieldBedType,
    IrrigationType,
    SoilType,
    TaskType,
    WeatherPriority,
)
from .errors import NotFoundError
from .schedule import (
    CARE_TASK_TEMPLATE,
    DEFAULT_DAYS_TO_MATURITY,
    PlannedTask,
    describe_task,
    harvest_date,
    plan_care_tasks,
    resolve_days_to_maturity,
)

__all__ = [
    "CARE_TASK_TEMPLATE",
    "CropCategory",
    "DEFAULT_DAYS_TO_MATURITY",
    "FieldBedType",
    "IrrigationType",
    "NotFoundError",
    "PlannedTask",
    "SoilType",
    "TaskType",
    "WeatherPriority",
    "describe_task",
    "harvest_date",
    "plan_care_tasks",
    "resolve_days_to_maturity",
]
