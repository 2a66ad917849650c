"""Planting-to-harvest care schedule derivation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple

from .enums import TaskType


DEFAULT_DAYS_TO_MATURITY = 70

# (task type, days after planting, note); harvest is appended from the crop's maturity
CARE_TASK_TEMPLATE: Tuple[Tuple[TaskType, int, str], ...] = (
    (TaskType.WATER, 3, "Initial watering"),
    (TaskType.FERTILIZE, 14, "First fertilizer application"),
    (TaskType.WEED, 21, "Weeding and thinning"),
    (TaskType.FERTILIZE, 35, "Second fertilizer application"),
    (TaskType.PEST_CONTROL, 42, "Pest inspection and control if needed"),
    (TaskType.WATER, 50, "Regular watering as needed"),
)
HARVEST_NOTE = "Harvest"


@dataclass(frozen=True)
class PlannedTask:
    task_type: TaskType
    due_date: date
    note: str
    days_after_planting: int


def resolve_days_to_maturity(days_to_maturity: Optional[int]) -> int:
    if not days_to_maturity:
        return DEFAULT_DAYS_TO_MATURITY
    return int(days_to_maturity)


def harvest_date(planting_date: date, days_to_maturity: Optional[int]) -> date:
    return planting_date + timedelta(days=resolve_days_to_maturity(days_to_maturity))


def plan_care_tasks(
    planting_date: date, days_to_maturity: Optional[int] = None
) -> List[PlannedTask]:
    """
    Build the fixed care sequence for a planting.

    The order follows the template with harvest last, even when a short
    maturity puts the harvest before some of the earlier care tasks.
    """
    maturity = resolve_days_to_maturity(days_to_maturity)
    plan = [
        PlannedTask(
            task_type=task_type,
            due_date=planting_date + timedelta(days=offset),
            note=note,
            days_after_planting=offset,
        )
        for task_type, offset, note in CARE_TASK_TEMPLATE
    ]
    plan.append(
        PlannedTask(
            task_type=TaskType.HARVEST,
            due_date=planting_date + timedelta(days=maturity),
            note=HARVEST_NOTE,
            days_after_planting=maturity,
        )
    )
    return plan


def describe_task(task_type: TaskType, crop_name: str) -> str:
    """Human label such as ``Pest control Tomato``."""
    label = TaskType(task_type).value.replace("_", " ")
    return f"{label[:1].upper()}{label[1:]} {crop_name}"
