from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..domain.enums import (
    CropCategory,
    FieldBedType,
    IrrigationType,
    SoilType,
    TaskType,
    WeatherPriority,
)
from ..domain.normalizers import EnumNormalizer


def coerce_date(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` as well as full ISO timestamps and keep the date part."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10 and text[10] in ("T", " "):
            return text[:10]
        return text
    return value


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NamedRef(WireModel):
    id: str
    name: str


class SuccessResponse(WireModel):
    success: bool = True


class SessionUser(WireModel):
    """Identity returned by the session verifier for a valid bearer token."""

    user_id: str
    email: Optional[str] = None


# ==================== crops ====================


class CropDetails(WireModel):
    """Agronomic attributes of a crop; also the structured-output schema for the LLM."""

    row_spacing: Optional[str] = Field(
        default=None, description="Row spacing range in inches, e.g. 24-36."
    )
    plant_spacing: Optional[str] = Field(
        default=None, description="In-row plant spacing range in inches."
    )
    soil_ph: Optional[str] = Field(default=None, description="Soil pH range, e.g. 6.0-6.8.")
    days_to_maturity: Optional[int] = Field(
        default=None, ge=1, le=1000, description="Days from planting to harvest."
    )
    planting_depth: Optional[str] = Field(default=None, description="Depth in inches.")
    sun_requirement: Optional[str] = None
    water_requirement: Optional[str] = None
    common_pests: Optional[str] = None
    common_diseases: Optional[str] = None
    fertilizer_schedule: Optional[str] = None
    harvest_tips: Optional[str] = None


class Crop(CropDetails):
    id: str
    name: str
    category: CropCategory
    is_custom: bool = False
    user_id: Optional[str] = None
    created_at: datetime


class CustomCropCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: CropCategory

    @field_validator("name", mode="after")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _norm_category(cls, v):
        return EnumNormalizer.normalize(CropCategory, v)


# ==================== fields & beds ====================


class FieldBed(WireModel):
    id: str
    user_id: str
    name: str
    type: FieldBedType
    square_footage: Optional[float] = None
    acreage: Optional[float] = None
    irrigation_type: Optional[IrrigationType] = None
    soil_type: Optional[SoilType] = None
    created_at: datetime


class FieldBedCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: FieldBedType
    square_footage: Optional[float] = Field(default=None, ge=0)
    acreage: Optional[float] = Field(default=None, ge=0)
    irrigation_type: Optional[IrrigationType] = None
    soil_type: Optional[SoilType] = None

    @field_validator("square_footage", "acreage", mode="before")
    @classmethod
    def _blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("irrigation_type", mode="before")
    @classmethod
    def _norm_irrigation(cls, v):
        return EnumNormalizer.normalize(IrrigationType, v)

    @field_validator("soil_type", mode="before")
    @classmethod
    def _norm_soil(cls, v):
        return EnumNormalizer.normalize(SoilType, v)


class FieldBedCrop(WireModel):
    """A crop planted in a field/bed on a given date."""

    id: str
    field_bed_id: str
    crop_id: str
    planting_date: date
    created_at: datetime


class FieldBedCropAssign(WireModel):
    crop_id: str = Field(..., min_length=1)
    planting_date: date

    @field_validator("planting_date", mode="before")
    @classmethod
    def _norm_planting_date(cls, v):
        return coerce_date(v)


class AssignedCrop(FieldBedCrop):
    crop: Crop


class FieldBedWithCrops(FieldBed):
    crops: List[AssignedCrop] = Field(default_factory=list)


class FieldBedCropDetail(FieldBedCrop):
    crop: Crop
    field_bed: FieldBed


# ==================== schedules ====================


class ScheduleTask(WireModel):
    id: str
    user_id: str
    field_bed_crop_id: str
    task_type: TaskType
    due_date: date
    completed: bool = False
    completed_date: Optional[date] = None
    notes: Optional[str] = None
    weather_recommendation: Optional[str] = None
    weather_priority: Optional[WeatherPriority] = None
    created_at: datetime


class ScheduleTaskDetail(ScheduleTask):
    field_bed_crop: FieldBedCropDetail


class GenerateScheduleRequest(WireModel):
    field_bed_crop_id: str = Field(..., min_length=1)


class ScheduleTaskPatch(WireModel):
    """Partial update of a schedule task; only fields present in the payload apply."""

    completed: Optional[bool] = None
    completed_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("completed_date", mode="before")
    @classmethod
    def _norm_completed_date(cls, v):
        return coerce_date(v)

    def changes(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude_unset=True)
        if payload.get("completed") is None:
            payload.pop("completed", None)
        return payload


class WeatherRecommendationUpdate(WireModel):
    weather_recommendation: str = Field(..., min_length=1)
    weather_priority: WeatherPriority


class WeatherRecommendationResult(WireModel):
    id: str
    weather_recommendation: Optional[str] = None
    weather_priority: Optional[WeatherPriority] = None


class ScheduleWeatherView(WireModel):
    """Flattened schedule row for weather-aware task lists."""

    id: str
    field_bed: NamedRef
    crop: NamedRef
    task_type: TaskType
    task_description: str
    due_date: date
    completed: bool
    weather_recommendation: Optional[str] = None
    weather_priority: Optional[WeatherPriority] = None
    notes: Optional[str] = None


class HealthResponse(WireModel):
    status: str
    store: str
