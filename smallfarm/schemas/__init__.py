from .models import (
    AssignedCrop,
    Crop,
    CropDetails,
    CustomCropCreate,
    FieldBed,
    FieldBedCreate,
    FieldBedCrop,
    FieldBedCropAssign,
    FieldBedCropDetail,
    FieldBedWithCrops,
    GenerateScheduleRequest,
    HealthResponse,
    NamedRef,
    ScheduleTask,
    ScheduleTaskDetail,
    ScheduleTaskPatch,
    ScheduleWeatherView,
    SessionUser,
    SuccessResponse,
    WeatherRecommendationResult,
    WeatherRecommendationUpdate,
    coerce_date,
)

__all__ = [
    "AssignedCrop",
    "Crop",
    "CropDetails",
    "CustomCropCreate",
    "FieldBed",
    "FieldBedCreate",
    "FieldBedCrop",
    "FieldBedCropAssign",
    "FieldBedCropDetail",
    "FieldBedWithCrops",
    "GenerateScheduleRequest",
    "HealthResponse",
    "NamedRef",
    "ScheduleTask",
    "ScheduleTaskDetail",
    "ScheduleTaskPatch",
    "ScheduleWeatherView",
    "SessionUser",
    "SuccessResponse",
    "WeatherRecommendationResult",
    "WeatherRecommendationUpdate",
    "coerce_date",
]
