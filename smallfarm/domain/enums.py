from enum import Enum


class TaskType(str, Enum):
    WATER = "water"
    FERTILIZE = "fertilize"
    WEED = "weed"
    PEST_CONTROL = "pest_control"
    HARVEST = "harvest"


class CropCategory(str, Enum):
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    HERBS = "herbs"
    FLOWERS = "flowers"


class FieldBedType(str, Enum):
    FIELD = "field"
    BED = "bed"


class IrrigationType(str, Enum):
    DRIP = "drip"
    SPRINKLER = "sprinkler"
    FLOOD = "flood"
    MANUAL = "manual"
    NONE = "none"


class SoilType(str, Enum):
    CLAY = "clay"
    SANDY = "sandy"
    LOAM = "loam"
    SILT = "silt"
    PEAT = "peat"
    CHALK = "chalk"


class WeatherPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
