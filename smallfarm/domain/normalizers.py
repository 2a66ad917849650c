import re
from enum import Enum
from typing import Any, Type

from .enums import CropCategory, IrrigationType, SoilType


class EnumNormalizer:
    # one table per enum: alias -> canonical value
    ALIASES: dict[Type[Enum], dict[str, str]] = {
        CropCategory: {
            "vegetable": "vegetables",
            "vegetables": "vegetables",
            "fruit": "fruits",
            "fruits": "fruits",
            "herb": "herbs",
            "herbs": "herbs",
            "flower": "flowers",
            "flowers": "flowers",
        },
        IrrigationType: {
            "drip": "drip",
            "drip irrigation": "drip",
            "sprinkler": "sprinkler",
            "sprinklers": "sprinkler",
            "flood": "flood",
            "manual": "manual",
            "hand": "manual",
            "none": "none",
        },
        SoilType: {
            "sand": "sandy",
            "sandy": "sandy",
        },
    }

    @staticmethod
    def _canon_key(x: Any) -> str:
        # trim, lowercase, collapse runs of whitespace
        s = str(x).strip().lower()
        s = re.sub(r"\s+", " ", s)
        return s

    @classmethod
    def normalize(cls, enum_cls: Type[Enum], value: Any) -> Any:
        if value is None:
            return value

        if isinstance(value, enum_cls):
            return value.value

        key = cls._canon_key(value)
        aliases = cls.ALIASES.get(enum_cls, {})
        if key in aliases:
            return aliases[key]
        if key in {member.value for member in enum_cls}:
            return key
        return value  # unknown values go through unchanged so pydantic rejects them
