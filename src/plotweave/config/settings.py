"""Configuration settings for Plotweave."""

import math
import types
from collections.abc import Hashable
from enum import Enum
from pathlib import Path
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo


def _unwrap_optional(annotation: Any) -> Any:
    """Return the single non-None member of an ``X | None`` annotation."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _numeric_bounds(field: FieldInfo) -> tuple[float | None, float | None]:
    low = high = None
    for item in field.metadata:
        if getattr(item, "ge", None) is not None:
            low = item.ge
        if getattr(item, "le", None) is not None:
            high = item.le
    return low, high


class ClampedModel(BaseModel):
    """Base model for creative parameters.

    Parameters are never rejected for being out of range. Before validation
    every numeric value is coerced and clamped to the field's ``ge``/``le``
    bounds, non-finite or unparsable numbers fall back to the default, and an
    unknown enum value falls back to the default as well. Booleans accept
    ``true``/``false``/``0``/``1`` and friends; anything else, like a stray
    ``None`` on a required field, means the default. List fields keep only
    the elements that can be used. Unknown keys are ignored. Keys are accepted in camelCase (``stepLen``) or snake_case
    (``step_len``).
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _clamp_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        for name, field in cls.model_fields.items():
            for key in {name, field.alias or name}:
                if key not in values:
                    continue
                fixed = cls._fix_value(field, values[key])
                if fixed is _DROP:
                    del values[key]
                else:
                    values[key] = fixed
        return values

    @staticmethod
    def _fix_value(field: FieldInfo, value: Any) -> Any:
        annotation = _unwrap_optional(field.annotation)
        if value is None:
            return value if annotation is not field.annotation else _DROP
        if get_origin(annotation) is list:
            return _fix_list(get_args(annotation)[0], value)
        if isinstance(annotation, type) and issubclass(annotation, Enum):
            return _fix_enum(annotation, value)
        if annotation is bool:
            return _fix_bool(value)
        if annotation is str:
            return value if isinstance(value, str) else _DROP
        if annotation in (int, float):
            return _fix_number(value, annotation, *_numeric_bounds(field))
        return value


_DROP = object()

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def _fix_enum(enum_type: type[Enum], value: Any) -> Any:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, Hashable):
        return _DROP
    valid = {member.value for member in enum_type}
    return value if value in valid else _DROP


def _fix_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return _DROP


def _fix_number(value: Any, kind: type, low: float | None = None, high: float | None = None) -> Any:
    if isinstance(value, bool):
        return _DROP
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return _DROP
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return _DROP
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    if kind is int:
        return int(round(value))
    return float(value)


def _fix_list(item_type: Any, value: Any) -> Any:
    """Keep the usable elements of a list; anything that is not a list is dropped."""
    if not isinstance(value, (list, tuple)):
        return _DROP
    if isinstance(item_type, type) and issubclass(item_type, BaseModel):
        return [item for item in value if isinstance(item, (dict, item_type))]
    if item_type in (int, float):
        items = (_fix_number(item, item_type) for item in value)
        return [item for item in items if item is not _DROP]
    return list(value)


class GeometryConfig(BaseModel):
    """Configuration for geometry operations and tessellation."""

    circle_segments: int = Field(
        default=64,
        ge=8,
        le=1024,
        description="Segments used when expanding circle shorthand for geometry",
    )


class SimplifyMethod(str, Enum):
    """Polyline simplification algorithm."""

    RDP = "rdp"
    VISVALINGAM = "visvalingam"


class RenderConfig(BaseModel):
    """Global post-processing defaults applied by the engine."""

    smoothing: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Neighbour-average smoothing applied when a layer sets none",
    )
    simplify: float = Field(
        default=0.0,
        ge=0.0,
        le=50.0,
        description="Simplification tolerance applied when a layer sets none",
    )
    simplify_method: SimplifyMethod = Field(
        default=SimplifyMethod.RDP,
        description="Simplification algorithm",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class KernelSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> KernelSettings:
    """Get default application settings."""
    return KernelSettings()
