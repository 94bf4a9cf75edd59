"""Schema validation utilities for simulation plugin parameters."""

from __future__ import annotations

import warnings
from typing import Any, Mapping


class SchemaValidationError(ValueError):
    """Raised when simulation params fail schema validation."""


def _type_name(tp: type[Any]) -> str:
    return tp.__name__


def _matches_type(value: Any, expected_type: type[Any]) -> bool:
    # bool is an int subclass; YAML "true" must not satisfy an int field.
    if type(value) is bool:
        return expected_type is bool
    if expected_type is float:
        return type(value) in (int, float)
    return type(value) is expected_type


def _check_range(key: str, value: Any, bounds: tuple[Any, Any]) -> None:
    low, high = bounds
    if low is not None and value < low:
        raise SchemaValidationError(f"Parameter '{key}' must be >= {low}, got {value}.")
    if high is not None and value > high:
        raise SchemaValidationError(f"Parameter '{key}' must be <= {high}, got {value}.")


def validate_simulation_params(
    params: dict[str, Any],
    schema_module: Any,
    simulation_name: str,
    strict: bool = True,
) -> dict[str, Any]:
    """Validate simulation params against plugin schema.

    Applies defaults, validates required fields, types and ``PARAM_RANGES``,
    and handles unknown parameters as warnings or errors depending on
    ``strict``. Integers are accepted where a float is declared and are
    converted.
    """
    required: Mapping[str, type[Any]] = getattr(schema_module, "REQUIRED_PARAMS", {})
    defaults: Mapping[str, Any] = getattr(schema_module, "DEFAULTS", {})
    optional: Mapping[str, type[Any]] = getattr(schema_module, "OPTIONAL_PARAMS", {})
    ranges: Mapping[str, tuple[Any, Any]] = getattr(schema_module, "PARAM_RANGES", {})

    if not all(isinstance(section, Mapping) for section in (required, defaults, optional, ranges)):
        raise SchemaValidationError(
            f"Simulation '{simulation_name}' schema must define REQUIRED_PARAMS, DEFAULTS, "
            "OPTIONAL_PARAMS and PARAM_RANGES mappings."
        )

    merged = dict(defaults)
    merged.update(params)

    for key in required:
        if key not in merged:
            raise SchemaValidationError(
                f"Simulation '{simulation_name}' missing required parameter '{key}'."
            )

    typed = {**dict(optional), **dict(required)}
    for key, expected_type in typed.items():
        if key not in merged:
            continue
        if not _matches_type(merged[key], expected_type):
            raise SchemaValidationError(
                f"Parameter '{key}' expected {_type_name(expected_type)}, got {type(merged[key]).__name__}."
            )
        if expected_type is float:
            merged[key] = float(merged[key])
        if key in ranges:
            _check_range(key, merged[key], ranges[key])

    allowed = set(required) | set(optional) | set(defaults)
    extras = [key for key in merged if key not in allowed]
    if extras:
        message = f"Unknown parameter(s) {extras} for simulation '{simulation_name}'."
        if strict:
            raise SchemaValidationError(message)
        warnings.warn(message, stacklevel=2)

    return merged
