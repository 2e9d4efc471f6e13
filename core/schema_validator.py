"""Schema validation utilities for simulation configuration parameters."""

from __future__ import annotations

import warnings
from typing import Any, Mapping


class SchemaValidationError(ValueError):
    """Raised when configuration params fail schema validation."""


def _type_name(tp: type[Any]) -> str:
    return tp.__name__


def _matches(value: Any, expected_type: type[Any]) -> bool:
    # bool is an int subclass; reject it for numeric params.
    if expected_type is float:
        return type(value) in (float, int)
    return type(value) is expected_type


def validate_params(
    params: Mapping[str, Any],
    schema_module: Any,
    strict: bool = True,
) -> dict[str, Any]:
    """Validate raw params against a schema module.

    Applies defaults, validates required fields and exact types, and handles
    unknown parameters as warnings or errors depending on ``strict``. Integer
    values are accepted (and converted) for float parameters.
    """
    required: Mapping[str, type[Any]] = getattr(schema_module, "REQUIRED_PARAMS", {})
    defaults: Mapping[str, Any] = getattr(schema_module, "DEFAULTS", {})
    optional: Mapping[str, type[Any]] = getattr(schema_module, "OPTIONAL_PARAMS", {})

    if not isinstance(required, Mapping) or not isinstance(defaults, Mapping) or not isinstance(optional, Mapping):
        raise SchemaValidationError("Schema must define REQUIRED_PARAMS, DEFAULTS, OPTIONAL_PARAMS mappings.")

    merged = dict(defaults)
    merged.update(params)

    for key in required:
        if key not in merged:
            raise SchemaValidationError(f"Missing required parameter '{key}'.")

    typed = {**optional, **required}
    for key, expected_type in typed.items():
        if key not in merged:
            continue
        if not _matches(merged[key], expected_type):
            raise SchemaValidationError(
                f"Parameter '{key}' expected {_type_name(expected_type)}, got {type(merged[key]).__name__}."
            )
        if expected_type is float:
            merged[key] = float(merged[key])

    allowed = set(required) | set(optional) | set(defaults)
    extras = sorted(key for key in merged if key not in allowed)
    if extras:
        message = f"Unknown parameter(s) {extras}."
        if strict:
            raise SchemaValidationError(message)
        warnings.warn(message, stacklevel=2)

    return merged
