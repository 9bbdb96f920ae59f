"""Validator dispatch, failure policy and deep sanitization."""

from __future__ import annotations

import importlib
import logging
import math
import pkgutil
from typing import Any

from stepviz.engine.config import PipelineConfig
from stepviz.engine.fallback import fallback_instance, resolve_fallback
from stepviz.engine.registry import ValidatorRegistry, get_registry
from stepviz.engine.types import CanonicalType, map_to_canonical_type
from stepviz.engine.validators.base import ValidationResult

logger = logging.getLogger(__name__)

_VALIDATOR_PACKAGE = "stepviz.engine.validators"
_registered = False


def register_validators() -> ValidatorRegistry:
    """Import all validator modules so @validator decorators fire. Idempotent."""
    global _registered
    registry = get_registry()
    if _registered:
        return registry

    package = importlib.import_module(_VALIDATOR_PACKAGE)
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{_VALIDATOR_PACKAGE}.{module_name}")
    _registered = True

    missing = registry.missing()
    if missing:
        logger.warning("No validator for: %s", ", ".join(sorted(t.value for t in missing)))
    return registry


def validate_visualization_data(
    data: Any,
    canonical_type: CanonicalType | str,
    config: PipelineConfig | None = None,
) -> ValidationResult:
    """Validate and sanitize one payload against its canonical type. Never raises.

    Unknown type names are validated as arrays. A crash inside a validator is
    logged and turned into an invalid result carrying the fallback instance.
    """
    resolved = map_to_canonical_type(canonical_type)
    if resolved is None:
        logger.warning("Unknown visualization type %r, validating as array", canonical_type)
        resolved = CanonicalType.ARRAY

    registry = register_validators()
    try:
        validator_cls = registry.get(resolved).cls
        return validator_cls(config).validate(data)
    except Exception as e:
        logger.warning("Validator for %s crashed: %s", resolved.value, e, exc_info=True)
        resolution = resolve_fallback(resolved, e, data)
        return ValidationResult(
            is_valid=False,
            sanitized_data=fallback_instance(resolved),
            errors=[f"{resolution.title}: {resolution.message}"],
        )


def _to_json_like(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            str(k): _to_json_like(v)
            for k, v in value.items()
            if v is not None and not callable(v)
        }
    if isinstance(value, (list, tuple)):
        return [_to_json_like(v) for v in value if not callable(v)]
    if isinstance(value, (set, frozenset)):
        items = [_to_json_like(v) for v in value]
        try:
            return sorted(items)
        except TypeError:
            return items
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def sanitize_visualization_data(
    data: Any,
    canonical_type: CanonicalType | str,
    config: PipelineConfig | None = None,
) -> ValidationResult:
    """Deep-clean ``data`` into plain JSON values, then validate it.

    None-valued keys and callables are dropped, sets become sorted lists,
    non-finite floats become None and unknown objects are stringified. The
    caller's payload is never modified.
    """
    return validate_visualization_data(_to_json_like(data), canonical_type, config)
