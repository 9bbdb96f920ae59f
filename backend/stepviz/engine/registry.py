"""Validator registry: every validator class is registered via decorator.

Usage:
    @validator(CanonicalType.TREE, description="Nodes, edges, BST and shape checks")
    class TreeValidator(BaseValidator):
        def _validate(self, data): ...

Adding a canonical type = adding an enum member plus one decorated class.
``missing()`` reports any enum member left without a validator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from stepviz.engine.types import CanonicalType

if TYPE_CHECKING:
    from stepviz.engine.validators.base import BaseValidator

logger = logging.getLogger(__name__)


@dataclass
class ValidatorSpec:
    canonical_type: CanonicalType
    cls: type["BaseValidator"]
    description: str = ""


class ValidatorRegistry:
    """Registry of validator classes keyed by canonical type."""

    def __init__(self) -> None:
        self._validators: dict[CanonicalType, ValidatorSpec] = {}

    def register(self, spec: ValidatorSpec) -> None:
        if spec.canonical_type in self._validators:
            raise ValueError(f"Duplicate validator for type: {spec.canonical_type.value}")
        self._validators[spec.canonical_type] = spec
        logger.debug("Registered validator %s for %s", spec.cls.__name__, spec.canonical_type.value)

    def get(self, canonical_type: CanonicalType) -> ValidatorSpec:
        try:
            return self._validators[canonical_type]
        except KeyError:
            raise ValueError(f"No validator registered for type: {canonical_type.value}") from None

    def all(self) -> list[ValidatorSpec]:
        order = list(CanonicalType)
        return sorted(self._validators.values(), key=lambda s: order.index(s.canonical_type))

    def missing(self) -> set[CanonicalType]:
        return set(CanonicalType) - set(self._validators)

    @property
    def count(self) -> int:
        return len(self._validators)


# Module-level singleton
_registry = ValidatorRegistry()


def get_registry() -> ValidatorRegistry:
    return _registry


def validator(
    canonical_type: CanonicalType,
    *,
    description: str = "",
) -> Callable[[type["BaseValidator"]], type["BaseValidator"]]:
    """Class decorator registering a validator and binding its canonical type."""

    def decorator(cls: type["BaseValidator"]) -> type["BaseValidator"]:
        cls.canonical_type = canonical_type
        _registry.register(ValidatorSpec(canonical_type=canonical_type, cls=cls, description=description))
        return cls

    return decorator
