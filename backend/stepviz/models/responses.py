"""API response models. Field names go over the wire in camelCase."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = "ok"
    version: str = "0.1.0"
    validators_registered: int = 0
    canonical_types: int = 0


class StepBundleOut(BaseModel):
    """Serialized StepBundle; field names go over the wire in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    index: int
    canonical_type: str
    detected_type: str
    title: str = ""
    mode: str = "default"
    sanitized_data: Any = None
    slim_data: dict[str, Any] = Field(default_factory=dict)
    layout: dict[str, Any] | None = None
    tree_stats: dict[str, Any] | None = None
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    edge_cases: list[Any] = Field(default_factory=list)
    pitfalls: list[Any] = Field(default_factory=list)
    validation_warnings: list[Any] = Field(default_factory=list)
    fallback: dict[str, Any] | None = None


class VisualizeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    steps: list[StepBundleOut] = Field(default_factory=list)
    step_count: int = 0
    invalid_steps: int = 0
    processing_time_ms: float = 0.0


class FormatResponse(BaseModel):
    type: str
    title: str
    mode: str = "default"
    description: str = ""
    example: dict[str, Any] = Field(default_factory=dict)
