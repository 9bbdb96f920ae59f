"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StepIn(BaseModel):
    """One algorithm step as produced upstream. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    stepNumber: int | None = None
    title: str = ""
    description: str = ""
    visualization: Any = Field(default=None, description="{type, data} payload to render")
    variableStates: dict[str, Any] = Field(default_factory=dict)
    codeHighlight: Any = None
    edgeCases: list[Any] = Field(default_factory=list)
    pitfalls: list[Any] = Field(default_factory=list)
    validationWarnings: list[Any] = Field(default_factory=list)


class VisualizeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    steps: list[StepIn] = Field(..., description="Ordered algorithm steps")
    layout_seed: int | None = Field(
        default=None,
        description="Seed for graph layout jitter (overrides the server default)",
    )
