"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from stepviz.engine.types import CanonicalType
from stepviz.engine.validation import register_validators
from stepviz.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        validators_registered=register_validators().count,
        canonical_types=len(CanonicalType),
    )
