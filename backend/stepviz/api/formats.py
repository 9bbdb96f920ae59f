"""GET /api/formats: documented example payload per canonical type."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from stepviz.engine.formats import expected_format
from stepviz.engine.types import CanonicalType, describe_type, map_to_canonical_type
from stepviz.engine.validation import register_validators
from stepviz.models.responses import FormatResponse

router = APIRouter()


def _format_for(canonical_type: CanonicalType) -> FormatResponse:
    title, mode = describe_type(canonical_type)
    return FormatResponse(
        type=canonical_type.value,
        title=title,
        mode=mode,
        description=register_validators().get(canonical_type).description,
        example=expected_format(canonical_type),
    )


@router.get("/formats", response_model=list[FormatResponse])
async def list_formats() -> list[FormatResponse]:
    return [_format_for(t) for t in CanonicalType]


@router.get("/formats/{type_name}", response_model=FormatResponse)
async def get_format(type_name: str) -> FormatResponse:
    canonical_type = map_to_canonical_type(type_name)
    if canonical_type is None:
        raise HTTPException(status_code=404, detail=f"Unknown visualization type: {type_name}")
    return _format_for(canonical_type)
