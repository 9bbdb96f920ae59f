"""Master API router. Mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from stepviz.api import formats, health, visualize

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(visualize.router)
api_router.include_router(formats.router)
