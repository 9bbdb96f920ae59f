"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stepviz.config import settings
from stepviz.engine.validation import register_validators

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.stepviz_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="StepViz",
        description="Visualization data pipeline for algorithm step sequences",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all validator modules to trigger registration
    registry = register_validators()
    logger.info("%d validators registered (%s env)", registry.count, settings.stepviz_env)

    from stepviz.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
