"""POST /api/visualize: run the step pipeline over a whole step sequence."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from stepviz.config import settings
from stepviz.engine.config import PipelineConfig
from stepviz.engine.pipeline import StepBundle, VisualizationEngine
from stepviz.models.requests import VisualizeRequest
from stepviz.models.responses import StepBundleOut, VisualizeResponse

router = APIRouter()

_SENTINEL = object()  # marks end of queue


def create_engine(req: VisualizeRequest) -> VisualizationEngine:
    seed = req.layout_seed if req.layout_seed is not None else settings.graph_layout_seed
    return VisualizationEngine([s.model_dump() for s in req.steps], config=PipelineConfig(layout_seed=seed))


def _bundle_out(bundle: StepBundle) -> StepBundleOut:
    return StepBundleOut.model_validate(bundle.to_dict())


async def _stream_visualize(req: VisualizeRequest) -> AsyncGenerator[str, None]:
    """Process steps in a thread, yielding one SSE event per finished step."""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_engine() -> None:
        try:
            with create_engine(req) as engine:
                for i in range(len(engine)):
                    out = _bundle_out(engine.process(i))
                    loop.call_soon_threadsafe(queue.put_nowait, out.model_dump(by_alias=True))
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    loop.run_in_executor(None, _run_engine)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: step\ndata: {json.dumps(item)}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done', 'steps': len(req.steps)})}\n\n"


@router.post("/visualize/stream")
async def visualize_stream(req: VisualizeRequest) -> StreamingResponse:
    return StreamingResponse(
        _stream_visualize(req),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/visualize", response_model=VisualizeResponse, response_model_by_alias=True)
async def visualize(req: VisualizeRequest) -> VisualizeResponse:
    start = time.perf_counter()

    with create_engine(req) as engine:
        bundles = [_bundle_out(b) for b in engine.process_all()]

    elapsed = (time.perf_counter() - start) * 1000
    return VisualizeResponse(
        steps=bundles,
        step_count=len(bundles),
        invalid_steps=sum(1 for b in bundles if not b.is_valid),
        processing_time_ms=round(elapsed, 1),
    )
