"""FastAPI application for the Lunchtime Meetups API."""
import asyncio
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ingest.settings import load_settings
from pipeline.runner import LunchEventPipeline, build_pipeline

logger = logging.getLogger(__name__)
if os.getenv("SCRAPER_DEBUG"):
    logging.basicConfig(level=logging.INFO, format="%(message)s")

app = FastAPI(
    title="Lunchtime Meetups API",
    description="API for finding online tech meetups held over lunch",
    version="1.0.0",
)

# Thread pool for running the blocking pipeline from async handlers
executor = ThreadPoolExecutor(max_workers=4)


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str


@lru_cache(maxsize=1)
def get_pipeline() -> LunchEventPipeline:
    """Build the pipeline once per process from environment settings."""
    return build_pipeline(load_settings())


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version="1.0.0"
    )


@app.get("/live", response_model=HealthResponse)
async def liveness_check():
    """Liveness check endpoint for container orchestration."""
    return HealthResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version="1.0.0"
    )


@app.get("/ready", response_model=HealthResponse)
async def readiness_check(pipeline: LunchEventPipeline = Depends(get_pipeline)):
    """Readiness check: settings load and the pipeline can be built."""
    return HealthResponse(
        status="ready",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version="1.0.0"
    )


@app.get("/api/events")
async def lunch_events(
    start: Optional[str] = None,
    end: Optional[str] = None,
    pipeline: LunchEventPipeline = Depends(get_pipeline),
):
    """
    Return lunchtime (12:00-13:00) events between ``start`` and ``end``.

    This endpoint:
    - Validates the YYYY-MM-DD range (at most 32 days by default)
    - Queries connpass in date batches and merges what comes back
    - Serves placeholder events when connpass has nothing usable
    """
    cancel = threading.Event()
    loop = asyncio.get_running_loop()
    try:
        status_code, body = await loop.run_in_executor(
            executor,
            pipeline.handle_request,
            start,
            end,
            cancel
        )
    except asyncio.CancelledError:
        # Client went away; stop any partitions that have not started yet
        cancel.set()
        raise

    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Lunchtime Meetups API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "events": "/api/events?start=YYYY-MM-DD&end=YYYY-MM-DD"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
