# src/insight_pulse/main.py
"""Main entry point for the Insight Pulse application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from insight_pulse.api.v1 import insights_router, reactions_router
from insight_pulse.core.errors import (
    InsightPulseError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
)
from insight_pulse.core.settings import settings
from insight_pulse.services.reconciliation import ReconciliationWorker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Emoji reactions, popularity ranking and leaderboards for captured insights",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(reactions_router, prefix="/api/v1")
app.include_router(insights_router, prefix="/api/v1")


_ERROR_STATUS: dict[type[InsightPulseError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    UnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _error_handler(status_code: int):
    async def handler(request: Request, exc: InsightPulseError) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    return handler


for _error_type, _status_code in _ERROR_STATUS.items():
    app.add_exception_handler(_error_type, _error_handler(_status_code))


@app.on_event("startup")
async def on_startup() -> None:
    if settings.reconciliation_enabled:
        worker = ReconciliationWorker()
        await worker.start()
        logger.info("Reconciliation worker started, interval %.0fs", worker.interval)
        app.state.reconciliation_worker = worker
    else:
        app.state.reconciliation_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: ReconciliationWorker | None = getattr(app.state, "reconciliation_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("insight_pulse.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
