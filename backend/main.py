"""
Reactive component host - FastAPI application.

Entry point for the API server. Components are registered on
backend.registry.registry before the app starts serving.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.routes import components as component_routes
from engine.reactive.errors import UpdateError

logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="vmsync",
    docs_url=None,
    redoc_url=None,
)

# Register routes
app.include_router(component_routes.router)


@app.exception_handler(UpdateError)
async def update_error_handler(request: Request, exc: UpdateError) -> JSONResponse:
    """Status-coded engine failures become JSON error bodies."""
    if exc.status_code >= 500:
        logger.error("update failed: %s", exc)
    else:
        logger.info("update rejected (%d): %s", exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
