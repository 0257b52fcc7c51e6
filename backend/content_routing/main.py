"""FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.content_routing.api.routes.content import router as content_router
from backend.content_routing.api.routes.health import router as health_router
from backend.content_routing.api.routes.metrics import router as metrics_router
from backend.content_routing.api.routes.slugs import router as slugs_router
from backend.content_routing.db.repositories import StorageError

logger = logging.getLogger(__name__)

app = FastAPI(title="Content Routing API", version="0.1.0")


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Answer storage failures with a generic 500; details stay in the logs."""
    logger.error(f"[api] storage failure path={request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Content Routing API", "version": "0.1.0"}


# Register routes; the catch-all content routes go last
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(slugs_router, tags=["slugs"])
app.include_router(content_router, tags=["content"])
