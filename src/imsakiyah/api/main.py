"""Imsakiyah API — location resolution and Ramadan schedules over HTTP.

Run:
    uvicorn imsakiyah.api.main:app --reload
    # or
    imsakiyah-api
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from imsakiyah.api.routes import router
from imsakiyah.config import settings
from imsakiyah.core.errors import ScheduleApiError
from imsakiyah.observability.logging import correlation_scope, setup_logging
from imsakiyah.observability.tracing import enable_async_logging, set_experiment, set_tracking_uri
from imsakiyah.retrieval.equran import list_provinces

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    try:
        set_tracking_uri(settings.mlflow_tracking_uri)
        set_experiment(settings.mlflow_experiment_name)
        enable_async_logging()
        app.state.tracing = "ok"
        logger.info("MLflow tracing enabled: %s", settings.mlflow_tracking_uri)
    except Exception as e:
        app.state.tracing = f"error: {e}"
        logger.error("MLflow setup failed: %s — resolving without traces", e)
    yield
    logger.info("Shutting down")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Bind X-Request-ID (or a fresh ID) for the request and echo it back."""

    async def dispatch(self, request: Request, call_next):
        with correlation_scope(request.headers.get("x-request-id")) as cid:
            response = await call_next(request)
            response.headers["x-request-id"] = cid
            return response


app = FastAPI(
    title="Imsakiyah Locator",
    description="Resolves a GPS position to the Indonesian province and kabupaten/kota "
    "names used by the equran.id imsakiyah schedule API.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health(request: Request):
    """Health check — the schedule API must answer with a non-empty province list."""
    checks: dict[str, object] = {"tracing": getattr(request.app.state, "tracing", "not_configured")}

    try:
        provinces = await list_provinces()
    except ScheduleApiError as e:
        checks["schedule_api"] = f"error: {e}"
    else:
        checks["schedule_api"] = "ok" if provinces else "empty"
        checks["provinces"] = len(provinces)

    status = "healthy" if checks["schedule_api"] == "ok" else "degraded"
    return {"status": status, "checks": checks}


def run():
    """Entry point for imsakiyah-api console script."""
    uvicorn.run("imsakiyah.api.main:app", host="0.0.0.0", port=8000, reload=True)
