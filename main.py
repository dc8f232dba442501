from __future__ import annotations

import logging
import time as _t
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from db import init_db
from middleware import MetricsMiddleware
from routers import (
    admin as admin_router,
    auth as auth_router,
    events as events_router,
    favorites as favorites_router,
    genres as genres_router,
    metrics as metrics_router,
)

_log = logging.getLogger("uvicorn.error")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger().setLevel(settings.log_level.upper())
    init_db()
    logger.info("eventboard-api starting env=%s", settings.app_env)
    yield
    logger.info("eventboard-api shutting down")


app = FastAPI(title="eventboard-api", version="1.0.0", lifespan=lifespan)

# CORS (adjust origins as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics
app.add_middleware(MetricsMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = _t.perf_counter()  # monotonic for durations
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur_ms = int((_t.perf_counter() - start) * 1000)
        status = getattr(response, "status_code", "-")
        _log.info(
            "path=%s status=%s dur_ms=%s ua=%s",
            request.url.path,
            status,
            dur_ms,
            request.headers.get("user-agent", "-"),
        )


# ---------- Error envelope ----------

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = (exc.errors() or [{}])[0]
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": f"{where}: {msg}" if where else msg},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled exception method=%s path=%s error=%s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


# Routers
app.include_router(events_router.router)
app.include_router(genres_router.router)
app.include_router(auth_router.router)
app.include_router(favorites_router.router)
app.include_router(admin_router.router)
app.include_router(metrics_router.router)


@app.get("/ping")
def ping():
    return {"success": True, "ts": _t.time()}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def root():
    return {"success": True, "service": "eventboard-api"}
