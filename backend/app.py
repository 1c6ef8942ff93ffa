"""
Envai Backend Application

FastAPI application serving thermostat dashboard analytics.
"""

import os
import sys
import time
import traceback
from contextlib import asynccontextmanager

import log_config  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Import API router
from api import router as api_router
from api import settings, store

from core.envai.exceptions import (
    AssistantError,
    DataStoreError,
    EmptyInputError,
    EnvaiError,
    InvalidRangeError,
    UnknownChartError,
)
from core.envai.utils import now_iso

APP_VERSION = "1.0.0"

# Core error kind -> HTTP status, first match wins
ERROR_STATUS_CODES = [
    (InvalidRangeError, 400),
    (EmptyInputError, 404),
    (UnknownChartError, 404),
    (DataStoreError, 503),
    (AssistantError, 502),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Envai starting")

    # Log registered routes
    routes = [
        f"{getattr(route, 'path', '?')} - {getattr(route, 'methods', ['MOUNT'])}"
        for route in app.routes
    ]
    logger.info(f"Registered routes: {routes}")

    logger.info(
        f"Energy rate ${settings.energy_rate}/kWh, window strategy '{settings.window_strategy}', "
        f"timezone {settings.timezone or 'per-timestamp'}"
    )
    if os.path.exists(store.data_path):
        logger.info(f"Reading data: {store.data_path}")
    else:
        logger.warning(f"Reading data not found at {store.data_path}, data endpoints will return 503")

    if settings.assistant_enabled:
        logger.info(f"Assistant enabled (model: {settings.llm_model_name})")
    else:
        logger.warning("Assistant disabled (no LLM_API_KEY)")

    yield

    # Shutdown
    logger.info("Envai shutting down")


# Create FastAPI application
app = FastAPI(
    title="Envai API",
    description="Thermostat dashboard analytics: comfort, efficiency, costs and system health",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(EnvaiError)
async def envai_exception_handler(request: Request, exc: EnvaiError):
    """Translate core error kinds into rejected requests."""
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)),
        500,
    )
    log = logger.warning if status_code < 500 else logger.error
    log(f"{type(exc).__name__} on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": str(exc),
            "type": type(exc).__name__,
            "timestamp": now_iso(),
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions gracefully."""
    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    logger.error(f"Unhandled exception: {exc}")
    logger.error(f"Request path: {request.url.path}")
    logger.error(f"Stack trace:\n{tb_str}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "detail": str(exc),
            "type": type(exc).__name__,
            "message": "Internal server error",
        },
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.0f}ms)")
    return response


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "success": True,
        "message": "Thermostat Dashboard API is running",
        "timestamp": now_iso(),
    }


@app.get("/")
async def root():
    """Endpoint index."""
    return {
        "success": True,
        "message": "Thermostat Dashboard API",
        "version": APP_VERSION,
        "endpoints": {
            "dashboard": "/api/dashboard",
            "charts": "/api/charts",
            "data": "/api/data",
            "analytics": "/api/analytics",
            "ai": "/api/ai",
            "health": "/health",
        },
    }


# For development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 3001)))
