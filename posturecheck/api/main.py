"""FastAPI application relaying client keypoints to the posture evaluators.

Endpoints:
- WS /ws: per-session frame evaluation (keypointsData -> postureFeedback)
- POST /posture: single-frame evaluation (JSON envelope)
- GET /health: health check
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger

from posturecheck.api.routers.posture import router as posture_router
from posturecheck.api.routers.ws import manager, router as ws_router
from posturecheck.core.config import get_settings
from posturecheck.core.logging_config import setup_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)
    logger.info("{} starting (environment={})", settings.app_name, settings.environment)
    yield
    logger.info("{} stopped", settings.app_name)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.exposed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"]
)


@app.get("/health")
async def health() -> dict:
    """Return API health status."""

    return {"status": "ok", "sessions": manager.count}


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Posture Detection Backend is running!"


# Routers
app.include_router(posture_router, prefix="", tags=["posture"])
app.include_router(ws_router, prefix="")
