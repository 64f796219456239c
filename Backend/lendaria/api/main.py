#!/usr/bin/env python3
"""
Lendária - Backend API Server
=============================
FastAPI entry point: health check, voice capture configuration and talent
analysis endpoints.
"""

from __future__ import annotations

from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lendaria.api.analysis_endpoints import router as analysis_router
from lendaria.core.config import get_settings
from lendaria.core.logging import get_logger
from lendaria.voice.settings import VoiceSettings

load_dotenv()

logger = get_logger(__name__)
settings = get_settings()

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)


@app.get("/api/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.APP_VERSION}


@app.get("/api/voice/config")
async def voice_config() -> Dict[str, Any]:
    """Expose non-sensitive voice capture configuration for the fields."""
    voice = VoiceSettings()
    return {
        "language": voice.speech_language,
        "continuous": False,
        "interim_results": False,
        "debounce_ms": voice.debounce_ms,
        "mic_title": voice.mic_title,
    }


logger.info({"event": "api_ready", "environment": settings.ENVIRONMENT})


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("lendaria.api.main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
