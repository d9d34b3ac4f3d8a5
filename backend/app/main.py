"""FastAPI entry point for the parking lot billing service."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import BACKEND_DIR, AppConfig, get_settings
from domain.errors import AlreadyInitialized
from infrastructure.socketio_manager import sio
from interfaces import deps, parking_router, receipt_router


def setup_logging(config: AppConfig) -> logging.Logger:
    """Root logging: stdout plus an optional file from app_config.yaml."""
    handlers: list = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        if not log_path.is_absolute():
            log_path = BACKEND_DIR / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    return logging.getLogger(__name__)


settings = get_settings()
logger = setup_logging(settings)

app = FastAPI(title="Parking Lot Billing System")

app.include_router(parking_router)
app.include_router(receipt_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Socket.IO beside FastAPI as one ASGI app
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)


@app.get("/health", tags=["health"])
def health_check() -> dict:
    """Expose a minimal health endpoint to help dev tooling."""
    return {
        "status": "ok",
        "configVersion": settings.version,
        "storage": settings.database_backend,
        "initialized": deps.parking_service.slots.is_initialized(),
    }


@app.on_event("startup")
def _auto_initialize() -> None:  # pragma: no cover - runtime wiring
    if not settings.auto_initialize:
        return
    try:
        logger.info(deps.parking_service.initialize_parking())
    except AlreadyInitialized:
        logger.info("Parking grid already present, skipping initialization")
