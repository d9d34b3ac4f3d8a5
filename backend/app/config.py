"""Configuration loader that keeps all runtime constants centralized."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_PATH = Path(__file__).resolve().parent / "app_config.yaml"
BACKEND_DIR = Path(__file__).resolve().parent.parent

STORAGE_ENV = "PARKING_STORAGE"
DB_PATH_ENV = "PARKING_DB_PATH"


@dataclass(frozen=True)
class AppConfig:
    """Strongly-typed wrapper over the raw YAML document."""

    raw: Dict[str, Any]

    @property
    def version(self) -> str:
        return str(self.raw.get("version", "v1"))

    @property
    def storage(self) -> Dict[str, Any]:
        return self.raw.get("storage") or {}

    @property
    def database_backend(self) -> str:
        backend = os.environ.get(STORAGE_ENV) or self.storage.get("database", "sqlite")
        return str(backend).lower()

    @property
    def sqlite_path(self) -> Path:
        raw_path = os.environ.get(DB_PATH_ENV) or self.storage.get("sqlite_path", "parking_system.db")
        path = Path(raw_path)
        return path if path.is_absolute() else BACKEND_DIR / path

    @property
    def cors_origins(self) -> List[str]:
        return list((self.raw.get("cors") or {}).get("allow_origins", []))

    @property
    def logging(self) -> Dict[str, Any]:
        return self.raw.get("logging") or {}

    @property
    def log_level(self) -> str:
        return str(self.logging.get("level", "INFO")).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.logging.get("file")

    @property
    def parking(self) -> Dict[str, Any]:
        return self.raw.get("parking") or {}

    @property
    def auto_initialize(self) -> bool:
        return bool(self.parking.get("auto_initialize", False))


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> AppConfig:
    """Load configuration once per process."""

    config_path = path or CONFIG_PATH
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):  # pragma: no cover - invalid file guard
        raise ValueError("Configuration file must define a mapping at the top level.")
    return AppConfig(raw=data)
