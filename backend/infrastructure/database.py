"""SQLModel database configuration."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

BACKEND_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DB_PATH = BACKEND_DIR / "parking_system.db"


@lru_cache(maxsize=None)
def get_engine(db_path: Path = DEFAULT_DB_PATH) -> Engine:
    """One engine per database file."""
    return create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """Create tables if they do not exist."""
    from . import models  # noqa: F401  # ensure SQLModel metadata is loaded

    SQLModel.metadata.create_all(engine)


def SessionLocal(engine: Engine) -> Session:
    return Session(engine)
