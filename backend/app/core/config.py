"""
Central configuration for the portfolio assistant runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    app_env: str
    app_name: str
    debug: bool
    log_level: str
    base_dir: Path
    data_dir: Path
    database_url: str
    content_store: str
    content_base_url: str
    content_timeout_seconds: float
    store_timeout_seconds: float
    store_backoff_seconds: float
    cache_ttl_seconds: float
    cache_max_entries: int
    enable_learning: bool
    background_workers: int
    background_max_pending: int
    cors_allow_origins: list[str]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def get_settings() -> Settings:
    base_dir = Path(__file__).resolve().parents[3]
    data_dir = base_dir / "data"

    raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    if raw_origins.strip() == "*":
        cors_allow_origins = ["*"]
    else:
        cors_allow_origins = [x.strip() for x in raw_origins.split(",") if x.strip()]

    content_store = os.getenv("CONTENT_STORE", "database").strip().lower()
    if content_store not in {"database", "http"}:
        content_store = "database"

    return Settings(
        app_env=os.getenv("APP_ENV", "dev").strip().lower(),
        app_name=os.getenv("APP_NAME", "Portfolio Assistant"),
        debug=_env_bool("DEBUG", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        base_dir=base_dir,
        data_dir=data_dir,
        database_url=os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{data_dir / 'chatbot.db'}",
        content_store=content_store,
        content_base_url=os.getenv("CONTENT_BASE_URL", "http://localhost:3000").strip().rstrip("/"),
        content_timeout_seconds=max(0.1, _env_float("CONTENT_TIMEOUT_SECONDS", 3.0)),
        store_timeout_seconds=max(0.1, _env_float("STORE_TIMEOUT_SECONDS", 2.0)),
        store_backoff_seconds=max(0.0, _env_float("STORE_BACKOFF_SECONDS", 30.0)),
        cache_ttl_seconds=max(1.0, _env_float("CACHE_TTL_SECONDS", 300.0)),
        cache_max_entries=max(1, _env_int("CACHE_MAX_ENTRIES", 1000)),
        enable_learning=_env_bool("ENABLE_LEARNING", True),
        background_workers=max(1, _env_int("BACKGROUND_WORKERS", 2)),
        background_max_pending=max(1, _env_int("BACKGROUND_MAX_PENDING", 256)),
        cors_allow_origins=cors_allow_origins,
    )
