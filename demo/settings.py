from __future__ import annotations

import os
from dataclasses import dataclass

LOG_LEVELS = ("debug", "info", "warning", "error")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    log_level: str
    log_json: bool


def load_settings() -> Settings:
    log_level_raw = _getenv("MICROCRED_LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("MICROCRED_LOG_JSON", "false").lower()

    if log_level_raw not in LOG_LEVELS:
        raise ValueError(
            f"MICROCRED_LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )
    if log_json_raw not in ("true", "false", "1", "0"):
        raise ValueError(f"MICROCRED_LOG_JSON must be true|false (got {log_json_raw!r})")

    return Settings(log_level=log_level_raw, log_json=log_json_raw in ("true", "1"))
