"""Configuration for the payments engine command line."""

import logging
import os
from dataclasses import dataclass

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"


@dataclass(frozen=True)
class EngineConfig:
    log_level: int
    log_format: str


def load_config() -> EngineConfig:
    return EngineConfig(
        log_level=_get_log_level("PAYMENTS_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        log_format=os.getenv("PAYMENTS_LOG_FORMAT") or DEFAULT_LOG_FORMAT,
    )


def _get_log_level(key: str, default: str) -> int:
    value = (os.getenv(key) or default).strip().upper()
    level = logging.getLevelName(value)
    if isinstance(level, int):
        return level
    return logging.getLevelName(default)
