"""Settings for the process-wide engine and logging configuration helpers."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from .domain import SETUP_HOOK, SHUTDOWN_HOOK

ENV_PREFIX = "HOOKWORK_"

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


class HookSettings(BaseModel):
    """
    Settings read by ``hookwork.functions`` when it creates the
    process-wide engine.

    Attributes:
        shutdown_hook: Action fired once when the interpreter exits.
        setup_hook: Action fired once, right after the engine is created.
        fire_on_exit: Set to false to skip the exit-time action entirely.
        log_level: Level used by ``configure_logging``.
    """

    shutdown_hook: str = Field(default=SHUTDOWN_HOOK, min_length=1)
    setup_hook: str = Field(default=SETUP_HOOK, min_length=1)
    fire_on_exit: bool = True
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        logger.level(normalized)  # raises ValueError for unknown levels
        return normalized

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HookSettings":
        env = os.environ if environ is None else environ
        values = {
            name: env[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in env
        }
        return cls(**values)


def configure_logging(level: str = "INFO") -> int:
    """
    Turn on hookwork's log output and send it to stderr.

    The package is silent until this is called. Returns the loguru sink id.
    """
    logger.enable("hookwork")
    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
