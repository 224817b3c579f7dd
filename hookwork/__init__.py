"""
hookwork — prioritised action and filter hooks with a live, mutation-safe
dispatch cursor, plus an on/once/off/emit event façade.
"""

from loguru import logger

from .domain import (
    ALL_HOOK,
    SETUP_HOOK,
    SHUTDOWN_HOOK,
    CallbackIdentity,
    CallbackKind,
    Entry,
    HookError,
    InvalidCallbackError,
    InvalidHookNameError,
)
from .emitter import EventEmitter
from .engine import Hooks
from .functions import hooks_instance, hooks_reset

logger.disable(__name__)

__all__ = [
    "ALL_HOOK",
    "SETUP_HOOK",
    "SHUTDOWN_HOOK",
    "CallbackIdentity",
    "CallbackKind",
    "Entry",
    "EventEmitter",
    "HookError",
    "Hooks",
    "InvalidCallbackError",
    "InvalidHookNameError",
    "hooks_instance",
    "hooks_reset",
]
