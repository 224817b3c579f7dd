"""
Process-wide engine and free functions over it.

Code that would rather not carry a ``Hooks`` handle around can use these
functions; they all resolve to the one instance returned by
``hooks_instance()``. The first call creates it, fires the setup action
and arranges for the shutdown action to fire when the interpreter exits.
"""

from __future__ import annotations

import atexit
import threading
from collections.abc import Sequence
from typing import Any

from loguru import logger

from .config import HookSettings
from .domain import DEFAULT_ACCEPTED_ARGS, DEFAULT_PRIORITY, Entry, HookCallback
from .engine import Hooks

_instance: Hooks | None = None
_settings: HookSettings | None = None
_instance_lock = threading.Lock()


def hooks_instance() -> Hooks:
    global _instance, _settings
    if _instance is not None:
        return _instance

    with _instance_lock:
        if _instance is None:
            _settings = HookSettings.from_env()
            _instance = Hooks()
            if _settings.fire_on_exit:
                atexit.register(_shutdown)
            created = True
        else:
            created = False

    if created:
        logger.debug("Process-wide hooks created")
        _instance.do_action(_settings.setup_hook)
    return _instance


def _shutdown() -> None:
    """Fire the shutdown action once, just before the interpreter exits."""
    if _instance is None or _settings is None:
        return
    logger.info("Firing {!r} hooks", _settings.shutdown_hook)
    _instance.do_action(_settings.shutdown_hook)


def hooks_reset() -> Hooks:
    return hooks_instance().reset()


def hooks_registered(tag: str, priority: int = DEFAULT_PRIORITY) -> list[Entry]:
    return hooks_instance().registered(tag, priority)


def add_action(
    tag: str,
    callback: HookCallback,
    priority: int = DEFAULT_PRIORITY,
    accepted_args: int = DEFAULT_ACCEPTED_ARGS,
) -> bool:
    return hooks_instance().add_action(tag, callback, priority, accepted_args)


def add_filter(
    tag: str,
    callback: HookCallback,
    priority: int = DEFAULT_PRIORITY,
    accepted_args: int = DEFAULT_ACCEPTED_ARGS,
) -> bool:
    return hooks_instance().add_filter(tag, callback, priority, accepted_args)


def apply_filters(tag: str, value: Any = None, *args: Any) -> Any:
    return hooks_instance().apply_filter(tag, value, *args)


def apply_filters_ref_array(tag: str, args: Sequence[Any]) -> Any:
    return hooks_instance().apply_filters_ref_array(tag, args)


def do_action(tag: str, *args: Any) -> None:
    hooks_instance().do_action(tag, *args)


def do_action_ref_array(tag: str, args: Sequence[Any]) -> None:
    hooks_instance().do_action_ref_array(tag, args)


def has_action(tag: str, callback: HookCallback | None = None) -> bool | int:
    return hooks_instance().has_action(tag, callback)


def has_filter(tag: str, callback: HookCallback | None = None) -> bool | int:
    return hooks_instance().has_filter(tag, callback)


def remove_action(
    tag: str, callback: HookCallback | None, priority: int = DEFAULT_PRIORITY
) -> bool:
    return hooks_instance().remove_action(tag, callback, priority)


def remove_filter(
    tag: str, callback: HookCallback | None, priority: int = DEFAULT_PRIORITY
) -> bool:
    return hooks_instance().remove_filter(tag, callback, priority)


def remove_all_actions(tag: str = "", priority: int | None = None) -> bool:
    return hooks_instance().remove_all_actions(tag, priority)


def remove_all_filters(tag: str = "", priority: int | None = None) -> bool:
    return hooks_instance().remove_all_filters(tag, priority)


def did_action(tag: str) -> int:
    return hooks_instance().did_action(tag)


def doing_action(action: str | None = None) -> bool:
    return hooks_instance().doing_action(action)


def doing_filter(name: str | None = None) -> bool:
    return hooks_instance().doing_filter(name)


def current_action() -> str:
    return hooks_instance().current_action()


def current_filter() -> str:
    return hooks_instance().current_filter()
