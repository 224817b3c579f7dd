"""
Hooks — the dispatch engine.

Responsibilities:
  - register / unregister callbacks per hook name and priority
  - dispatch actions (side effects) and filters (value chained through
    every callback)
  - run the ``"all"`` pseudo-hook before every other dispatch
  - track the stack of hooks being dispatched and per-action fire counts

One instance owns its table, counters and stack; nothing here is global.
The process-wide instance lives in ``hookwork.functions``. Every public
method holds a single re-entrant lock, so callbacks running on the
dispatching thread may call back into the engine.
"""

from __future__ import annotations

import pkgutil
import threading
from collections import Counter
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from loguru import logger

from .cursor import DispatchCursor
from .domain import (
    ALL_HOOK,
    DEFAULT_ACCEPTED_ARGS,
    DEFAULT_PRIORITY,
    CallbackIdentity,
    Entry,
    HookCallback,
)
from .table import PriorityTable


class Hooks:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._table = PriorityTable()
        self._fired: Counter[str] = Counter()
        self._stack: list[str] = []

    def reset(self) -> "Hooks":
        """Drop every entry, counter and stack frame."""
        with self._lock:
            self._table.reset()
            self._fired = Counter()
            self._stack = []
        logger.debug("Hooks reset")
        return self

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        hook_name: str,
        callback: HookCallback,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> bool:
        """
        Attach ``callback`` to ``hook_name``.

        Re-registering the same callback at the same priority only updates
        ``accepted_args``. The callback is not checked for callability;
        that surfaces at dispatch time.

        Returns ``True`` for any callback. ``None`` is the one exception:
        it has no identity, so nothing is stored and ``False`` comes back.
        """
        identity = CallbackIdentity.of(callback)
        if identity is None:
            return False
        with self._lock:
            self._table.add(hook_name, identity, callback, priority, accepted_args)
        logger.debug(
            "Registered {} on {!r} (priority {}, args {})",
            identity,
            hook_name,
            priority,
            accepted_args,
        )
        return True

    def unregister(
        self,
        hook_name: str,
        callback: HookCallback | None,
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        identity = CallbackIdentity.of(callback)
        if identity is None:
            return False
        with self._lock:
            removed = self._table.remove(hook_name, identity, priority)
        if removed:
            logger.debug("Removed {} from {!r} (priority {})", identity, hook_name, priority)
        return removed

    def unregister_all(self, hook_name: str = "", priority: int | None = None) -> bool:
        with self._lock:
            self._table.clear(hook_name, priority)
        logger.debug(
            "Removed all callbacks from {} (priority {})",
            repr(hook_name) if hook_name else "every hook",
            "any" if priority is None else priority,
        )
        return True

    def has(self, hook_name: str = "", callback: HookCallback | None = None) -> bool | int:
        """
        Without ``callback``: whether anything is attached to ``hook_name``.
        With ``callback``: the priority it is attached at, or ``False``.

        The priority may be ``0``; compare the result with ``is False``.
        """
        if not hook_name:
            return False
        with self._lock:
            present = hook_name in self._table
            if callback is None or not present:
                return present
            identity = CallbackIdentity.of(callback)
            priority = self._table.find(hook_name, identity) if identity else None
        return False if priority is None else priority

    def registered(self, hook_name: str, priority: int = DEFAULT_PRIORITY) -> list[Entry]:
        with self._lock:
            return self._table.snapshot(hook_name, priority)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def apply_filter(self, hook_name: str, value: Any = None, *args: Any) -> Any:
        """Thread ``value`` through every callback of ``hook_name``."""
        return self.apply_filters_ref_array(hook_name, (value, *args))

    def apply_filters_ref_array(self, hook_name: str, args: Sequence[Any]) -> Any:
        call_args = list(args) or [None]
        with self._lock, self._dispatching(hook_name, call_args):
            for entry in self._walk(hook_name):
                call_args[0] = self._call(entry, call_args[: entry.accepted_args])
        return call_args[0]

    def do_action(self, hook_name: str, *args: Any) -> None:
        """Run every callback of ``hook_name`` for its side effects."""
        self.do_action_ref_array(hook_name, args)

    def do_action_ref_array(self, hook_name: str, args: Sequence[Any]) -> None:
        call_args = list(args)
        with self._lock:
            self._fired[hook_name] += 1
            with self._dispatching(hook_name, call_args):
                for entry in self._walk(hook_name):
                    self._call(entry, call_args[: entry.accepted_args])

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def fire_count(self, hook_name: str) -> int:
        with self._lock:
            return self._fired.get(hook_name, 0)

    def current_hook(self) -> str:
        with self._lock:
            return self._stack[-1] if self._stack else ""

    def is_dispatching(self, hook_name: str | None = None) -> bool:
        with self._lock:
            if hook_name is None:
                return bool(self._stack)
            return hook_name in self._stack

    # WordPress-style names
    add_filter = register
    add_action = register
    remove_filter = unregister
    remove_action = unregister
    remove_all_filters = unregister_all
    remove_all_actions = unregister_all
    has_filter = has
    has_action = has
    get_registered = registered
    apply_filters = apply_filter
    did_action = fire_count
    current_filter = current_hook
    current_action = current_hook
    doing_filter = is_dispatching
    doing_action = is_dispatching

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _dispatching(self, hook_name: str, args: list[Any]) -> Iterator[None]:
        """Push ``hook_name`` for the duration of a dispatch. Must hold the lock."""
        stack = self._stack  # a callback may reset() and swap the list
        stack.append(hook_name)
        logger.trace("Dispatching {!r} (depth {})", hook_name, len(stack))
        try:
            if hook_name != ALL_HOOK and ALL_HOOK in self._table:
                for entry in self._walk(ALL_HOOK):
                    self._call(entry, [hook_name, *args])
            yield
        finally:
            stack.pop()

    def _walk(self, hook_name: str) -> Iterator[Entry]:
        if hook_name not in self._table:
            return
        for entry in DispatchCursor(self._table, hook_name):
            if entry.callback:
                yield entry

    @staticmethod
    def _call(entry: Entry, args: list[Any]) -> Any:
        callback = entry.callback
        if isinstance(callback, str):
            callback = pkgutil.resolve_name(callback)
        try:
            return callback(*args)
        except Exception as exc:
            logger.debug("Callback {} raised {!r}", entry.identity, exc)
            raise
