"""
EventEmitter — on/once/off/emit naming over the Hooks engine.

Most calls forward 1:1 to the engine. The emitter also keeps its own
shadow list of raw listeners per event, in registration order, for two
things the engine does not do:

  - ``emit`` calls that list directly. No priority sort, no ``"all"``
    hook, no dispatch stack: it is the cheap path.
  - ``once`` listeners live only in the shadow list, under
    ``event + "_only_once"``, and are dropped the first time they run.

Actions go through ``on``/``off``/``emit``; filters through
``add``/``clear``/``trigger``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from .domain import (
    DEFAULT_ACCEPTED_ARGS,
    DEFAULT_PRIORITY,
    InvalidCallbackError,
    InvalidHookNameError,
)
from .engine import Hooks
from .functions import hooks_instance

ONCE_SUFFIX = "_only_once"

Listener = Callable[..., Any]


@dataclass
class _Subscription:
    listener: Listener
    accepted_args: int

    def __call__(self, args: tuple[Any, ...]) -> Any:
        return self.listener(*args[: self.accepted_args])


class EventEmitter:
    """
    Args:
        hooks: Engine to forward to. ``None`` uses the process-wide
               instance from ``hookwork.functions``.
    """

    def __init__(self, hooks: Hooks | None = None) -> None:
        if hooks is None:
            hooks = hooks_instance()
        self.hooks = hooks
        self._listeners: dict[str, list[_Subscription]] = {}

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on(
        self,
        event: str,
        listener: Listener,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> bool:
        self._validate(event, listener)
        self._add_listener(event, listener, accepted_args)
        return self.hooks.add_action(event, listener, priority, accepted_args)

    def once(
        self,
        event: str,
        listener: Listener,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> bool:
        """
        Subscribe ``listener`` for a single ``emit``.

        ``priority`` is accepted for signature parity with ``on``; once
        listeners run after regular ones, in registration order.
        """
        self._validate(event, listener)
        self._add_listener(event + ONCE_SUFFIX, listener, accepted_args)
        return True

    def off(
        self,
        event: str,
        listener: Listener | None = None,
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        if listener is not None:
            self._remove_listener(event, listener)
            self._remove_listener(event + ONCE_SUFFIX, listener)
        return self.hooks.remove_action(event, listener, priority)

    def emit(self, event: str, *args: Any) -> None:
        self._validate_name(event)

        for subscription in list(self._listeners.get(event, ())):
            subscription(args)

        # Detach first: a once listener may subscribe or emit again.
        once = self._listeners.pop(event + ONCE_SUFFIX, None)
        if once:
            logger.trace("Running {} once listener(s) for {!r}", len(once), event)
            for subscription in once:
                subscription(args)

    def delay(
        self,
        event: str,
        ticks: int,
        listener: Listener,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> bool:
        """Subscribe ``listener`` so it only runs from the ``ticks``-th emit on."""
        self._validate(event, listener)
        counter = 0

        def delayed(*args: Any) -> None:
            nonlocal counter
            counter += 1
            if counter >= ticks:
                listener(*args)

        return self.on(event, delayed, priority, accepted_args)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        listener: Listener,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> bool:
        self._validate(name, listener, kind="filter")
        self._add_listener(name, listener, accepted_args)
        return self.hooks.add_filter(name, listener, priority, accepted_args)

    def clear(
        self,
        name: str,
        listener: Listener | None = None,
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        if listener is not None:
            self._remove_listener(name, listener)
        return self.hooks.remove_filter(name, listener, priority)

    def cancel(self, name: str = "", priority: int | None = None) -> bool:
        """Drop every listener of ``name``, or of every event when empty."""
        if name:
            self._listeners.pop(name, None)
            self._listeners.pop(name + ONCE_SUFFIX, None)
        else:
            self._listeners = {}
        return self.hooks.remove_all_filters(name, priority)

    def trigger(self, name: str, *values: Any) -> Any:
        self._validate_name(name, kind="filter")
        return self.hooks.apply_filter(name, *values)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_event(self, event: str, listener: Listener | None = None) -> bool:
        return self.hooks.has_action(event, listener) is not False

    def has_name(self, name: str, listener: Listener | None = None) -> bool:
        return self.hooks.has_filter(name, listener) is not False

    def listeners(self, event: str) -> list[Listener]:
        """Raw listeners of ``event``: regular ones, then once ones."""
        return [
            subscription.listener
            for key in (event, event + ONCE_SUFFIX)
            for subscription in self._listeners.get(key, ())
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_name(name: str | None, kind: str = "event") -> None:
        if not name:
            raise InvalidHookNameError(name, kind)

    def _validate(self, name: str | None, listener: Any, kind: str = "event") -> None:
        if not callable(listener):
            raise InvalidCallbackError(listener)
        self._validate_name(name, kind)

    def _add_listener(self, key: str, listener: Listener, accepted_args: int) -> None:
        self._listeners.setdefault(key, []).append(_Subscription(listener, accepted_args))

    def _remove_listener(self, key: str, listener: Listener) -> None:
        subscriptions = self._listeners.get(key)
        if not subscriptions:
            return
        for index, subscription in enumerate(subscriptions):
            if subscription.listener == listener:
                del subscriptions[index]
                break
        if not subscriptions:
            del self._listeners[key]
