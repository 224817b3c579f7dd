"""
Core domain: reserved hook names, callback identity, registered entries,
and all hook-specific exceptions.

Nothing here imports from the rest of the package — this is the
innermost layer and has zero side-effects.
"""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union


# ---------------------------------------------------------------------------
# Reserved hook names
# ---------------------------------------------------------------------------

UNSET_HOOK = ""
ALL_HOOK = "all"
SHUTDOWN_HOOK = "shutdown"
SETUP_HOOK = "after_hooks_setup"

DEFAULT_PRIORITY = 10
DEFAULT_ACCEPTED_ARGS = 1

# A callable, or a dotted import path resolved at dispatch time.
HookCallback = Union[Callable[..., Any], str]


# ---------------------------------------------------------------------------
# CallbackIdentity
# ---------------------------------------------------------------------------


class CallbackKind(str, Enum):
    FUNCTION = "function"
    METHOD = "method"
    STATIC = "static"
    CLOSURE = "closure"


def _token(obj: object) -> str:
    return format(id(obj), "x")


def _type_name(owner: type) -> str:
    return f"{owner.__module__}.{owner.__qualname__}"


@dataclass(frozen=True)
class CallbackIdentity:
    """
    Deduplication key for a registered callback.

    Bound methods are rebuilt on every attribute lookup, so they are keyed
    on the instance plus the method name rather than on the method object.
    Lambdas and nested functions are keyed on the function object itself:
    two structurally identical closures are two different callbacks.
    """

    kind: CallbackKind
    key: str

    def __str__(self) -> str:
        return self.key

    @classmethod
    def of(cls, callback: HookCallback | None) -> "CallbackIdentity | None":
        if callback is None:
            return None
        if isinstance(callback, str):
            return cls(CallbackKind.FUNCTION, callback)

        owner = getattr(callback, "__self__", None)
        if inspect.ismethod(callback) or (
            isinstance(callback, (types.BuiltinMethodType, types.MethodWrapperType))
            and owner is not None
            and not inspect.ismodule(owner)
        ):
            name = callback.__name__
            if isinstance(owner, type):
                return cls(CallbackKind.STATIC, f"{_type_name(owner)}::{name}")
            return cls(CallbackKind.METHOD, f"{_token(owner)}{name}")

        if isinstance(callback, (types.FunctionType, types.BuiltinFunctionType)):
            owner_name, _, name = callback.__qualname__.rpartition(".")
            if name == "<lambda>" or owner_name.endswith("<locals>"):
                return cls(CallbackKind.CLOSURE, _token(callback))
            module = callback.__module__ or "builtins"
            if owner_name:
                return cls(CallbackKind.STATIC, f"{module}.{owner_name}::{name}")
            return cls(CallbackKind.FUNCTION, f"{module}.{name}")

        if isinstance(callback, (types.MethodDescriptorType, types.WrapperDescriptorType)):
            return cls(
                CallbackKind.STATIC,
                f"{_type_name(callback.__objclass__)}::{callback.__name__}",
            )

        return cls(CallbackKind.CLOSURE, _token(callback))


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


@dataclass
class Entry:
    """
    One registered callback inside a priority bucket.

    Attributes:
        identity: Deduplication key of ``callback``.
        callback: The callable (or dotted path) to invoke.
        accepted_args: How many leading dispatch arguments the callback gets.
        seq: Table-wide insertion sequence; keeps its value on overwrite.
    """

    identity: CallbackIdentity
    callback: HookCallback | None
    accepted_args: int = DEFAULT_ACCEPTED_ARGS
    seq: int = 0

    def __str__(self) -> str:
        return f"<{self.identity.kind.value} {self.identity.key} args={self.accepted_args}>"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class HookError(Exception):
    """Base for all hook-specific errors."""


class InvalidHookNameError(HookError, ValueError):
    def __init__(self, name: object, kind: str = "event") -> None:
        super().__init__(f"{kind} name must not be null")
        self.name = name


class InvalidCallbackError(HookError, TypeError):
    """Raised when a listener handed to the event façade cannot be called."""

    def __init__(self, callback: object) -> None:
        super().__init__(f"The provided {callback!r} is not a valid callable.")
        self.callback = callback
