"""Format dispatch.

Maps each FormatKind to the capability it needs and to the function that
renders a value for it. Capabilities of declared field types are inferred
here too, so missing support is caught while compiling, not rendering.

Structured rendering follows the debug convention used for variants:

    Point { x: 1, y: 2 }     dataclasses, named tuples
    [1, 2], (1,), {'k': 1}   containers, members rendered recursively
    'text', 42, None         primitives use their Python literal form

A type can supply its own structured form by defining ``__structured__``.
"""

import operator
import types
import typing
from collections.abc import Callable, Iterable
from contextvars import ContextVar
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from simple_error.types import Capability, FormatKind

Formatter = Callable[[Any], str]

_PRIMITIVES = (int, float, complex, str, bytes, bool, type(None))
_CONTAINERS = (list, tuple, dict, set, frozenset)
_UNION_ORIGINS = (typing.Union, types.UnionType)

REQUIRED_CAPABILITY: dict[FormatKind, Capability] = {
    FormatKind.DEFAULT: Capability.DEFAULT,
    FormatKind.STRUCTURED: Capability.STRUCTURED,
    FormatKind.HEX: Capability.INTEGRAL,
}


# =============================================================================
# Capability inference (compile time)
# =============================================================================


def supports_structured(tp: Any) -> bool:
    """Whether values annotated as ``tp`` have a structured rendering."""
    if tp is Any or tp is None:
        return True

    origin = typing.get_origin(tp)
    if origin is not None:
        args = typing.get_args(tp)
        if origin is typing.Annotated:
            return supports_structured(args[0])
        if origin is typing.Literal:
            return True
        if origin in _UNION_ORIGINS or origin in _CONTAINERS:
            return all(supports_structured(arg) for arg in args if arg is not Ellipsis)
        return supports_structured(origin)

    if not isinstance(tp, type):
        return False
    if hasattr(tp, "__structured__"):
        return True
    if is_dataclass(tp) or issubclass(tp, (Enum, *_PRIMITIVES, *_CONTAINERS)):
        return True
    # Anything with a hand-written repr counts; object's default does not
    return tp.__repr__ is not object.__repr__


def supports_integral(tp: Any) -> bool:
    """Whether values annotated as ``tp`` can be rendered as hex."""
    if typing.get_origin(tp) is typing.Annotated:
        return supports_integral(typing.get_args(tp)[0])
    if not isinstance(tp, type) or issubclass(tp, bool):
        return False
    return issubclass(tp, int) or hasattr(tp, "__index__")


def capabilities_of(tp: Any) -> Capability:
    """Capability set of a declared field type."""
    caps = Capability.DEFAULT
    if supports_structured(tp):
        caps |= Capability.STRUCTURED
    if supports_integral(tp):
        caps |= Capability.INTEGRAL
    return caps


# =============================================================================
# Renderers (render time)
# =============================================================================


def render_default(value: Any) -> str:
    return str(value)


def render_hex(value: Any) -> str:
    """Lowercase hex digits of the magnitude, no prefix, no padding."""
    return format(abs(operator.index(value)), "x")


def _struct(name: str, members: Iterable[tuple[str, Any]]) -> str:
    body = ", ".join(f"{key}: {render_structured(val)}" for key, val in members)
    if not body:
        return name
    return f"{name} {{ {body} }}"


# ids of values currently being rendered in this context, for cycle detection
_active: ContextVar["set[int] | None"] = ContextVar("simple_error_structured_active", default=None)


def render_structured(value: Any) -> str:
    """Render ``value`` in its structured (debug) form.

    A value that contains itself renders as ``...`` at the point of recursion.
    """
    active = _active.get()
    if active is None:
        active = set()
        token = _active.set(active)
        try:
            return _render_guarded(value, active)
        finally:
            _active.reset(token)
    return _render_guarded(value, active)


def _render_guarded(value: Any, active: set[int]) -> str:
    key = id(value)
    if key in active:
        return "..."
    active.add(key)
    try:
        return _render_structured(value)
    finally:
        active.discard(key)


def _render_structured(value: Any) -> str:
    hook = getattr(type(value), "__structured__", None)
    if hook is not None:
        return hook(value)

    if is_dataclass(value) and not isinstance(value, type):
        return _struct(
            type(value).__name__,
            ((f.name, getattr(value, f.name)) for f in fields(value) if f.repr),
        )
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return _struct(type(value).__name__, zip(value._fields, value))

    if isinstance(value, list):
        return "[" + ", ".join(render_structured(v) for v in value) + "]"
    if isinstance(value, tuple):
        if len(value) == 1:
            return f"({render_structured(value[0])},)"
        return "(" + ", ".join(render_structured(v) for v in value) + ")"
    if isinstance(value, dict):
        items = (f"{render_structured(k)}: {render_structured(v)}" for k, v in value.items())
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (set, frozenset)):
        if not value:
            return f"{type(value).__name__}()"
        # Sorted so the output does not depend on hash seeds
        return "{" + ", ".join(sorted(render_structured(v) for v in value)) + "}"

    return repr(value)


FORMATTERS: dict[FormatKind, Formatter] = {
    FormatKind.DEFAULT: render_default,
    FormatKind.STRUCTURED: render_structured,
    FormatKind.HEX: render_hex,
}


def formatter_for(kind: FormatKind) -> Formatter:
    return FORMATTERS[kind]


def dispatch(value: Any, kind: FormatKind) -> str:
    """Render one value with the requested format kind."""
    return FORMATTERS[kind](value)
