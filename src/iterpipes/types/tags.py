"""
Type tags for pipe items.

Every pipe declares the type of item it accepts and the type it produces.
Tags are ordinary Python annotations (classes, ``X | None``, ``tuple[int, str]``,
``Any``) and are compared when pipes are connected, so a mismatch fails at
construction time rather than deep inside a running pipeline.
"""

from __future__ import annotations

import types
import typing
from typing import Annotated, Any, Optional, TypeVar, Union, get_args, get_origin

_NONE_TYPE = type(None)

# Implicit numeric promotions (PEP 484): an int is acceptable where a float is.
_PROMOTIONS: dict[type, tuple[type, ...]] = {
    int: (float, complex),
    float: (complex,),
}


def _normalize(tp: Any) -> Any:
    if tp is None:
        return _NONE_TYPE
    if isinstance(tp, TypeVar):
        return Any
    if get_origin(tp) is Annotated:
        return _normalize(get_args(tp)[0])
    return tp


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def _is_subclass(produced: Any, accepted: Any) -> bool:
    if produced == accepted:
        return True
    if not (isinstance(produced, type) and isinstance(accepted, type)):
        return False
    if accepted in _PROMOTIONS.get(produced, ()):
        return True
    try:
        return issubclass(produced, accepted)
    except TypeError:
        return False


def is_compatible(produced: Any, accepted: Any) -> bool:
    """Check whether items of type ``produced`` may be fed where ``accepted`` is expected.

    Args:
        produced: Output tag of the upstream pipe
        accepted: Input tag of the downstream pipe

    Returns:
        True if every value of ``produced`` is a valid ``accepted`` value,
        as far as the tags can tell. ``Any`` on either side is compatible.
    """
    produced = _normalize(produced)
    accepted = _normalize(accepted)

    if produced is Any or accepted is Any or accepted is object:
        return True

    if _is_union(produced):
        return all(is_compatible(member, accepted) for member in get_args(produced))
    if _is_union(accepted):
        return any(is_compatible(produced, member) for member in get_args(accepted))

    p_origin = get_origin(produced)
    a_origin = get_origin(accepted)

    if p_origin is None and a_origin is None:
        return _is_subclass(produced, accepted)

    # Bare generic on one side: only the container class can be compared.
    if p_origin is None:
        return _is_subclass(produced, a_origin)
    if a_origin is None:
        return _is_subclass(p_origin, accepted)

    if not _is_subclass(p_origin, a_origin):
        return produced == accepted

    p_args = get_args(produced)
    a_args = get_args(accepted)
    if not p_args or not a_args:
        return True
    if Ellipsis in p_args or Ellipsis in a_args:
        return is_compatible(p_args[0], a_args[0])
    if len(p_args) != len(a_args):
        return False
    return all(is_compatible(p, a) for p, a in zip(p_args, a_args))


def make_optional(tp: Any) -> Any:
    """Return the tag for "``tp`` or ``None``"."""
    tp = _normalize(tp)
    if tp is Any:
        return Any
    return Optional[tp]  # noqa: UP007


def strip_optional(tp: Any) -> Any:
    """Return ``tp`` with ``None`` removed from it.

    ``Optional[int]`` becomes ``int``; ``Any`` stays ``Any``.
    """
    tp = _normalize(tp)
    if not _is_union(tp):
        return tp
    members = [m for m in get_args(tp) if m is not _NONE_TYPE]
    if not members:
        return _NONE_TYPE
    if len(members) == 1:
        return members[0]
    return Union[tuple(members)]  # noqa: UP007


def type_name(tp: Any) -> str:
    """Readable name of a type tag, for messages and descriptions."""
    tp = _normalize(tp)
    if tp is Any:
        return "Any"
    if tp is _NONE_TYPE:
        return "None"
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def callable_tags(fn: Any) -> tuple[Any, Any]:
    """Derive (input, output) tags from a single-argument callable's annotations.

    Missing or unresolvable annotations give ``Any``.
    """
    try:
        hints = typing.get_type_hints(fn)
    except Exception:
        # Unresolvable forward references, builtins without signatures, etc.
        return Any, Any

    output_type = hints.pop("return", Any)
    input_type: Any = Any
    if hints:
        code = getattr(fn, "__code__", None)
        if code is not None and code.co_argcount:
            first = code.co_varnames[0]
            if first in ("self", "cls") and code.co_argcount > 1:
                first = code.co_varnames[1]
            input_type = hints.get(first, Any)
        else:
            input_type = next(iter(hints.values()))
    return input_type, output_type
