"""Runtime helpers over type annotations: zero values, conformance, error shapes."""

import collections.abc
import typing
from typing import Annotated, Any, Literal, TypeVar

from dofactory.naming import UNION_ORIGINS

# int is accepted where float is declared, int and float where complex is
_NUMERIC_PROMOTIONS = {
    float: (int, float),
    complex: (int, float, complex),
}

_EMPTY_CONSTRUCTIBLE = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    list,
    dict,
    set,
    frozenset,
    tuple,
)


def zero_value(tp: Any) -> Any:
    """Return the empty value of a type annotation.

    Nullable and reference-like types (``X | None``, ``Any``, plain classes)
    have ``None`` as their zero value. Builtin scalars and containers are
    constructed empty, fixed-size tuples element-wise, and ``NewType`` uses
    the zero value of its supertype.
    """
    if isinstance(tp, typing.NewType):
        return zero_value(tp.__supertype__)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Annotated:
        return zero_value(args[0])
    if origin is tuple:
        if not args or Ellipsis in args:
            return ()
        return tuple(zero_value(arg) for arg in args)
    if origin in _EMPTY_CONSTRUCTIBLE:
        return origin()
    if origin is None and tp in _EMPTY_CONSTRUCTIBLE:
        return tp()

    return None


def conforms(value: Any, tp: Any) -> bool:
    """Check shallowly whether ``value`` is an instance of annotation ``tp``.

    Generic aliases are checked against their origin only, so
    ``conforms([1], list[str])`` is true.
    """
    if tp is Any or tp is object or isinstance(tp, TypeVar):
        return True
    if tp is None or tp is type(None):
        return value is None
    if isinstance(tp, typing.NewType):
        return conforms(value, tp.__supertype__)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in UNION_ORIGINS:
        return any(conforms(value, member) for member in args)
    if origin is Literal:
        return value in args
    if origin is Annotated:
        return conforms(value, args[0])
    if origin is collections.abc.Callable:
        return callable(value)
    if origin is type:
        if not args or not isinstance(args[0], type):
            return isinstance(value, type)
        return isinstance(value, type) and issubclass(value, args[0])
    if origin is not None:
        return not isinstance(origin, type) or isinstance(value, origin)

    if isinstance(tp, type):
        if getattr(tp, "_is_protocol", False) and not getattr(
            tp, "_is_runtime_protocol", False
        ):
            return True
        return isinstance(value, _NUMERIC_PROMOTIONS.get(tp, tp))

    return True


def is_error_type(tp: Any) -> bool:
    """Tell whether ``tp`` can carry an error: an exception class or an
    optional union of exception classes."""
    origin = typing.get_origin(tp)

    if origin in UNION_ORIGINS:
        members = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        return bool(members) and all(is_error_type(member) for member in members)

    return (
        origin is None
        and isinstance(tp, type)
        and issubclass(tp, BaseException)
    )
