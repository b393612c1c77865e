"""Canonical type names used as lookup keys between factories and the container.

``type_name`` turns any annotation into a stable string. Two annotations that
describe the same type get the same name; distinguishable types never share
one, so a parameter annotated ``UserId`` is never fed the ``str`` service.
"""

import collections.abc
import sys
import types
import typing
from typing import Annotated, Any, ForwardRef, Literal, TypeVar, Union

UNION_ORIGINS = (Union, types.UnionType)


def type_name(tp: Any) -> str:
    """Return the canonical name of a type annotation.

    Args:
        tp: Any annotation accepted by ``typing``: classes, ``NewType``,
            unions, generic aliases, ``Literal``, ``Annotated``, ``Any``...

    Returns:
        Canonical name, e.g. ``"int"``, ``"myapp.services.Service | None"``
        or ``"dict[str, list[int]]"``.
    """
    if tp is None or tp is type(None):
        return "None"
    if tp is Any:
        return "typing.Any"
    if tp is Ellipsis:
        return "..."
    if isinstance(tp, str):
        return repr(tp)
    if isinstance(tp, ForwardRef):
        return repr(tp.__forward_arg__)
    if isinstance(tp, TypeVar):
        return f"~{_qualified(tp)}"
    if isinstance(tp, typing.NewType):
        return _qualified(tp)
    if isinstance(tp, list):
        return f"[{', '.join(type_name(arg) for arg in tp)}]"

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in UNION_ORIGINS:
        return _union_name(args)
    if origin is Literal:
        return f"typing.Literal[{', '.join(repr(arg) for arg in args)}]"
    if origin is Annotated:
        metadata = ", ".join(repr(item) for item in tp.__metadata__)
        return f"typing.Annotated[{type_name(args[0])}, {metadata}]"
    if origin is collections.abc.Callable and args:
        params, result = args[0], args[-1]
        return f"collections.abc.Callable[{type_name(params)}, {type_name(result)}]"
    if origin is not None:
        if not args:
            return type_name(origin)
        return f"{type_name(origin)}[{', '.join(type_name(arg) for arg in args)}]"

    if isinstance(tp, type):
        return _qualified(tp)

    return repr(tp)


def _union_name(members: tuple) -> str:
    names = sorted(type_name(member) for member in members if member is not type(None))
    if type(None) in members:
        names.append("None")
    return " | ".join(names)


def _qualified(tp: Any) -> str:
    module = getattr(tp, "__module__", None)
    qualname = getattr(tp, "__qualname__", None) or getattr(tp, "__name__", repr(tp))

    if module == "builtins":
        return qualname

    name = qualname if module is None else f"{module}.{qualname}"

    # Types created inside a function, or rebound, may share a qualname
    if not _reachable(tp, module, qualname):
        name = f"{name}@{id(tp):x}"

    return name


def _reachable(tp: Any, module: str | None, qualname: str) -> bool:
    """Tell whether ``module.qualname`` looks up to ``tp`` itself."""
    obj = sys.modules.get(module) if module else None
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return False
    return obj is tp
