"""Factory signature validation.

A factory is any callable whose parameters are annotated and whose result is
either ``T`` or ``tuple[T, error]``, where ``error`` is an exception class
(optionally ``| None``). Validation runs once, when the factory is adapted,
and produces an immutable ``FactoryDescriptor``.
"""

import functools
import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from dofactory.exceptions import FactoryShapeError, ShapeErrorKind
from dofactory.naming import type_name
from dofactory.typeinfo import is_error_type

T = TypeVar("T")

_VARIADIC_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
)


@dataclass(frozen=True)
class ParameterSpec:
    """A factory parameter and the service name it is resolved by"""

    name: str
    annotation: Any
    type_name: str
    keyword_only: bool = False


@dataclass(frozen=True)
class FactoryDescriptor(Generic[T]):
    """Validated shape of a factory producing ``T``.

    Attributes:
        factory: The wrapped callable
        target: The type the factory produces
        parameters: One entry per parameter, in declaration order
        returns_error: Whether the factory returns ``(value, error)``
        shape: Rendered signature, used in messages
    """

    factory: Callable[..., Any]
    target: Any
    parameters: tuple[ParameterSpec, ...]
    returns_error: bool = False
    shape: str = ""

    @property
    def parameter_names(self) -> tuple[str, ...]:
        """Canonical names of the parameters, in declaration order"""
        return tuple(parameter.type_name for parameter in self.parameters)

    @property
    def arity(self) -> int:
        return len(self.parameters)


def validate(candidate: Any, target: Any) -> FactoryDescriptor:
    """Check that ``candidate`` is a factory of ``target``.

    Args:
        candidate: The callable to validate
        target: The type the factory must produce

    Returns:
        The validated descriptor

    Raises:
        FactoryShapeError: If the candidate is not callable, is variadic,
            returns anything other than ``target`` or
            ``tuple[target, error]``, or has an unannotated parameter
    """
    if not callable(candidate):
        raise _shape_error(
            ShapeErrorKind.NOT_CALLABLE, type_name(type(candidate)), target
        )

    signature = _signature(candidate, target)
    shape = describe_signature(candidate, signature)

    if any(p.kind in _VARIADIC_KINDS for p in signature.parameters.values()):
        raise _shape_error(
            ShapeErrorKind.VARIADIC_NOT_SUPPORTED, f"variadic {shape}", target
        )

    outputs = _outputs(candidate, signature, target)

    if len(outputs) == 1 and _identical(outputs[0], target):
        returns_error = False
    elif (
        len(outputs) == 2
        and _identical(outputs[0], target)
        and is_error_type(outputs[1])
    ):
        returns_error = True
    else:
        raise _shape_error(ShapeErrorKind.UNEXPECTED_SIGNATURE, shape, target)

    parameters = []
    for parameter in signature.parameters.values():
        if parameter.annotation is inspect.Parameter.empty:
            raise _shape_error(
                ShapeErrorKind.MISSING_ANNOTATION,
                shape,
                target,
                f"parameter '{parameter.name}' has no type annotation",
            )
        parameters.append(
            ParameterSpec(
                name=parameter.name,
                annotation=parameter.annotation,
                type_name=type_name(parameter.annotation),
                keyword_only=parameter.kind is inspect.Parameter.KEYWORD_ONLY,
            )
        )

    return FactoryDescriptor(
        factory=candidate,
        target=target,
        parameters=tuple(parameters),
        returns_error=returns_error,
        shape=shape,
    )


def describe_shape(candidate: Any) -> str:
    """Render the shape of any value, e.g. ``(int, str) -> Service``"""
    if not callable(candidate):
        return type_name(type(candidate))

    try:
        signature = inspect.signature(candidate)
    except (TypeError, ValueError):
        return _callable_label(candidate)

    return describe_signature(candidate, signature)


def describe_signature(candidate: Any, signature: inspect.Signature) -> str:
    params = ", ".join(
        _parameter_label(parameter)
        for parameter in signature.parameters.values()
    )

    if inspect.isclass(candidate):
        result = type_name(candidate)
    elif signature.return_annotation is inspect.Signature.empty:
        result = "?"
    else:
        result = type_name(signature.return_annotation)

    return f"({params}) -> {result}"


def _parameter_label(parameter: inspect.Parameter) -> str:
    if parameter.annotation is inspect.Parameter.empty:
        label = parameter.name
    else:
        label = type_name(parameter.annotation)

    if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
        return f"*{label}"
    if parameter.kind is inspect.Parameter.VAR_KEYWORD:
        return f"**{label}"
    return label


def _signature(candidate: Any, target: Any) -> inspect.Signature:
    """Signature of ``candidate`` with every annotation evaluated, including
    forward references nested in other types such as ``Optional["Service"]``."""
    try:
        signature = inspect.signature(candidate)
    except (TypeError, ValueError) as e:
        raise _shape_error(
            ShapeErrorKind.UNEXPECTED_SIGNATURE,
            _callable_label(candidate),
            target,
            str(e),
        ) from e

    try:
        hints = typing.get_type_hints(_annotated(candidate), include_extras=True)
    except NameError as e:
        raise _shape_error(
            ShapeErrorKind.UNRESOLVED_ANNOTATION,
            _callable_label(candidate),
            target,
            str(e),
        ) from e
    except TypeError:
        # Callables without annotations of their own, e.g. builtins
        hints = {}

    parameters = [
        parameter.replace(annotation=hints.get(parameter.name, parameter.annotation))
        for parameter in signature.parameters.values()
    ]
    return signature.replace(
        parameters=parameters,
        return_annotation=hints.get("return", signature.return_annotation),
    )


def _annotated(candidate: Any) -> Any:
    """The function whose annotations describe ``candidate``'s signature."""
    if inspect.isclass(candidate):
        return candidate.__init__
    if isinstance(candidate, functools.partial):
        return _annotated(candidate.func)
    if inspect.isroutine(candidate):
        return candidate
    return getattr(candidate, "__call__", candidate)


def _outputs(
    candidate: Any, signature: inspect.Signature, target: Any
) -> tuple[Any, ...]:
    """Split the declared result into the values a factory produces."""
    if inspect.isclass(candidate):
        return (candidate,)

    annotation = signature.return_annotation
    if annotation in (inspect.Signature.empty, None, type(None)):
        return ()

    # A factory of a tuple type returns a single value
    if _identical(annotation, target):
        return (annotation,)

    if typing.get_origin(annotation) is tuple:
        args = typing.get_args(annotation)
        if Ellipsis not in args:
            return args

    return (annotation,)


def _identical(annotation: Any, target: Any) -> bool:
    return type_name(annotation) == type_name(target)


def _callable_label(candidate: Any) -> str:
    return getattr(candidate, "__qualname__", None) or type_name(type(candidate))


def _shape_error(
    kind: ShapeErrorKind, shape: str, target: Any, detail: str | None = None
) -> FactoryShapeError:
    message = (
        f"cannot use {shape} as Factory (...) -> ({type_name(target)}[, error])"
    )
    if detail:
        message += f": {detail}"
    return FactoryShapeError(kind, shape, target, message)
