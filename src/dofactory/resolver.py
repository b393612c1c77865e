"""Resolve factory parameters from a container by canonical name."""

from typing import Any, Protocol

from loguru import logger

from dofactory.signature import FactoryDescriptor
from dofactory.typeinfo import zero_value


class NamedLookup(Protocol):
    """Container side of parameter resolution"""

    def invoke_named(self, name: str) -> Any:
        """Return the service registered under ``name``.

        Raises:
            ResolutionError: If no service is registered under ``name``
        """
        ...


def resolve(
    descriptor: FactoryDescriptor, container: NamedLookup
) -> tuple[list[Any], dict[str, Any]]:
    """Look up every parameter of a factory, left to right.

    The first failing lookup propagates unchanged and later parameters are
    not looked up. A service registered as ``None`` is replaced with the
    zero value of the parameter's annotation.

    Args:
        descriptor: Validated factory
        container: Container to look the parameters up in

    Returns:
        Positional and keyword arguments for the factory call
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for position, parameter in enumerate(descriptor.parameters):
        logger.debug(
            f"Resolving parameter {position} '{parameter.name}' as `{parameter.type_name}`"
        )
        value = container.invoke_named(parameter.type_name)

        if value is None:
            value = zero_value(parameter.annotation)

        if parameter.keyword_only:
            kwargs[parameter.name] = value
        else:
            args.append(value)

    return args, kwargs
