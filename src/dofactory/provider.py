"""Adapt plain factories into container providers.

Example:

    def new_service(name: str) -> Service:
        return Service(name=name)

    container = DIContainer()
    container.provide_value("MyService")
    container.provide(to_provider(Service, new_service))
    service = container.invoke(Service)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

from dofactory.exceptions import ProviderOutputError
from dofactory.naming import type_name
from dofactory.resolver import NamedLookup, resolve
from dofactory.signature import FactoryDescriptor, validate
from dofactory.typeinfo import conforms, zero_value

T = TypeVar("T")

Provider = Callable[[NamedLookup], tuple[Any, BaseException | None]]


@dataclass(frozen=True)
class FactoryProvider(Generic[T]):
    """Container-shaped provider wrapping a validated factory.

    Calling it with a container resolves the factory parameters, invokes the
    factory and returns ``(value, error)``. Resolution failures and errors
    returned by the factory come back as ``error``; exceptions raised by the
    factory itself propagate.
    """

    descriptor: FactoryDescriptor[T]
    check_output: bool = True

    @property
    def target(self) -> Any:
        return self.descriptor.target

    def __call__(
        self, container: NamedLookup
    ) -> tuple[T | None, BaseException | None]:
        try:
            args, kwargs = resolve(self.descriptor, container)
        except Exception as e:
            logger.debug(
                f"Could not resolve parameters of {self.descriptor.shape}: {e}"
            )
            return zero_value(self.target), e

        out = self.descriptor.factory(*args, **kwargs)

        if not self.descriptor.returns_error:
            return self._checked(out, None)

        if self.check_output and not (isinstance(out, tuple) and len(out) == 2):
            return self._output_error(
                f"factory {self.descriptor.shape} returned "
                f"{type_name(type(out))}, expected a (value, error) tuple"
            )

        value, err = out
        return self._checked(value, err)

    def _checked(
        self, value: Any, err: Any
    ) -> tuple[T | None, BaseException | None]:
        if self.check_output and not (
            err is None or isinstance(err, BaseException)
        ):
            return self._output_error(
                f"factory {self.descriptor.shape} returned "
                f"{type_name(type(err))} as error, expected an exception or None"
            )

        if err is not None:
            return zero_value(self.target), err

        if self.check_output and not conforms(value, self.target):
            return self._output_error(
                f"factory {self.descriptor.shape} returned "
                f"{type_name(type(value))}, expected {type_name(self.target)}"
            )

        return value, None

    def _output_error(
        self, message: str
    ) -> tuple[T | None, BaseException | None]:
        logger.warning(message)
        return zero_value(self.target), ProviderOutputError(message)


def to_provider(
    target: Any, factory: Callable[..., Any], *, check_output: bool = True
) -> FactoryProvider:
    """Convert a factory into a provider of ``target``.

    Args:
        target: The type the factory produces
        factory: A callable ``(...) -> target`` or
            ``(...) -> tuple[target, Exception | None]``. Every parameter
            must be annotated; it is resolved from the container by the
            canonical name of its annotation.
        check_output: Report values that do not match ``target`` as
            ``ProviderOutputError`` instead of passing them through

    Returns:
        A provider to register in the container

    Raises:
        FactoryShapeError: If the factory does not have the required shape
    """
    descriptor = validate(factory, target)

    logger.debug(
        f"Adapted factory {descriptor.shape} into provider of "
        f"`{type_name(target)}` with parameters {list(descriptor.parameter_names)}"
    )

    return FactoryProvider(descriptor=descriptor, check_output=check_output)
