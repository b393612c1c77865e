"""Dependency injection container for dofactory providers.

Services are registered and looked up by the canonical name of their type,
so a factory parameter annotated ``Service | None`` is resolved from the
service registered for ``Service | None``, never from the one for
``Service``.
"""

import inspect
import typing
from typing import Any, TypeVar

from loguru import logger

from dofactory.exceptions import RegistrationError, ServiceNotFoundError
from dofactory.naming import type_name
from dofactory.provider import Provider

T = TypeVar("T")


class DIContainer:
    """Dependency injection container keyed by canonical type names.

    Features:
    - Lazy singletons (``provide``): the provider runs on first use
    - Transient services (``provide_transient``): the provider runs on every use
    - Eager values (``provide_value``), including explicit ``None``
    - Overrides of existing registrations
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._providers: dict[str, Provider] = {}
        self._instances: dict[str, Any] = {}
        self._transient: set[str] = set()

    def provide(self, provider: Provider, service_type: Any = None) -> str:
        """Register a provider whose value is built once, on first use.

        Args:
            provider: A callable ``(container) -> (value, error)``
            service_type: The type provided. Defaults to ``provider.target``
                or the first element of the provider's return annotation.

        Returns:
            The canonical name the service is registered under.

        Raises:
            RegistrationError: If the service type cannot be determined or
                is already registered.
        """
        name = type_name(self._service_type(provider, service_type))
        self._ensure_free(name)
        self._providers[name] = provider
        logger.debug(f"Registered lazy service `{name}`")
        return name

    def provide_transient(self, provider: Provider, service_type: Any = None) -> str:
        """Register a provider that runs on every lookup."""
        name = type_name(self._service_type(provider, service_type))
        self._ensure_free(name)
        self._providers[name] = provider
        self._transient.add(name)
        logger.debug(f"Registered transient service `{name}`")
        return name

    def provide_value(self, value: Any, service_type: Any = None) -> str:
        """Register a ready value. ``service_type`` defaults to ``type(value)``."""
        name = type_name(self._value_type(value, service_type))
        self._ensure_free(name)
        self._values[name] = value
        logger.debug(f"Registered value service `{name}`")
        return name

    def override(
        self, provider: Provider, service_type: Any = None, transient: bool = False
    ) -> str:
        """Replace any registration of the provider's type."""
        name = type_name(self._service_type(provider, service_type))
        self._forget(name)
        self._providers[name] = provider
        if transient:
            self._transient.add(name)
        logger.debug(f"Overrode service `{name}`")
        return name

    def override_value(self, value: Any, service_type: Any = None) -> str:
        """Replace any registration of the value's type with ``value``."""
        name = type_name(self._value_type(value, service_type))
        self._forget(name)
        self._values[name] = value
        logger.debug(f"Overrode service `{name}` with a value")
        return name

    def invoke_named(self, name: str) -> Any:
        """Resolve a service by canonical name.

        Returns:
            The service value, possibly ``None`` when registered as such.

        Raises:
            ServiceNotFoundError: If nothing is registered under ``name``.
            Exception: The error returned by the service's provider.
        """
        if name in self._values:
            return self._values[name]

        if name in self._instances:
            return self._instances[name]

        provider = self._providers.get(name)
        if provider is None:
            raise ServiceNotFoundError(name, self.list_provided_services())

        logger.debug(f"Invoking provider of `{name}`")
        value, err = provider(self)
        if err is not None:
            raise err

        if name not in self._transient:
            self._instances[name] = value

        return value

    def invoke(self, service_type: type[T]) -> T:
        """Resolve a service by type."""
        return self.invoke_named(type_name(service_type))

    def has(self, service_type: Any) -> bool:
        """Check if a service is registered for a type."""
        name = type_name(service_type)
        return name in self._values or name in self._providers

    def list_provided_services(self) -> list[str]:
        """Canonical names of all registered services, sorted."""
        return sorted({*self._values, *self._providers})

    def _ensure_free(self, name: str) -> None:
        if name in self._values or name in self._providers:
            raise RegistrationError(f"service `{name}` has already been registered")

    def _forget(self, name: str) -> None:
        self._values.pop(name, None)
        self._providers.pop(name, None)
        self._instances.pop(name, None)
        self._transient.discard(name)

    @staticmethod
    def _service_type(provider: Provider, service_type: Any) -> Any:
        if service_type is not None:
            return service_type

        target = getattr(provider, "target", None)
        if target is not None:
            return target

        try:
            annotation = inspect.signature(provider).return_annotation
        except (TypeError, ValueError) as e:
            raise RegistrationError(
                f"cannot determine the service type of {provider!r}"
            ) from e

        args = typing.get_args(annotation)
        if typing.get_origin(annotation) is tuple and len(args) == 2:
            return args[0]

        raise RegistrationError(
            f"cannot determine the service type of {provider!r}, pass service_type"
        )

    @staticmethod
    def _value_type(value: Any, service_type: Any) -> Any:
        if service_type is not None:
            return service_type
        if value is None:
            raise RegistrationError("service_type is required to provide None")
        return type(value)


def create_container() -> DIContainer:
    """Create an empty DI container.

    Returns:
        A DIContainer instance.
    """
    return DIContainer()
