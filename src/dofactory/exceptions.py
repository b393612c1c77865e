"""Consolidated exceptions for dofactory.

Two tiers of failure are kept apart:

- ``FactoryShapeError`` is raised once, at registration, when a factory does
  not match the required shape. It signals a programming error.
- ``ResolutionError`` and ``ProviderOutputError`` describe runtime conditions.
  Providers return them as the error half of their result and the container
  raises them from ``invoke``.
"""

from enum import Enum
from typing import Any


class DofactoryError(Exception):
    """Base exception for dofactory errors"""

    pass


class ShapeErrorKind(Enum):
    """Reason a factory was rejected at registration"""

    NOT_CALLABLE = "not callable"
    VARIADIC_NOT_SUPPORTED = "variadic not supported"
    UNEXPECTED_SIGNATURE = "unexpected signature"
    MISSING_ANNOTATION = "missing annotation"
    UNRESOLVED_ANNOTATION = "unresolved annotation"


class FactoryShapeError(DofactoryError, TypeError):
    """Raised when a factory does not match ``(...) -> T | tuple[T, error]``"""

    def __init__(
        self, kind: ShapeErrorKind, shape: str, target: Any, message: str
    ) -> None:
        self.kind = kind
        self.shape = shape
        self.target = target
        super().__init__(message)


class ResolutionError(DofactoryError):
    """Base error for failures while resolving factory parameters"""

    pass


class ServiceNotFoundError(ResolutionError):
    """Raised when no service is registered under a canonical name"""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        message = f"could not find service `{name}`"
        if self.available:
            message += f", available services: {', '.join(self.available)}"
        else:
            message += ", no services available"
        super().__init__(message)


class ProviderOutputError(DofactoryError):
    """Raised when a factory returns a value that does not match its annotation"""

    pass


class RegistrationError(DofactoryError):
    """Raised when a provider cannot be registered in the container"""

    pass
