"""Adapt plain factory functions into dependency injection providers."""

from loguru import logger

from .config import LoggingConfig, configure_logging
from .container import DIContainer, create_container
from .exceptions import (
    DofactoryError,
    FactoryShapeError,
    ProviderOutputError,
    RegistrationError,
    ResolutionError,
    ServiceNotFoundError,
    ShapeErrorKind,
)
from .naming import type_name
from .provider import FactoryProvider, Provider, to_provider
from .signature import FactoryDescriptor, ParameterSpec, validate

logger.disable("dofactory")

__all__ = [
    "to_provider",
    "FactoryProvider",
    "Provider",
    "validate",
    "FactoryDescriptor",
    "ParameterSpec",
    "type_name",
    "DIContainer",
    "create_container",
    "LoggingConfig",
    "configure_logging",
    "DofactoryError",
    "FactoryShapeError",
    "ShapeErrorKind",
    "ResolutionError",
    "ServiceNotFoundError",
    "ProviderOutputError",
    "RegistrationError",
]
