"""Custom exceptions for mediator-core.

This module provides the exception hierarchy raised by the resolution
and dispatch layer. Failures raised by strategies or wrappers are never
wrapped in these types; they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class MediatorError(Exception):
    """Base exception for all mediator-core errors.

    Example:
        >>> try:
        ...     repo.find(42)
        ... except MediatorError as e:
        ...     print(f"Mediator error: {e}")
    """

    pass


class NotConfiguredError(MediatorError):
    """Raised when an operation is resolved for a repository without a strategy.

    The repository was referenced before a backend was registered for it.
    Resolution is never retried, so every later call fails the same way
    until a new registration is made and the bindings are reset.

    Example:
        >>> try:
        ...     UnwiredRepository().find(1)
        ... except NotConfiguredError as e:
        ...     print(f"Missing strategy for {e.repository}")
    """

    def __init__(self, repository: Any, message: str | None = None) -> None:
        self.repository = repository
        name = getattr(repository, "__name__", repr(repository))
        super().__init__(message or f"Repository {name} has no strategy configured")


class UnsupportedOperationError(MediatorError, AttributeError):
    """Raised when an operation name is not declared for a repository.

    Subclasses AttributeError so that the default unknown-member
    behaviour (``hasattr``, ``getattr`` with a default) keeps working.
    """

    def __init__(self, repository: Any, operation: str) -> None:
        self.repository = repository
        self.operation = operation
        name = getattr(repository, "__name__", repr(repository))
        super().__init__(f"'{name}' does not mediate operation '{operation}'")


class RegistrationError(MediatorError):
    """Raised when a strategy or wrapper cannot be registered.

    Common causes:
    - Strategy is not a class
    - Wrapper is not a class
    - Wrapper declares a hook it does not implement
    """

    pass


class ConfigurationError(MediatorError):
    """Raised when a registration file cannot be loaded.

    Example:
        >>> try:
        ...     load_registration_file("missing.yaml")
        ... except ConfigurationError as e:
        ...     print(f"Invalid configuration: {e}")
    """

    pass


NotConfigured = NotConfiguredError
UnsupportedOperation = UnsupportedOperationError


__all__ = [
    "MediatorError",
    "NotConfiguredError",
    "NotConfigured",
    "UnsupportedOperationError",
    "UnsupportedOperation",
    "RegistrationError",
    "ConfigurationError",
]
