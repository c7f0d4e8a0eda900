"""Pydantic models for mediator-core.

This module provides the validated configuration and logging types.
Runtime dispatch types (Registration, DispatchPlan) are plain frozen
dataclasses and live beside the code that builds them.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

_TRUE_VALUES = ("1", "true", "yes", "on")


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(repository="UserRepository", operation="find")
        >>> log_debug("Resolved operation", context)
    """

    repository: str | None = Field(
        default=None,
        description="Repository class name.",
    )
    operation: str | None = Field(
        default=None,
        description="Mediated operation name.",
    )
    strategy: str | None = Field(
        default=None,
        description="Strategy class name.",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID supplied by the host application.",
    )


class MediatorConfig(BaseModel):
    """Configuration for bootstrapping mediator-core.

    Example:
        >>> config = MediatorConfig(log_level="debug", registration_path="repos.yaml")
        >>> result = bootstrap_mediator(config)
    """

    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level (trace, debug, info, warn, error).",
    )
    registration_path: str | None = Field(
        default=None,
        description="Path to a YAML registration file.",
    )
    validate_registrations: bool = Field(
        default=False,
        description="Plan every declared operation during bootstrap.",
    )
    events_enabled: bool = Field(
        default=True,
        description="Start the event bridge during bootstrap.",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_env(cls) -> MediatorConfig:
        """Build a configuration from MEDIATOR_* environment variables.

        Returns:
            MediatorConfig populated from the environment, with defaults
            for anything unset.
        """
        values: dict[str, object] = {}

        log_level = os.environ.get("MEDIATOR_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.lower()

        registration_path = os.environ.get("MEDIATOR_REGISTRATION_PATH")
        if registration_path:
            values["registration_path"] = registration_path

        validate = os.environ.get("MEDIATOR_VALIDATE")
        if validate is not None:
            values["validate_registrations"] = validate.strip().lower() in _TRUE_VALUES

        events_enabled = os.environ.get("MEDIATOR_EVENTS_ENABLED")
        if events_enabled is not None:
            values["events_enabled"] = events_enabled.strip().lower() in _TRUE_VALUES

        return cls.model_validate(values)


class RegistrationEntry(BaseModel):
    """One repository entry from a YAML registration file.

    All class references are dotted import paths (``package.module.ClassName``).
    """

    repository: str = Field(description="Import path of the Repository subclass.")
    strategy: str | None = Field(
        default=None,
        description="Import path of the strategy class.",
    )
    wrappers: list[str] = Field(
        default_factory=list,
        description="Import paths of wrapper classes, in chain order.",
    )
    operations: list[str] = Field(
        default_factory=list,
        description="Operation names the repository mediates.",
    )

    model_config = {"extra": "forbid"}

    @field_validator("operations")
    @classmethod
    def _operations_are_identifiers(cls, value: list[str]) -> list[str]:
        for name in value:
            if not name.isidentifier() or name.startswith("_"):
                raise ValueError(f"'{name}' is not a valid public operation name")
        return value


class RegistrationFile(BaseModel):
    """Top-level structure of a YAML registration file."""

    repositories: list[RegistrationEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class BootstrapResult(BaseModel):
    """Result from bootstrap_mediator().

    Example:
        >>> result = bootstrap_mediator()
        >>> if result.success:
        ...     print(f"Loaded {result.repositories_loaded} repositories")
    """

    success: bool = Field(description="Whether bootstrap was successful.")
    log_level: str = Field(description="Effective log level.")
    repositories_loaded: int = Field(
        default=0,
        description="Number of repositories registered from the registration file.",
    )
    operations_validated: int = Field(
        default=0,
        description="Number of operations planned during validation.",
    )
    events_enabled: bool = Field(
        default=False,
        description="Whether the event bridge was started.",
    )
    message: str | None = Field(
        default=None,
        description="Human-readable status message.",
    )


__all__ = [
    "LogContext",
    "MediatorConfig",
    "RegistrationEntry",
    "RegistrationFile",
    "BootstrapResult",
]
