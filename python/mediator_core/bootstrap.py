"""Mediator bootstrap.

Applies a MediatorConfig: sets the log level, starts the event bridge,
loads the registration file and optionally validates that every loaded
registration can be planned.

Example:
    >>> from mediator_core import MediatorConfig, bootstrap_mediator
    >>>
    >>> result = bootstrap_mediator(MediatorConfig(registration_path="repos.yaml"))
    >>> print(f"Loaded {result.repositories_loaded} repositories")
"""

from __future__ import annotations

from .config import load_registration_file
from .dispatch.plan import build_plan
from .event_bridge import EventBridge
from .logging import configure_logging, log_info
from .registry.store import RegistrationStore
from .types import BootstrapResult, MediatorConfig


def bootstrap_mediator(
    config: MediatorConfig | None = None,
    store: RegistrationStore | None = None,
) -> BootstrapResult:
    """Initialize mediator-core from configuration.

    Args:
        config: Configuration; read from the environment if not provided.
        store: Store to load registrations into; defaults to the singleton.

    Returns:
        BootstrapResult describing what was done.

    Raises:
        ConfigurationError: If the registration file cannot be loaded.
        NotConfiguredError: If validation is enabled and a registration
            declares operations without a strategy.
    """
    config = config or MediatorConfig.from_env()
    target = store if store is not None else RegistrationStore.instance()

    configure_logging(config.log_level)

    if config.events_enabled:
        EventBridge.instance().start()

    loaded = 0
    if config.registration_path:
        loaded = load_registration_file(config.registration_path, target)

    validated = 0
    if config.validate_registrations:
        validated = validate_registrations(target)

    log_info(
        "Mediator bootstrapped",
        {
            "log_level": config.log_level,
            "repositories_loaded": loaded,
            "operations_validated": validated,
        },
    )
    return BootstrapResult(
        success=True,
        log_level=config.log_level,
        repositories_loaded=loaded,
        operations_validated=validated,
        events_enabled=config.events_enabled,
        message=f"Loaded {loaded} repositories",
    )


def validate_registrations(store: RegistrationStore) -> int:
    """Build a plan for every declared operation in a store.

    Plans built here are discarded; repository instances still resolve
    their own on first use.

    Returns:
        Number of operations planned.
    """
    planned = 0
    for identity in store.list_repositories():
        registration = store.lookup(identity)
        if registration is None:
            continue
        for operation in sorted(registration.operations):
            build_plan(registration, operation, identity)
            planned += 1
    return planned


__all__ = ["bootstrap_mediator", "validate_registrations"]
