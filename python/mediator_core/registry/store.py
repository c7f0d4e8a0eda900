"""Registration store for repositories.

This module provides the RegistrationStore, which maps a repository
identity (its class) to the strategy, wrappers and operation names it
was configured with. Resolution reads from the store exactly once per
repository instance and operation name.

Example:
    >>> store = RegistrationStore.instance()
    >>> store.register(
    ...     UserRepository,
    ...     strategy=SqlUsers,
    ...     wrappers=[Audit, Cache],
    ...     operations=["find", "save"],
    ... )
    >>> store.lookup(UserRepository).describe()
    {'strategy': 'SqlUsers', 'wrappers': ['Audit', 'Cache'], 'operations': ['find', 'save']}
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any

from ..event_bridge import EventBridge
from ..exceptions import RegistrationError
from ..logging import log_debug, log_info, log_warn
from .capabilities import WrapperCapabilities, capabilities_of
from .registration import Registration


class RegistrationStore:
    """Thread-safe store of repository registrations.

    Implements a singleton for process-wide registration; independent
    stores can still be created and handed to repositories directly.
    Every update replaces the stored Registration with a new one, so
    readers never observe a partially applied change.
    """

    _instance: RegistrationStore | None = None

    def __init__(self) -> None:
        """Initialize an empty store.

        Prefer using RegistrationStore.instance() to get the singleton.
        """
        self._registrations: dict[type, Registration] = {}
        self._lock = threading.RLock()

    @classmethod
    def instance(cls) -> RegistrationStore:
        """Get the singleton store instance.

        Returns:
            The singleton RegistrationStore instance.

        Example:
            >>> assert RegistrationStore.instance() is RegistrationStore.instance()
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance.

        Primarily for tests, to get a clean store between test cases.
        """
        cls._instance = None

    def register(
        self,
        identity: type,
        strategy: type | None = None,
        wrappers: Iterable[type] = (),
        operations: Iterable[str] = (),
    ) -> Registration:
        """Create or replace the registration for a repository.

        Args:
            identity: Repository class.
            strategy: Strategy class, or None to register wrappers only.
            wrappers: Wrapper classes in chain order.
            operations: Operation names the repository mediates.

        Returns:
            The stored Registration.

        Raises:
            RegistrationError: If the strategy or a wrapper is invalid.
        """
        self._check_strategy(strategy)
        wrapper_tuple = tuple(wrappers)
        capabilities = self._capabilities(wrapper_tuple)
        registration = Registration(
            strategy=strategy,
            wrappers=wrapper_tuple,
            operations=self._check_operations(identity, operations),
            capabilities=capabilities,
        )

        with self._lock:
            if identity in self._registrations:
                log_warn(f"Overwriting existing registration: {_name(identity)}")
            self._registrations[identity] = registration

        log_info(
            f"Registered repository: {_name(identity)}",
            {"identity": _name(identity), **registration.describe()},
        )
        self._publish(identity, registration)
        return registration

    def register_default(
        self,
        identity: type,
        strategy: type | None = None,
        wrappers: Iterable[type] = (),
        operations: Iterable[str] = (),
    ) -> Registration:
        """Register a repository unless it already has a registration.

        Returns:
            The existing Registration, or the newly stored one.
        """
        with self._lock:
            current = self._registrations.get(identity)
            if current is not None:
                return current
            return self.register(identity, strategy, wrappers, operations)

    def delegate_to(self, identity: type, strategy: type | None) -> Registration:
        """Set the strategy for a repository.

        Args:
            identity: Repository class.
            strategy: Strategy class.

        Returns:
            The updated Registration.
        """
        self._check_strategy(strategy)
        return self._update(identity, strategy=strategy)

    def add_wrappers(self, identity: type, *wrappers: type) -> Registration:
        """Append wrappers to a repository's chain.

        Args:
            identity: Repository class.
            *wrappers: Wrapper classes, appended in the given order.

        Returns:
            The updated Registration.
        """
        new_capabilities = self._capabilities(wrappers)
        with self._lock:
            current = self._registrations.get(identity, Registration())
            capabilities = {**current.capabilities, **new_capabilities}
            return self._update(
                identity,
                wrappers=current.wrappers + tuple(wrappers),
                capabilities=capabilities,
            )

    def mediate(self, identity: type, *operations: str) -> Registration:
        """Declare operation names a repository mediates.

        Args:
            identity: Repository class.
            *operations: Operation names to add.

        Returns:
            The updated Registration.
        """
        added = self._check_operations(identity, operations)
        with self._lock:
            current = self._registrations.get(identity, Registration())
            return self._update(identity, operations=current.operations | added)

    def lookup(self, identity: type) -> Registration | None:
        """Look up the registration for a repository.

        Args:
            identity: Repository class.

        Returns:
            Registration or None if the repository was never registered.
        """
        return self._registrations.get(identity)

    def is_registered(self, identity: type) -> bool:
        return identity in self._registrations

    def unregister(self, identity: type) -> bool:
        """Remove a registration.

        Already resolved repository instances keep their bindings.

        Returns:
            True if a registration was removed, False if none existed.
        """
        with self._lock:
            if identity in self._registrations:
                del self._registrations[identity]
                log_debug(f"Unregistered repository: {_name(identity)}")
                return True
        return False

    def list_repositories(self) -> list[type]:
        return list(self._registrations.keys())

    def clear(self) -> None:
        """Remove all registrations. Primarily for testing."""
        with self._lock:
            self._registrations.clear()
        log_debug("Cleared all registrations")

    def __len__(self) -> int:
        return len(self._registrations)

    def _update(self, identity: type, **changes: Any) -> Registration:
        with self._lock:
            current = self._registrations.get(identity, Registration())
            registration = current.evolve(**changes)
            self._registrations[identity] = registration

        log_debug(
            f"Updated registration: {_name(identity)}",
            {"identity": _name(identity), **registration.describe()},
        )
        self._publish(identity, registration)
        return registration

    def _publish(self, identity: type, registration: Registration) -> None:
        EventBridge.instance().registration_updated(identity, registration)

    @staticmethod
    def _check_strategy(strategy: type | None) -> None:
        if strategy is not None and not isinstance(strategy, type):
            raise RegistrationError(f"Strategy must be a class, got {strategy!r}")

    @staticmethod
    def _check_operations(identity: type, operations: Iterable[str]) -> frozenset[str]:
        checked = frozenset(operations)
        for operation in checked:
            if not isinstance(operation, str) or not operation.isidentifier():
                raise RegistrationError(f"Invalid operation name: {operation!r}")
            if operation.startswith("_"):
                raise RegistrationError(f"Operation names must be public: {operation!r}")
            # A class attribute would shadow the bound entry point, or be
            # shadowed by it once resolved.
            if hasattr(identity, operation):
                raise RegistrationError(
                    f"Operation {operation!r} collides with attribute "
                    f"{_name(identity)}.{operation}"
                )
        return checked

    @staticmethod
    def _capabilities(wrappers: Iterable[type]) -> dict[type, WrapperCapabilities]:
        return {wrapper: capabilities_of(wrapper) for wrapper in wrappers}


def _name(identity: Any) -> str:
    return getattr(identity, "__name__", repr(identity))


__all__ = ["RegistrationStore"]
