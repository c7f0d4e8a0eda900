"""Repository base class.

A Repository does not implement its operations. Each declared operation
is resolved on first access into an entry point that calls the
registered strategy, wrapped by any registered wrappers, and the entry
point is then bound on the instance so later lookups are ordinary
attribute access.

Example:
    >>> class UserRepository(Repository):
    ...     mediates = ("find", "save")
    ...     strategy = SqlUsers
    ...     wrappers = (Audit, Cache)
    ...
    >>> users = UserRepository()
    >>> users.supports("find")
    True
    >>> users.find(42)
    {'id': 42, 'name': 'Ada'}
    >>> users.delete(42)
    Traceback (most recent call last):
    ...
    UnsupportedOperationError: 'UserRepository' does not mediate operation 'delete'

Registration can also be done through the store directly:
    >>> RegistrationStore.instance().register(
    ...     UserRepository, strategy=SqlUsers, operations=["find"]
    ... )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from .dispatch.cache import ResolutionCache
from .dispatch.plan import DispatchPlan
from .exceptions import UnsupportedOperationError
from .registry.registration import Registration
from .registry.store import RegistrationStore

_STORE_ATTR = "_mediator_store"
_CACHE_ATTR = "_mediator_cache"
_DECLARED_ATTRS = ("mediates", "strategy", "wrappers")


class Repository:
    """Base class for mediated repositories.

    Class Attributes:
        mediates: Operation names to declare at class creation.
        strategy: Strategy class to declare at class creation.
        wrappers: Wrapper classes to declare at class creation.

    The class is the repository identity; every instance resolves its
    operations independently and keeps them for its whole lifetime.
    """

    mediates: ClassVar[tuple[str, ...]] = ()
    strategy: ClassVar[type | None] = None
    wrappers: ClassVar[tuple[type, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.has_declarations():
            cls.register_with(RegistrationStore.instance())

    @classmethod
    def has_declarations(cls) -> bool:
        """Check if the class itself sets mediates, strategy or wrappers."""
        return any(cls.__dict__.get(attr) for attr in _DECLARED_ATTRS)

    @classmethod
    def register_with(cls, store: RegistrationStore) -> Registration:
        """Register the class-level declarations in a store.

        Args:
            store: Store to register into.

        Returns:
            The stored Registration.
        """
        return store.register(cls, **cls._declarations())

    @classmethod
    def _declarations(cls) -> dict[str, Any]:
        return {
            "strategy": cls.__dict__.get("strategy"),
            "wrappers": cls.__dict__.get("wrappers", ()),
            "operations": cls.__dict__.get("mediates", ()),
        }

    def __init__(self, store: RegistrationStore | None = None) -> None:
        """Initialize the repository.

        Args:
            store: Registration store to resolve from. Defaults to the
                process-wide RegistrationStore singleton.
        """
        if store is not None:
            self.__dict__[_STORE_ATTR] = store

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or not self.supports(name):
            raise UnsupportedOperationError(type(self), name)

        entry_point = self._resolution_cache().entry_point(name)
        self.__dict__[name] = entry_point
        return entry_point

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.supported_operations()))

    def supports(self, operation: str) -> bool:
        """Check if an operation is declared, without resolving it.

        Args:
            operation: Operation name.

        Returns:
            True if the repository's registration declares the operation.
        """
        registration = self.registration()
        return registration is not None and registration.mediates(operation)

    def supported_operations(self) -> list[str]:
        """List declared operation names, without resolving any of them."""
        registration = self.registration()
        return sorted(registration.operations) if registration else []

    def invoke(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """Call an operation by name.

        Args:
            operation: Operation name.
            *args: Positional arguments for the operation.
            **kwargs: Keyword arguments for the operation.

        Returns:
            The operation's return value.

        Raises:
            UnsupportedOperationError: If the operation is not declared.
        """
        return self.entry_point(operation)(*args, **kwargs)

    def entry_point(self, operation: str) -> Callable[..., Any]:
        """Get the bound entry point for an operation, resolving it if needed."""
        entry = self.__dict__.get(operation)
        if entry is None:
            entry = self.__getattr__(operation)
        return entry

    def warm_up(self) -> list[str]:
        """Resolve and bind every declared operation now.

        Use before sharing an instance between threads.

        Returns:
            Names of the resolved operations.
        """
        operations = self.supported_operations()
        for operation in operations:
            self.entry_point(operation)
        return operations

    def resolved_operations(self) -> list[str]:
        return self._resolution_cache().resolved_operations()

    def dispatch_plan(self, operation: str) -> DispatchPlan | None:
        """Get the plan an operation was resolved with, or None if unresolved."""
        return self._resolution_cache().plan_for(operation)

    def reset_bindings(self) -> None:
        """Drop every bound entry point and cached plan of this instance.

        Only meant for test support; resolved operations are otherwise
        permanent.
        """
        cache = self.__dict__.get(_CACHE_ATTR)
        if cache is None:
            return
        for operation in cache.resolved_operations():
            self.__dict__.pop(operation, None)
        cache.clear()

    def registration_store(self) -> RegistrationStore:
        """Return the store this repository resolves from."""
        store = self.__dict__.get(_STORE_ATTR)
        return store if store is not None else RegistrationStore.instance()

    def registration(self) -> Registration | None:
        """Get the registration this repository resolves from.

        A class with its own declarations is registered into the store on
        first lookup if the store has no entry for it, so declarations
        survive a cleared store and apply to explicitly passed stores.
        Entries already in the store take precedence.
        """
        cls = type(self)
        store = self.registration_store()
        registration = store.lookup(cls)
        if registration is None and cls.has_declarations():
            registration = store.register_default(cls, **cls._declarations())
        return registration

    def _resolution_cache(self) -> ResolutionCache:
        cache = self.__dict__.get(_CACHE_ATTR)
        if cache is None:
            cache = self.__dict__.setdefault(
                _CACHE_ATTR, ResolutionCache(type(self), self.registration_store())
            )
        return cache

    def __repr__(self) -> str:
        resolved = ", ".join(self.resolved_operations())
        return f"{type(self).__name__}(resolved=[{resolved}])"
