"""Per-repository resolution cache.

The ResolutionCache builds the DispatchPlan for an operation the first
time it is requested and turns it into an entry point: a plain callable
that either forwards straight to a fresh strategy instance (no wrapper
participates) or runs the interceptor chain around it. Entry points are
memoized for the life of the cache and never rebuilt.

Example:
    >>> cache = ResolutionCache(UserRepository, RegistrationStore.instance())
    >>> find = cache.entry_point("find")
    >>> find(42)
    {'id': 42}
    >>> cache.entry_point("find") is find
    True
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from ..event_bridge import EventBridge
from ..logging import log_debug
from ..registry.store import RegistrationStore
from .executor import ChainExecutor
from .plan import DispatchPlan, build_plan


class ResolutionCache:
    """Memoized plans and entry points for one repository instance.

    First resolution of an operation is serialized by a lock; lookups of
    already resolved operations do not take it.

    Attributes:
        identity: Repository class the cache resolves for.
        store: Registration store consulted on first resolution.
    """

    def __init__(
        self,
        identity: type,
        store: RegistrationStore | None = None,
        executor: ChainExecutor | None = None,
    ) -> None:
        self.identity = identity
        self.store = store if store is not None else RegistrationStore.instance()
        self._executor = executor or ChainExecutor()
        self._plans: dict[str, DispatchPlan] = {}
        self._entry_points: dict[str, Callable[..., Any]] = {}
        self._lock = threading.Lock()

    def entry_point(self, operation: str) -> Callable[..., Any]:
        """Get the entry point for an operation, resolving it on first use.

        Args:
            operation: Operation name.

        Returns:
            Callable with the strategy method's call shape.

        Raises:
            NotConfiguredError: If the repository has no strategy.
        """
        entry = self._entry_points.get(operation)
        if entry is not None:
            return entry

        with self._lock:
            entry = self._entry_points.get(operation)
            if entry is not None:
                return entry

            plan = build_plan(self.store.lookup(self.identity), operation, self.identity)
            entry = self._build_entry_point(plan)
            self._plans[operation] = plan
            self._entry_points[operation] = entry

        log_debug(
            f"Resolved {self.identity.__name__}.{operation}",
            {"repository": self.identity.__name__, **plan.describe()},
        )
        EventBridge.instance().plan_resolved(self.identity, plan)
        return entry

    def plan_for(self, operation: str) -> DispatchPlan | None:
        """Get the plan of an already resolved operation, without resolving."""
        return self._plans.get(operation)

    def resolved_operations(self) -> list[str]:
        return list(self._entry_points)

    def is_resolved(self, operation: str) -> bool:
        return operation in self._entry_points

    def clear(self) -> None:
        """Forget every resolved plan. Used by test support only."""
        with self._lock:
            self._plans.clear()
            self._entry_points.clear()

    def _build_entry_point(self, plan: DispatchPlan) -> Callable[..., Any]:
        if plan.is_shortcut:
            return self._shortcut_entry_point(plan)
        return self._full_entry_point(plan)

    def _shortcut_entry_point(self, plan: DispatchPlan) -> Callable[..., Any]:
        backend = plan.backend
        operation = plan.operation_name

        def entry_point(*args: Any, **kwargs: Any) -> Any:
            return getattr(backend(), operation)(*args, **kwargs)

        return self._name_entry_point(entry_point, operation)

    def _full_entry_point(self, plan: DispatchPlan) -> Callable[..., Any]:
        backend = plan.backend
        operation = plan.operation_name
        execute = self._executor.execute
        qualname = f"{self.identity.__name__}.{operation}"

        def backend_call(call_args: Any) -> Any:
            return getattr(backend(), operation)(call_args)

        # Hooks receive one payload, so the call must supply exactly one.
        def entry_point(*args: Any, **kwargs: Any) -> Any:
            if len(args) != 1 or kwargs:
                raise TypeError(
                    f"{qualname}() is intercepted by wrappers and takes a single "
                    f"positional argument payload ({len(args)} positional, "
                    f"{len(kwargs)} keyword given)"
                )
            return execute(plan, args[0], backend_call)

        return self._name_entry_point(entry_point, operation)

    def _name_entry_point(
        self, entry_point: Callable[..., Any], operation: str
    ) -> Callable[..., Any]:
        entry_point.__name__ = operation
        entry_point.__qualname__ = f"{self.identity.__name__}.{operation}"
        return entry_point
