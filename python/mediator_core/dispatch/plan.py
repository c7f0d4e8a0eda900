"""Dispatch plan and plan builder.

A DispatchPlan describes how one operation of one repository is
executed: which strategy runs it and which wrappers hook it before and
after. Plans are built once per repository instance and operation name
and never change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import NotConfiguredError
from ..registry.capabilities import Phase
from ..registry.registration import Registration


@dataclass(frozen=True)
class DispatchPlan:
    """Resolved execution description for one operation.

    Attributes:
        operation_name: Mediated operation name.
        backend: Strategy class instantiated for every call.
        before_interceptors: Wrappers with a before hook, in registration order.
        after_interceptors: Wrappers with an after hook, in registration order.
            They execute in reverse, see ``after_chain``.

    Example:
        >>> plan = DispatchPlan("find", SqlUsers, (Audit,), (Audit, Cache))
        >>> [w.__name__ for w in plan.after_chain]
        ['Cache', 'Audit']
    """

    operation_name: str
    backend: type
    before_interceptors: tuple[type, ...] = ()
    after_interceptors: tuple[type, ...] = ()

    @property
    def before_method_name(self) -> str:
        return Phase.BEFORE.hook_name(self.operation_name)

    @property
    def after_method_name(self) -> str:
        return Phase.AFTER.hook_name(self.operation_name)

    @property
    def after_chain(self) -> tuple[type, ...]:
        """After interceptors in execution order (last registered first)."""
        return tuple(reversed(self.after_interceptors))

    @property
    def interceptor_types(self) -> tuple[type, ...]:
        """Distinct participating wrapper types, in registration order."""
        seen: dict[type, None] = dict.fromkeys(self.before_interceptors)
        for wrapper in self.after_interceptors:
            seen.setdefault(wrapper, None)
        return tuple(seen)

    @property
    def skip_before_interceptors(self) -> bool:
        return not self.before_interceptors

    @property
    def skip_after_interceptors(self) -> bool:
        return not self.after_interceptors

    @property
    def is_shortcut(self) -> bool:
        """True when no wrapper participates in this operation."""
        return self.skip_before_interceptors and self.skip_after_interceptors

    def describe(self) -> dict[str, Any]:
        return {
            "operation": self.operation_name,
            "backend": self.backend.__name__,
            "before": [w.__name__ for w in self.before_interceptors],
            "after": [w.__name__ for w in self.after_chain],
            "shortcut": self.is_shortcut,
        }


def build_plan(
    registration: Registration | None,
    operation_name: str,
    repository: Any = None,
) -> DispatchPlan:
    """Build the dispatch plan for an operation.

    Wrappers are kept only if their declared capabilities hook this
    operation in the given phase; relative order is preserved.

    Args:
        registration: Registration of the repository, or None if absent.
        operation_name: Operation to plan.
        repository: Repository identity, used for error reporting.

    Returns:
        The DispatchPlan.

    Raises:
        NotConfiguredError: If there is no registration or it has no strategy.
    """
    if registration is None or registration.strategy is None:
        raise NotConfiguredError(repository)

    before = tuple(
        wrapper
        for wrapper in registration.wrappers
        if registration.capabilities_for(wrapper).intercepts(Phase.BEFORE, operation_name)
    )
    after = tuple(
        wrapper
        for wrapper in registration.wrappers
        if registration.capabilities_for(wrapper).intercepts(Phase.AFTER, operation_name)
    )
    return DispatchPlan(
        operation_name=operation_name,
        backend=registration.strategy,
        before_interceptors=before,
        after_interceptors=after,
    )
