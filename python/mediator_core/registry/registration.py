"""Registration record for a repository.

This module defines the Registration dataclass: the strategy, ordered
wrappers and declared operations for one repository identity. Records
are immutable; the store replaces them on every update.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .capabilities import WrapperCapabilities


@dataclass(frozen=True)
class Registration:
    """Configured strategy and wrappers for a repository.

    Attributes:
        strategy: Strategy class, or None if no backend was declared yet.
        wrappers: Wrapper classes in chain order.
        operations: Operation names the repository mediates.
        capabilities: Capabilities of each wrapper, computed at registration.

    Example:
        >>> registration = Registration(
        ...     strategy=SqlUsers,
        ...     wrappers=(Audit, Cache),
        ...     operations=frozenset({"find", "save"}),
        ... )
        >>> registration.is_configured()
        True
    """

    strategy: type | None = None
    wrappers: tuple[type, ...] = ()
    operations: frozenset[str] = frozenset()
    capabilities: dict[type, WrapperCapabilities] = field(
        default_factory=dict, compare=False, repr=False
    )

    def is_configured(self) -> bool:
        """Check if a strategy has been declared."""
        return self.strategy is not None

    def mediates(self, operation: str) -> bool:
        """Check if an operation name is declared for this repository."""
        return operation in self.operations

    def capabilities_for(self, wrapper_type: type) -> WrapperCapabilities:
        return self.capabilities.get(wrapper_type, WrapperCapabilities())

    def evolve(self, **changes: Any) -> Registration:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def describe(self) -> dict[str, Any]:
        """Get a printable summary for debugging.

        Returns:
            Dict with strategy, wrapper and operation names.
        """
        return {
            "strategy": self.strategy.__name__ if self.strategy else None,
            "wrappers": [w.__name__ for w in self.wrappers],
            "operations": sorted(self.operations),
        }
