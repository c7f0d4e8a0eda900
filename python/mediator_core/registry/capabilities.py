"""Declared interceptor capabilities.

A wrapper states which operations it intercepts and in which phase.
Capabilities are computed once per wrapper type, when the type is
created (Wrapper subclasses) or registered (plain classes), and the
plan builder filters wrappers by them instead of inspecting methods on
every resolution.

Example:
    >>> class Audit(Wrapper):
    ...     def before_save(self, record):
    ...         self.started = time.monotonic()
    ...         return record
    ...
    ...     def after_save(self, result, record):
    ...         log_info("saved", {"elapsed": time.monotonic() - self.started})
    ...         return result
    ...
    >>> capabilities_of(Audit).intercepts(Phase.AFTER, "save")
    True

Explicit declaration (hooks must still exist):
    >>> class Normalize(Wrapper):
    ...     intercepts = {"save": ("before",), "update": ("before",)}
    ...
    ...     def before_save(self, record): ...
    ...     def before_update(self, record): ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from ..exceptions import RegistrationError


class Phase(str, Enum):
    """Interception phase."""

    BEFORE = "before"
    """Hook runs before the strategy and may transform the arguments."""

    AFTER = "after"
    """Hook runs after the strategy and may transform the return value."""

    def hook_name(self, operation: str) -> str:
        """Return the hook method name for an operation.

        Example:
            >>> Phase.BEFORE.hook_name("find")
            'before_find'
        """
        return f"{self.value}_{operation}"


@dataclass(frozen=True)
class WrapperCapabilities:
    """Operations a wrapper type intercepts, per phase."""

    before: frozenset[str] = field(default_factory=frozenset)
    after: frozenset[str] = field(default_factory=frozenset)

    def intercepts(self, phase: Phase, operation: str) -> bool:
        if phase is Phase.BEFORE:
            return operation in self.before
        return operation in self.after

    @property
    def operations(self) -> frozenset[str]:
        return self.before | self.after

    def to_mapping(self) -> dict[str, tuple[str, ...]]:
        """Return the capabilities in ``intercepts`` declaration form."""
        mapping: dict[str, tuple[str, ...]] = {}
        for operation in sorted(self.operations):
            phases = tuple(p.value for p in Phase if self.intercepts(p, operation))
            mapping[operation] = phases
        return mapping


def derive_capabilities(wrapper_type: type) -> WrapperCapabilities:
    """Derive capabilities from the ``before_*``/``after_*`` methods of a type.

    Args:
        wrapper_type: Wrapper class to inspect.

    Returns:
        WrapperCapabilities listing every hooked operation.
    """
    before: set[str] = set()
    after: set[str] = set()
    for attr in dir(wrapper_type):
        for phase, bucket in ((Phase.BEFORE, before), (Phase.AFTER, after)):
            prefix = f"{phase.value}_"
            if not attr.startswith(prefix) or len(attr) == len(prefix):
                continue
            if callable(getattr(wrapper_type, attr, None)):
                bucket.add(attr[len(prefix):])
    return WrapperCapabilities(before=frozenset(before), after=frozenset(after))


def declared_capabilities(
    wrapper_type: type,
    declaration: dict[str, Any],
) -> WrapperCapabilities:
    """Build capabilities from an explicit ``intercepts`` declaration.

    Args:
        wrapper_type: Wrapper class that made the declaration.
        declaration: Mapping of operation name to a phase or phases.

    Returns:
        Validated WrapperCapabilities.

    Raises:
        RegistrationError: If a phase is unknown or a declared hook is missing.
    """
    before: set[str] = set()
    after: set[str] = set()
    for operation, phases in declaration.items():
        if isinstance(phases, (str, Phase)):
            phases = (phases,)
        for raw_phase in phases:
            try:
                phase = Phase(raw_phase)
            except ValueError:
                raise RegistrationError(
                    f"{wrapper_type.__name__} declares unknown phase "
                    f"'{raw_phase}' for '{operation}'"
                ) from None
            hook = phase.hook_name(operation)
            if not callable(getattr(wrapper_type, hook, None)):
                raise RegistrationError(
                    f"{wrapper_type.__name__} declares '{operation}' ({phase.value}) "
                    f"but does not implement {hook}()"
                )
            (before if phase is Phase.BEFORE else after).add(operation)
    return WrapperCapabilities(before=frozenset(before), after=frozenset(after))


class Wrapper:
    """Optional base class for wrappers.

    Subclasses may declare ``intercepts``; otherwise it is derived from
    their hook methods. Either way the result is validated and stored on
    the class as ``__capabilities__`` when the class is created.

    A fresh instance is created for every mediated call, so instance
    attributes set in a before hook are visible to the after hook of the
    same call and to nothing else.
    """

    intercepts: ClassVar[dict[str, Any] | None] = None
    __capabilities__: ClassVar[WrapperCapabilities] = WrapperCapabilities()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declaration = cls.__dict__.get("intercepts")
        if declaration is not None:
            cls.__capabilities__ = declared_capabilities(cls, declaration)
        else:
            cls.__capabilities__ = derive_capabilities(cls)


def capabilities_of(wrapper_type: type) -> WrapperCapabilities:
    """Return the capabilities of a wrapper type.

    Wrapper subclasses answer from the value computed at class creation;
    any other class is inspected.

    Raises:
        RegistrationError: If wrapper_type is not a class.
    """
    if not isinstance(wrapper_type, type):
        raise RegistrationError(f"Wrapper must be a class, got {wrapper_type!r}")
    if issubclass(wrapper_type, Wrapper):
        return wrapper_type.__capabilities__
    return derive_capabilities(wrapper_type)


__all__ = [
    "Phase",
    "Wrapper",
    "WrapperCapabilities",
    "capabilities_of",
    "declared_capabilities",
    "derive_capabilities",
]
