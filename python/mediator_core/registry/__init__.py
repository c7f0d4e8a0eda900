"""Repository registration.

This package provides the registration store and the declared
capabilities of wrappers:

- RegistrationStore: identity -> Registration (strategy, wrappers, operations)
- Registration: immutable registration record
- Wrapper / Phase / WrapperCapabilities: which operations a wrapper hooks,
  and in which phase

Example:
    from mediator_core.registry import RegistrationStore, Wrapper

    class Audit(Wrapper):
        def before_save(self, record):
            return record

    RegistrationStore.instance().register(
        UserRepository, strategy=SqlUsers, wrappers=[Audit], operations=["save"]
    )
"""

from __future__ import annotations

from .capabilities import (
    Phase,
    Wrapper,
    WrapperCapabilities,
    capabilities_of,
    declared_capabilities,
    derive_capabilities,
)
from .registration import Registration
from .store import RegistrationStore

__all__ = [
    "Registration",
    "RegistrationStore",
    "Phase",
    "Wrapper",
    "WrapperCapabilities",
    "capabilities_of",
    "declared_capabilities",
    "derive_capabilities",
]
