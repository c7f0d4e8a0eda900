"""
mediator-core

Pluggable method interception for repositories. A repository declares
the operations it mediates; on first use each operation is resolved to
a registered strategy plus the wrappers that hook it, and the result is
bound on the instance so later calls skip resolution entirely.

Example:
    >>> from mediator_core import Repository, Wrapper
    >>>
    >>> class Echo:
    ...     def op(self, value):
    ...         return value
    ...
    >>> class Upper(Wrapper):
    ...     def before_op(self, value):
    ...         return value.upper()
    ...
    >>> class Exclaim(Wrapper):
    ...     def after_op(self, result, value):
    ...         return result + "!"
    ...
    >>> class Greeter(Repository):
    ...     mediates = ("op",)
    ...     strategy = Echo
    ...     wrappers = (Upper, Exclaim)
    ...
    >>> Greeter().op("hi")
    'HI!'
"""

from __future__ import annotations

from mediator_core.bootstrap import bootstrap_mediator, validate_registrations
from mediator_core.config import import_type, load_registration_file, parse_registration_file
from mediator_core.dispatch import (
    ChainExecutor,
    DispatchPlan,
    ResolutionCache,
    build_plan,
    execute_chain,
)
from mediator_core.event_bridge import EventBridge, EventNames
from mediator_core.exceptions import (
    ConfigurationError,
    MediatorError,
    NotConfigured,
    NotConfiguredError,
    RegistrationError,
    UnsupportedOperation,
    UnsupportedOperationError,
)
from mediator_core.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from mediator_core.registry import (
    Phase,
    Registration,
    RegistrationStore,
    Wrapper,
    WrapperCapabilities,
    capabilities_of,
)
from mediator_core.repository import Repository
from mediator_core.test_support import ensure_entry_points, with_strategy
from mediator_core.types import (
    BootstrapResult,
    LogContext,
    MediatorConfig,
    RegistrationEntry,
    RegistrationFile,
)

__version__ = "0.1.0"


def version() -> str:
    """Return the package version."""
    return __version__


__all__ = [
    "__version__",
    "version",
    # Front object
    "Repository",
    # Registration
    "Registration",
    "RegistrationStore",
    "Wrapper",
    "WrapperCapabilities",
    "Phase",
    "capabilities_of",
    # Dispatch
    "DispatchPlan",
    "build_plan",
    "ChainExecutor",
    "execute_chain",
    "ResolutionCache",
    # Errors
    "MediatorError",
    "NotConfiguredError",
    "NotConfigured",
    "UnsupportedOperationError",
    "UnsupportedOperation",
    "RegistrationError",
    "ConfigurationError",
    # Events
    "EventBridge",
    "EventNames",
    # Configuration
    "MediatorConfig",
    "RegistrationEntry",
    "RegistrationFile",
    "BootstrapResult",
    "LogContext",
    "bootstrap_mediator",
    "validate_registrations",
    "load_registration_file",
    "parse_registration_file",
    "import_type",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    # Test support
    "with_strategy",
    "ensure_entry_points",
]
