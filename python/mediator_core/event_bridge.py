"""Lifecycle events for registrations and dispatch plans.

The RegistrationStore announces every registration change and each
ResolutionCache announces every plan it builds. Hosts listen through
the EventBridge, a pyee EventEmitter that stays silent until started.

Example:
    >>> from mediator_core import EventBridge
    >>>
    >>> bridge = EventBridge.instance()
    >>> bridge.start()
    >>>
    >>> @bridge.on_plan_resolved
    ... def report(identity, plan):
    ...     print(f"{identity.__name__}.{plan.operation_name}: {plan.describe()}")
    ...
    >>> UserRepository().find(1)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pyee.base import EventEmitter

from .logging import log_debug, log_info, log_trace

if TYPE_CHECKING:
    from .dispatch.plan import DispatchPlan
    from .registry.registration import Registration

RegistrationListener = Callable[[type, "Registration"], Any]
PlanListener = Callable[[type, "DispatchPlan"], Any]


class EventNames:
    """Event names published on the bridge.

    Attributes:
        REGISTRATION_UPDATED: (identity, Registration) after any store update.
        PLAN_RESOLVED: (identity, DispatchPlan) after first resolution.
    """

    REGISTRATION_UPDATED = "registration.updated"
    PLAN_RESOLVED = "plan.resolved"

    ALL = frozenset({REGISTRATION_UPDATED, PLAN_RESOLVED})


class EventBridge:
    """Process-wide emitter of registration and resolution events.

    Events are dropped while the bridge is stopped, which is the default,
    so publishing costs nothing until a host opts in.
    """

    _instance: EventBridge | None = None

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> EventBridge:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and forget the singleton. Primarily for tests."""
        if cls._instance is not None:
            cls._instance.stop()
        cls._instance = None

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if not self._active:
            self._active = True
            log_info("EventBridge started")

    def stop(self) -> None:
        """Stop delivering events and drop every listener."""
        if self._active:
            self._active = False
            self._emitter.remove_all_listeners()
            log_info("EventBridge stopped")

    def on_registration_updated(self, listener: RegistrationListener) -> RegistrationListener:
        """Listen for registration changes. Usable as a decorator."""
        return self.subscribe(EventNames.REGISTRATION_UPDATED, listener)

    def on_plan_resolved(self, listener: PlanListener) -> PlanListener:
        """Listen for resolved plans. Usable as a decorator."""
        return self.subscribe(EventNames.PLAN_RESOLVED, listener)

    def subscribe(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Add a listener for one of EventNames.

        Raises:
            ValueError: If the event is not a mediator event.
        """
        _check_event(event)
        self._emitter.on(event, listener)
        log_debug(f"Subscribed to {event}: {getattr(listener, '__name__', listener)!s}")
        return listener

    def unsubscribe(self, event: str, listener: Callable[..., Any]) -> None:
        _check_event(event)
        self._emitter.remove_listener(event, listener)

    def registration_updated(self, identity: type, registration: Registration) -> None:
        self.publish(EventNames.REGISTRATION_UPDATED, identity, registration)

    def plan_resolved(self, identity: type, plan: DispatchPlan) -> None:
        self.publish(EventNames.PLAN_RESOLVED, identity, plan)

    def publish(self, event: str, identity: type, payload: Any) -> None:
        """Deliver (identity, payload) to the event's listeners.

        Listener exceptions propagate to the publisher.
        """
        if not self._active:
            return
        log_trace(f"Publishing {event} for {identity.__name__}")
        self._emitter.emit(event, identity, payload)


def _check_event(event: str) -> None:
    if event not in EventNames.ALL:
        raise ValueError(f"Unknown event: {event!r}")


__all__ = ["EventBridge", "EventNames", "PlanListener", "RegistrationListener"]
