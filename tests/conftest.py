"""pytest configuration and fixtures for mediator_core tests.

Provides a fresh RegistrationStore and EventBridge for every test, plus
a cleared hook call log from the sample fixtures.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

from tests.fixtures.sample_repositories import CALL_LOG, reset_call_log

if TYPE_CHECKING:
    from mediator_core import EventBridge, RegistrationStore


@pytest.fixture(autouse=True)
def clean_singletons() -> Generator[None, None, None]:
    """Reset the store and event bridge singletons around every test."""
    from mediator_core import EventBridge, RegistrationStore

    RegistrationStore.reset_instance()
    EventBridge.reset_instance()
    yield
    RegistrationStore.reset_instance()
    EventBridge.reset_instance()


@pytest.fixture(autouse=True)
def restore_log_level() -> Generator[None, None, None]:
    """Undo log level changes made by configure_logging()."""
    logger = logging.getLogger("mediator_core")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def registration_store() -> RegistrationStore:
    """Provide the (freshly reset) singleton store."""
    from mediator_core import RegistrationStore

    return RegistrationStore.instance()


@pytest.fixture
def event_bridge() -> Generator[EventBridge, None, None]:
    """Provide a started EventBridge, stopped after the test."""
    from mediator_core import EventBridge

    bridge = EventBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()


@pytest.fixture
def call_log() -> Generator[list[str], None, None]:
    """Provide the shared hook call log, cleared before and after the test."""
    reset_call_log()
    yield CALL_LOG
    reset_call_log()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow running",
    )
