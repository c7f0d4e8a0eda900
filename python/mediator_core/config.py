"""YAML registration files.

This module loads repository registrations from YAML so wiring can live
in configuration rather than code. Class references are dotted import
paths resolved with importlib.

Example registration file:

    repositories:
      - repository: myapp.repos.UserRepository
        strategy: myapp.backends.SqlUsers
        wrappers:
          - myapp.wrappers.Audit
          - myapp.wrappers.Cache
        operations: [find, save]

Example:
    >>> count = load_registration_file("config/repositories.yaml")
    >>> print(f"Registered {count} repositories")
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .logging import log_debug, log_info
from .registry.store import RegistrationStore
from .types import RegistrationEntry, RegistrationFile


def import_type(path: str) -> type:
    """Import a class from a ``module.path.ClassName`` string.

    Args:
        path: Full class path.

    Returns:
        The class.

    Raises:
        ConfigurationError: If the module or attribute cannot be imported
            or is not a class.
    """
    module_path, _, class_name = path.rpartition(".")
    if not module_path or not class_name:
        raise ConfigurationError(f"Not a class path: '{path}'")

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_path}': {e}") from e

    obj = getattr(module, class_name, None)
    if obj is None:
        raise ConfigurationError(f"Module '{module_path}' has no attribute '{class_name}'")
    if not isinstance(obj, type):
        raise ConfigurationError(f"'{path}' is not a class")
    return obj


def parse_registration_file(path: str | Path) -> RegistrationFile:
    """Read and validate a YAML registration file without registering anything.

    Args:
        path: Path to the YAML file.

    Returns:
        The validated RegistrationFile.

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, or
            does not match the expected structure.
    """
    file_path = Path(path)
    try:
        with file_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Registration file not found: {file_path}") from None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

    try:
        return RegistrationFile.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid registration file {file_path}: {e}") from e


def apply_registration(entry: RegistrationEntry, store: RegistrationStore) -> type:
    """Import the classes of one entry and register them.

    Args:
        entry: Validated registration entry.
        store: Store to register into.

    Returns:
        The repository class.
    """
    repository = import_type(entry.repository)
    strategy = import_type(entry.strategy) if entry.strategy else None
    wrappers = [import_type(wrapper) for wrapper in entry.wrappers]
    store.register(
        repository,
        strategy=strategy,
        wrappers=wrappers,
        operations=entry.operations,
    )
    log_debug(f"Applied registration for {entry.repository}")
    return repository


def load_registration_file(
    path: str | Path,
    store: RegistrationStore | None = None,
) -> int:
    """Load a YAML registration file into a store.

    Args:
        path: Path to the YAML file.
        store: Store to register into; defaults to the singleton.

    Returns:
        Number of repositories registered.

    Raises:
        ConfigurationError: If the file or any class path is invalid.
    """
    target = store if store is not None else RegistrationStore.instance()
    registration_file = parse_registration_file(path)

    for entry in registration_file.repositories:
        apply_registration(entry, target)

    count = len(registration_file.repositories)
    log_info(f"Loaded {count} repository registrations from {path}")
    return count


__all__ = [
    "import_type",
    "parse_registration_file",
    "apply_registration",
    "load_registration_file",
]
