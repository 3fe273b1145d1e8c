"""
gimme: a type-and-label keyed service locator.

Register implementations against a contract type, optionally under a label,
then locate them by that contract:

    from gimme import Registry

    registry = Registry()
    registry.register(Logger, ConsoleLogger(), "console")
    registry.locate(Logger, "console")
"""

from __future__ import annotations

from gimme.config import RegistrySettings
from gimme.constructors import Constructor, resolve_constructor
from gimme.exceptions import (
    ConstructionFailedError,
    ConstructorNotFoundError,
    ContractMismatchError,
    DuplicateRegistrationError,
    RegistryError,
    ThreadConfinementError,
)
from gimme.key import Key
from gimme.registry import Provider, Registry, Strategy, get_registry, reset_registry

__version__ = "0.1.0"

__all__ = [
    # Registry
    "Registry",
    "Provider",
    "Strategy",
    "get_registry",
    "reset_registry",
    # Keys and construction
    "Key",
    "Constructor",
    "resolve_constructor",
    # Configuration
    "RegistrySettings",
    # Errors
    "RegistryError",
    "DuplicateRegistrationError",
    "ConstructorNotFoundError",
    "ConstructionFailedError",
    "ContractMismatchError",
    "ThreadConfinementError",
]
