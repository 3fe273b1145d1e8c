"""
Type-and-label keyed object registry.

Implementations are registered against a contract type (optionally under a
label) and later located by that contract without the caller knowing how
they are built.

Three registration strategies are supported:

- instance:  a pre-built object, returned as-is on every lookup
- singleton: built once at registration time, returned on every lookup
- factory:   built anew on every lookup from stored arguments

Example:
    registry = Registry()
    registry.register_with_name(Logger, FileLogger, "file", "/var/log/app.log")
    registry.register_as_factory(Connection, SqliteConnection, ":memory:")

    log = registry.locate(Logger, "file")
    conn = registry.locate(Connection)   # new connection each time

Note:
    ``locate_all`` and ``all_registered_types`` invoke every provider they
    visit. Factory entries therefore build a fresh instance per enumeration.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, TypeVar

from gimme.config import RegistrySettings
from gimme.constructors import resolve_constructor
from gimme.exceptions import (
    ConstructionFailedError,
    ContractMismatchError,
    DuplicateRegistrationError,
    RegistryError,
    ThreadConfinementError,
)
from gimme.key import Key
from gimme.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Strategy(Enum):
    """How a provider produces its instance."""

    INSTANCE = "instance"
    SINGLETON = "singleton"
    FACTORY = "factory"


def _constant(value: Any) -> Any:
    return value


def _build(provider: Callable[[], Any]) -> Any:
    try:
        return provider()
    except Exception as exc:
        raise ConstructionFailedError(provider, exc) from exc


@dataclass(frozen=True)
class Provider:
    """Zero-argument production rule stored for one key."""

    strategy: Strategy
    produce: Callable[[], Any]

    def __call__(self) -> Any:
        return self.produce()


def qualified_name(t: type) -> str:
    """``module.QualName`` for a runtime type."""
    module = getattr(t, "__module__", None)
    name = getattr(t, "__qualname__", t.__name__)
    if module in (None, "builtins"):
        return name
    return f"{module}.{name}"


class Registry:
    """
    Thread-safe registry mapping ``Key -> Provider``.

    By default every operation runs under a re-entrant lock. With
    ``RegistrySettings(thread_safe=False)`` the registry is instead confined
    to the thread that created it and raises ThreadConfinementError when
    touched from any other thread.

    Providers are looked up under the lock and invoked after it is released,
    except during registration where the singleton constructor runs while the
    lock is held.
    """

    def __init__(self, settings: RegistrySettings | None = None):
        """
        Initialize an empty registry.

        Args:
            settings: Behavioural switches (defaults when omitted)
        """
        self.settings = settings or RegistrySettings()
        self._known: dict[Key, Provider] = {}
        self._lock = threading.RLock()
        self._owner = threading.current_thread()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _guard(self) -> Iterator[None]:
        if self.settings.thread_safe:
            with self._lock:
                yield
            return
        current = threading.current_thread()
        if current is not self._owner:
            raise ThreadConfinementError(self._owner.name, current.name)
        yield

    @contextmanager
    def _registering(self, key: Key, strategy: Strategy) -> Iterator[None]:
        with self._guard():
            try:
                if key in self._known:
                    raise DuplicateRegistrationError(key)
                yield
            except RegistryError as exc:
                logger.warning(
                    "registration_rejected",
                    key=key.description,
                    strategy=strategy.value,
                    error=exc.__class__.__name__,
                )
                raise

    def _check_contract(self, abstract_type: Any, impl_type: type) -> None:
        if not self.settings.validate_contracts or not isinstance(abstract_type, type):
            return
        try:
            assignable = issubclass(impl_type, abstract_type)
        except TypeError:
            # Non runtime-checkable protocols cannot be verified
            return
        if not assignable:
            raise ContractMismatchError(abstract_type, impl_type)

    def _add(self, key: Key, provider: Provider) -> None:
        # A constructor may have registered the same key re-entrantly
        if key in self._known:
            raise DuplicateRegistrationError(key)
        self._known[key] = provider
        logger.debug("registered", key=key.description, strategy=provider.strategy.value)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, abstract_type: type[T], instance: T, label: str | None = None) -> None:
        """
        Register an already-built instance.

        Args:
            abstract_type: Contract the instance is located by
            instance: Object returned by every lookup
            label: Optional discriminator

        Raises:
            DuplicateRegistrationError: If the key is already registered
            ContractMismatchError: If the instance does not satisfy the contract
        """
        key = Key(abstract_type, label)
        with self._registering(key, Strategy.INSTANCE):
            self._check_contract(abstract_type, type(instance))
            self._add(key, Provider(Strategy.INSTANCE, partial(_constant, instance)))

    def register_with_name(
        self,
        abstract_type: type[T],
        impl_type: type,
        label: str | None,
        *constructor_args: Any,
    ) -> None:
        """
        Build ``impl_type`` now and register the result as a singleton.

        The constructor is chosen by argument count (see
        ``gimme.constructors``) and invoked immediately, so every lookup
        returns the same object.

        Raises:
            DuplicateRegistrationError: If the key is already registered
            ContractMismatchError: If ``impl_type`` does not satisfy the contract
            ConstructorNotFoundError: If no constructor takes that many arguments
            ConstructionFailedError: If the constructor raised
        """
        key = Key(abstract_type, label)
        with self._registering(key, Strategy.SINGLETON):
            self._check_contract(abstract_type, impl_type)
            ctor = resolve_constructor(impl_type, len(constructor_args))
            obj = ctor.invoke(constructor_args)
            self._add(key, Provider(Strategy.SINGLETON, partial(_constant, obj)))

    def register_as_factory_with_name(
        self,
        abstract_type: type[T],
        impl_type: type,
        label: str | None,
        *constructor_args: Any,
    ) -> None:
        """
        Register ``impl_type`` to be built anew on every lookup.

        The constructor is resolved now; the same ``constructor_args`` are
        passed to it on each lookup.

        Raises:
            DuplicateRegistrationError: If the key is already registered
            ContractMismatchError: If ``impl_type`` does not satisfy the contract
            ConstructorNotFoundError: If no constructor takes that many arguments
        """
        key = Key(abstract_type, label)
        with self._registering(key, Strategy.FACTORY):
            self._check_contract(abstract_type, impl_type)
            ctor = resolve_constructor(impl_type, len(constructor_args))
            self._add(key, Provider(Strategy.FACTORY, partial(ctor.invoke, tuple(constructor_args))))

    def register_type(self, abstract_type: type[T], impl_type: type, *constructor_args: Any) -> None:
        """``register_with_name`` without a label."""
        self.register_with_name(abstract_type, impl_type, None, *constructor_args)

    def register_as_factory(self, abstract_type: type[T], impl_type: type, *constructor_args: Any) -> None:
        """``register_as_factory_with_name`` without a label."""
        self.register_as_factory_with_name(abstract_type, impl_type, None, *constructor_args)

    def register_provider(
        self,
        abstract_type: type[T],
        provider: Callable[[], T],
        label: str | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """
        Register an explicit factory callable.

        Args:
            abstract_type: Contract the result is located by
            provider: Zero-argument callable building the instance
            label: Optional discriminator
            singleton: Call ``provider`` once now instead of on every lookup

        Raises:
            DuplicateRegistrationError: If the key is already registered
            ContractMismatchError: If a singleton result does not satisfy the contract
            ConstructionFailedError: If ``provider`` raised (at registration for
                singletons, at lookup otherwise)
        """
        if not callable(provider):
            raise TypeError(f"provider must be callable, got {provider!r}")
        strategy = Strategy.SINGLETON if singleton else Strategy.FACTORY
        key = Key(abstract_type, label)
        with self._registering(key, strategy):
            if singleton:
                obj = _build(provider)
                self._check_contract(abstract_type, type(obj))
                self._add(key, Provider(strategy, partial(_constant, obj)))
            else:
                self._add(key, Provider(strategy, partial(_build, provider)))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has_a(self, abstract_type: Any, label: str | None = None) -> bool:
        """Check whether ``(abstract_type, label)`` is registered."""
        key = Key(abstract_type, label)
        with self._guard():
            return key in self._known

    def locate(self, abstract_type: type[T], label: str | None = None) -> T | None:
        """
        Locate the instance registered for a contract.

        Returns:
            The provider's instance, or None when nothing is registered
        """
        return self.locate_by_type(abstract_type, label)

    def locate_by_type(self, type_: Any, label: str | None = None) -> Any:
        """Like ``locate`` for a type only known at runtime."""
        key = Key(type_, label)
        with self._guard():
            provider = self._known.get(key)
        if provider is None:
            return None
        return provider()

    def locate_all(self, abstract_type: type[T]) -> list[tuple[str, T]]:
        """
        Locate every entry whose contract is assignable to ``abstract_type``.

        Every matching provider is invoked, so factory entries build a new
        instance as part of the enumeration. Order follows registration order.

        Returns:
            List of ``(label, instance)`` pairs
        """
        with self._guard():
            matches = [(k, p) for k, p in self._known.items() if k.is_assignable_to(abstract_type)]
        return [(key.label, provider()) for key, provider in matches]

    def all_registered_types(self) -> list[tuple[str, str]]:
        """
        Describe every entry.

        Invokes every provider (see ``locate_all``).

        Returns:
            List of ``(key description, runtime type name)`` pairs
        """
        with self._guard():
            entries = list(self._known.items())
        return [(key.description, qualified_name(type(provider()))) for key, provider in entries]

    def keys(self) -> list[Key]:
        """Snapshot of registered keys."""
        with self._guard():
            return list(self._known)

    def __len__(self) -> int:
        with self._guard():
            return len(self._known)

    def __contains__(self, key: object) -> bool:
        with self._guard():
            return key in self._known

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    def remove(self, abstract_type: Any, label: str | None = None) -> None:
        """Remove exactly ``(abstract_type, label)``; missing keys are ignored."""
        key = Key(abstract_type, label)
        with self._guard():
            if self._known.pop(key, None) is not None:
                logger.debug("removed", key=key.description)

    def empty(self) -> None:
        """Discard every registration."""
        with self._guard():
            count = len(self._known)
            self._known = {}
        logger.debug("emptied", count=count)


# Process default registry
_registry: Registry | None = None
_registry_lock = threading.Lock()


def get_registry() -> Registry:
    """
    Get the process default registry.

    Created on first call from ``RegistrySettings.from_env()``. Logging is
    left to the application (see ``gimme.logging_config``).
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = Registry(RegistrySettings.from_env())
        return _registry


def reset_registry() -> None:
    """Drop the process default registry (for testing)."""
    global _registry
    with _registry_lock:
        _registry = None
