"""
Error taxonomy for the registry.

Registration failures are raised synchronously from the ``register*`` call
that caused them and never leave a partial entry behind. Lookups do not raise
for missing keys.
"""

from __future__ import annotations

from typing import Any


def type_name(t: Any) -> str:
    """Short, human-readable name for a type descriptor."""
    return getattr(t, "__qualname__", None) or getattr(t, "__name__", None) or repr(t)


class RegistryError(Exception):
    """Base class for all registry errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class DuplicateRegistrationError(RegistryError):
    """Raised when a key already has a provider."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(
            f"{key.description} is already registered",
            context={"key": key.description},
        )


class ConstructorNotFoundError(RegistryError):
    """Raised when no constructor accepts the supplied number of arguments."""

    def __init__(self, impl_type: type, arg_count: int):
        self.impl_type = impl_type
        self.arg_count = arg_count
        super().__init__(
            f"could not find a constructor for {type_name(impl_type)} "
            f"that accepts {arg_count} arguments",
            context={"impl_type": type_name(impl_type), "arg_count": arg_count},
        )


class ConstructionFailedError(RegistryError):
    """Raised when a constructor or provider callable fails while building an instance."""

    def __init__(self, impl_type: Any, cause: BaseException):
        self.impl_type = impl_type
        self.cause = cause
        super().__init__(
            f"constructing {type_name(impl_type)} failed: {cause}",
            context={"impl_type": type_name(impl_type), "cause": repr(cause)},
        )


class ContractMismatchError(RegistryError):
    """Raised when an implementation does not satisfy the registered contract."""

    def __init__(self, abstract_type: Any, impl_type: Any):
        self.abstract_type = abstract_type
        self.impl_type = impl_type
        super().__init__(
            f"{type_name(impl_type)} is not assignable to {type_name(abstract_type)}",
            context={
                "abstract_type": type_name(abstract_type),
                "impl_type": type_name(impl_type),
            },
        )


class ThreadConfinementError(RegistryError):
    """Raised when a single-owner registry is used from a foreign thread."""

    def __init__(self, owner: str, caller: str):
        self.owner = owner
        self.caller = caller
        super().__init__(
            f"registry is confined to thread '{owner}', accessed from '{caller}'",
            context={"owner": owner, "caller": caller},
        )
