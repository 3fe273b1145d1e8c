"""
Constructor resolution by argument count.

Given an implementation class and the number of arguments a caller wants to
build it with, pick the first constructor that accepts exactly that many
positional arguments.

Candidates are enumerated in a fixed order:

1. The class itself (its ``__init__``/``__new__`` signature)
2. Public classmethods declared on the class whose return annotation names
   the class (alternate constructors such as ``from_url``), in definition order

Only the arity is compared. When two candidates accept the same number of
arguments the earlier one wins.

Example:
    ctor = resolve_constructor(FileLogger, 1)
    logger = ctor.invoke(("/tmp/app.log",))
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Self

from gimme.exceptions import ConstructionFailedError, ConstructorNotFoundError


@dataclass(frozen=True)
class Constructor:
    """A resolved way of building ``impl_type``."""

    impl_type: type
    name: str
    target: Callable[..., Any]
    signature: inspect.Signature

    def accepts(self, arg_count: int) -> bool:
        try:
            self.signature.bind(*([None] * arg_count))
        except TypeError:
            return False
        return True

    def invoke(self, args: Sequence[Any]) -> Any:
        """Build one instance, wrapping constructor failures."""
        try:
            return self.target(*args)
        except Exception as exc:
            raise ConstructionFailedError(self.impl_type, exc) from exc


def _returns_class(signature: inspect.Signature, impl_type: type) -> bool:
    annotation = signature.return_annotation
    if annotation is impl_type or annotation is Self:
        return True
    # Postponed annotations arrive as strings
    return isinstance(annotation, str) and annotation in (impl_type.__name__, "Self")


def iter_constructors(impl_type: type) -> Iterator[Constructor]:
    """Yield constructor candidates of ``impl_type`` in resolution order."""
    try:
        signature = inspect.signature(impl_type)
    except (TypeError, ValueError):
        # Some builtins expose no introspectable signature
        signature = None
    if signature is not None:
        yield Constructor(impl_type, "__init__", impl_type, signature)

    for name, attr in vars(impl_type).items():
        if name.startswith("_") or not isinstance(attr, classmethod):
            continue
        bound = getattr(impl_type, name)
        try:
            signature = inspect.signature(bound)
        except (TypeError, ValueError):
            continue
        if _returns_class(signature, impl_type):
            yield Constructor(impl_type, name, bound, signature)


def resolve_constructor(impl_type: type, arg_count: int) -> Constructor:
    """
    Find the first constructor of ``impl_type`` taking ``arg_count`` arguments.

    Args:
        impl_type: Concrete class to build
        arg_count: Number of positional arguments that will be supplied

    Returns:
        The matching Constructor

    Raises:
        ConstructorNotFoundError: If no candidate accepts ``arg_count`` arguments
    """
    if not isinstance(impl_type, type):
        raise TypeError(f"impl_type must be a class, got {impl_type!r}")
    for ctor in iter_constructors(impl_type):
        if ctor.accepts(arg_count):
            return ctor
    raise ConstructorNotFoundError(impl_type, arg_count)
