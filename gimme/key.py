"""
Registry key: a contract type paired with an optional label.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gimme.exceptions import type_name

# Odd multiplier for the order-sensitive hash combination.
_HASH_FACTOR = 397


@dataclass(frozen=True, eq=False)
class Key:
    """
    Identity under which a provider is stored.

    Two keys are equal when both the contract type and the label match
    exactly. A missing label is stored as ``""`` so keys compare without
    special-casing ``None``.

    Attributes:
        abstract_type: Contract type requested by callers
        label: Optional discriminator between several providers of one contract
    """

    abstract_type: Any
    label: str | None = ""

    def __post_init__(self):
        if self.label is None:
            object.__setattr__(self, "label", "")
        elif not isinstance(self.label, str):
            raise TypeError(f"label must be a string, got {type(self.label).__name__}")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.abstract_type == other.abstract_type and self.label == other.label

    def __hash__(self) -> int:
        return (hash(self.abstract_type) * _HASH_FACTOR) ^ hash(self.label)

    def is_assignable_to(self, candidate: Any) -> bool:
        """True when ``candidate`` is the contract type or one of its supertypes."""
        if candidate == self.abstract_type:
            return True
        if isinstance(candidate, type) and isinstance(self.abstract_type, type):
            try:
                return issubclass(self.abstract_type, candidate)
            except TypeError:
                # Non runtime-checkable protocols refuse issubclass()
                return False
        return False

    @property
    def description(self) -> str:
        """Diagnostic form ``[label]:TypeName``."""
        return f"[{self.label}]:{type_name(self.abstract_type)}"

    def __repr__(self) -> str:
        return f"Key({type_name(self.abstract_type)!s}, label={self.label!r})"
