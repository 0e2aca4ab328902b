"""Common type definitions for the store model.

Defines the update and operation vocabulary used across all components.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Core primitive types
Key = int
Value = bytes


@dataclass(frozen=True)
class Insert:
    """Sets the value of a key, creating or overwriting its entry."""

    key: Key
    value: Value

    def __post_init__(self):
        # Own the bytes even if a mutable buffer was passed in.
        object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True)
class Remove:
    """Deletes the entry of a key if present."""

    key: Key

    @property
    def value(self) -> None:
        return None


StoreUpdate = Union[Insert, Remove]


@dataclass(frozen=True)
class Transaction:
    """Applies a batch of updates atomically.

    The updates must have pairwise distinct keys, so their order does not
    affect the outcome.
    """

    updates: tuple[StoreUpdate, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "updates", tuple(self.updates))


@dataclass(frozen=True)
class Clear:
    """Deletes all entries whose key is at least `min_key`."""

    min_key: Key


@dataclass(frozen=True)
class Prepare:
    """Makes sure `length` words of capacity are, or can be made, available."""

    length: int


StoreOperation = Union[Transaction, Clear, Prepare]


@dataclass(frozen=True)
class StoreRatio:
    """Used and total capacity in words."""

    used: int
    total: int

    @property
    def remaining(self) -> int:
        return self.total - self.used
