"""Protocol definition for a store format."""

from __future__ import annotations

from typing import Protocol


class Format(Protocol):
    """Fixed limits of a store, read-only for the lifetime of a model."""

    total_capacity: int
    max_key: int
    max_value_len: int
    max_updates: int

    def bytes_to_words(self, length: int) -> int:
        """Return the number of words needed to hold `length` bytes."""
        ...
