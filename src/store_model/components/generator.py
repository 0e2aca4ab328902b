"""Random store operation generator.

Produces operation sequences for fuzzing a driver against the model. The
distribution leans towards boundary cases: keys and values just past the
format limits, duplicate keys, oversized transactions and prepares close to
the remaining capacity.
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..core.types import Clear, Insert, Prepare, Remove, StoreOperation, Transaction

if TYPE_CHECKING:
    from ..core.model import StoreModel
    from ..core.types import Key, StoreUpdate
    from ..interfaces.format import Format


class OperationGenerator:
    """Generates random store operations for a format.

    Args:
        format: Limits the operations are generated around
        rng: Source of randomness (seed it for reproducible runs)
        key_space: Number of distinct valid keys to draw from
        invalid_rate: Probability of drawing a value past a format limit
        duplicate_rate: Probability of repeating a key within a transaction
    """

    def __init__(
        self,
        format: Format,
        rng: random.Random | None = None,
        key_space: int | None = None,
        invalid_rate: float = 0.05,
        duplicate_rate: float = 0.05,
    ):
        self.format = format
        self.rng = rng or random.Random()
        self.key_space = min(key_space or 32, format.max_key + 1)
        self.invalid_rate = invalid_rate
        self.duplicate_rate = duplicate_rate

    def generate(self, count: int, model: StoreModel | None = None) -> Iterator[StoreOperation]:
        """Yield `count` operations.

        When a model is given, it is expected to be updated by the caller
        between operations, and prepares are aimed at its remaining capacity.
        """
        for _ in range(count):
            yield self.next_operation(model)

    def next_operation(self, model: StoreModel | None = None) -> StoreOperation:
        """Return a single random operation."""
        roll = self.rng.random()
        if roll < 0.8:
            return self._transaction()
        if roll < 0.9:
            return self._clear()
        return self._prepare(model)

    def _transaction(self) -> Transaction:
        if self._invalid():
            count = self.format.max_updates + 1
        else:
            # Mostly small transactions, with the single-update case well covered.
            count = min(self.rng.choice([0, 1, 1, 1, 2, 3, 4]), self.format.max_updates)
        keys = self.rng.sample(range(self.key_space), min(count, self.key_space))
        keys += [self.rng.randrange(self.key_space) for _ in range(count - len(keys))]
        keys = [self._invalid_key() if self._invalid() else key for key in keys]
        if count >= 2 and self.rng.random() < self.duplicate_rate:
            keys[-1] = keys[0]
        return Transaction(tuple(self._update(key) for key in keys))

    def _update(self, key: Key) -> StoreUpdate:
        if self.rng.random() < 0.25:
            return Remove(key)
        if self._invalid():
            length = self.format.max_value_len + 1 + self.rng.randrange(4)
        else:
            length = self.rng.randint(0, self.format.max_value_len)
        return Insert(key, self.rng.randbytes(length))

    def _clear(self) -> Clear:
        if self._invalid():
            return Clear(self.format.max_key + 1)
        return Clear(self.rng.randint(0, min(self.key_space, self.format.max_key)))

    def _prepare(self, model: StoreModel | None) -> Prepare:
        if model is None:
            return Prepare(self.rng.randint(0, self.format.total_capacity + 1))
        remaining = model.capacity().remaining
        return Prepare(max(0, remaining + self.rng.randint(-2, 2)))

    def _invalid_key(self) -> Key:
        return self.format.max_key + 1 + self.rng.randrange(4)

    def _invalid(self) -> bool:
        return self.rng.random() < self.invalid_rate
