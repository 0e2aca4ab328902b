"""Store model implementation - main public API.

Models the mutable operations of a store: transactions, clears and prepares.
The storage itself and the read-only operations are left to the driver.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING

from sortedcontainers import SortedDict

from .errors import InvalidArgumentError, NoCapacityError
from .types import (
    Clear,
    Insert,
    Key,
    Prepare,
    Remove,
    StoreOperation,
    StoreRatio,
    StoreUpdate,
    Transaction,
    Value,
)

if TYPE_CHECKING:
    from ..interfaces.format import Format

logger = logging.getLogger(__name__)


class StoreModel:
    """Logical content and capacity of a store.

    Args:
        format: Storage configuration, shared read-only

    Public API:
        - apply(operation): Simulate a store operation
        - content(): Read-only view of the modeled content
        - format(): The storage configuration
        - capacity(): Used and total capacity in words

    Invariants:
        - At most one entry per key
        - A failed operation leaves content and capacity unchanged
        - Capacity is logical: the driver must be able to reach the modeled
          free space through compaction, it is not the raw free space
    """

    def __init__(self, format: Format):
        self._format = format
        self._content: SortedDict = SortedDict()

        logger.info(f"Initialized store model with capacity {format.total_capacity} words")

    def __len__(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        ratio = self.capacity()
        return f"StoreModel(entries={len(self._content)}, used={ratio.used}, total={ratio.total})"

    def content(self) -> Mapping[Key, Value]:
        """Return the modeled content in key order."""
        return MappingProxyType(self._content)

    def format(self) -> Format:
        """Return the storage configuration."""
        return self._format

    def copy(self) -> StoreModel:
        """Return an independent model with the same format and content."""
        other = StoreModel.__new__(StoreModel)
        other._format = self._format
        other._content = self._content.copy()
        return other

    def apply(self, operation: StoreOperation) -> None:
        """Simulate a store operation.

        Raises:
            InvalidArgumentError: The operation is malformed for the format.
            NoCapacityError: The operation does not fit in the remaining capacity.
        """
        if isinstance(operation, Transaction):
            self._transaction(operation.updates)
        elif isinstance(operation, Clear):
            self._clear(operation.min_key)
        elif isinstance(operation, Prepare):
            self._prepare(operation.length)
        else:
            raise TypeError(f"Unknown store operation: {operation!r}")

    def capacity(self) -> StoreRatio:
        """Return the capacity according to the model."""
        used = sum(self._entry_size(value) for value in self._content.values())
        return StoreRatio(used=used, total=self._format.total_capacity)

    def _transaction(self, updates: Sequence[StoreUpdate]) -> None:
        """Apply a transaction after validating it entirely."""
        if len(updates) > self._format.max_updates:
            logger.debug(f"Rejected transaction: {len(updates)} updates")
            raise InvalidArgumentError(
                f"Transaction has {len(updates)} updates, at most {self._format.max_updates} allowed"
            )
        for update in updates:
            if not self._update_valid(update):
                logger.debug(f"Rejected transaction: invalid update {update!r}")
                raise InvalidArgumentError(f"Invalid update {update!r}")
        if len({update.key for update in updates}) != len(updates):
            logger.debug("Rejected transaction: duplicate keys")
            raise InvalidArgumentError("Transaction updates must have distinct keys")

        if len(updates) == 0:
            cost = 0
        elif len(updates) == 1:
            # A single update needs no marker entry, and a single removal
            # needs nothing at all.
            update = updates[0]
            cost = self._entry_size(update.value) if isinstance(update, Insert) else 0
        else:
            # One word for the marker entry.
            cost = 1 + sum(self._update_size(update) for update in updates)

        remaining = self.capacity().remaining
        if remaining < cost:
            logger.debug(f"Rejected transaction: needs {cost} words, {remaining} remaining")
            raise NoCapacityError(f"Transaction needs {cost} words, only {remaining} remaining")

        for update in updates:
            if isinstance(update, Insert):
                self._content[update.key] = update.value
            else:
                self._content.pop(update.key, None)

        logger.debug(f"Applied transaction of {len(updates)} updates ({cost} words)")

    def _clear(self, min_key: Key) -> None:
        """Delete all entries with a key at least `min_key`."""
        if not 0 <= min_key <= self._format.max_key:
            logger.debug(f"Rejected clear: min_key {min_key} out of range")
            raise InvalidArgumentError(
                f"Clear threshold {min_key} outside [0, {self._format.max_key}]"
            )
        doomed = list(self._content.irange(minimum=min_key))
        for key in doomed:
            del self._content[key]

        logger.debug(f"Cleared {len(doomed)} entries from key {min_key}")

    def _prepare(self, length: int) -> None:
        """Check that `length` words can be made available."""
        if length < 0:
            raise InvalidArgumentError(f"Prepare length must be non-negative, got {length}")
        remaining = self.capacity().remaining
        if remaining < length:
            logger.debug(f"Rejected prepare: needs {length} words, {remaining} remaining")
            raise NoCapacityError(f"Cannot prepare {length} words, only {remaining} remaining")

    def _update_size(self, update: StoreUpdate) -> int:
        """Return the words an update takes inside a multi-update transaction."""
        if isinstance(update, Insert):
            return self._entry_size(update.value)
        if isinstance(update, Remove):
            return 1
        raise TypeError(f"Unknown store update: {update!r}")

    def _entry_size(self, value: Value) -> int:
        """Return the words an entry takes: one header word plus its value."""
        return 1 + self._format.bytes_to_words(len(value))

    def _update_valid(self, update: StoreUpdate) -> bool:
        if isinstance(update, Insert):
            return (
                0 <= update.key <= self._format.max_key
                and len(update.value) <= self._format.max_value_len
            )
        if isinstance(update, Remove):
            return 0 <= update.key <= self._format.max_key
        raise TypeError(f"Unknown store update: {update!r}")
