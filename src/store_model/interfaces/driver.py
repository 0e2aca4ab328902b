"""Protocol definition for a store driver checked against the model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..core.types import Key, StoreOperation, StoreRatio, Value


class StoreDriver(Protocol):
    """Mutable side of a real store, as seen by the comparison layer."""

    def apply(self, operation: StoreOperation) -> None:
        """Apply an operation; raise InvalidArgumentError or NoCapacityError on failure."""
        ...

    def content(self) -> Mapping[Key, Value]:
        """Return the current key to value mapping."""
        ...

    def capacity(self) -> StoreRatio:
        """Return the logical used and total capacity in words."""
        ...
