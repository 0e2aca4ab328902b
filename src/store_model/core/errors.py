"""Exception hierarchy for the store model.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all store model errors."""
    pass


class InvalidArgumentError(StoreError):
    """Raised when an operation violates the format limits or is inconsistent.

    Covers bad keys, oversized values, too many updates, duplicate keys in a
    transaction and out-of-range clear thresholds.
    """
    pass


class NoCapacityError(StoreError):
    """Raised when a well-formed operation does not fit in the remaining capacity."""
    pass


class ConfigError(StoreError, ValueError):
    """Raised when a store format is malformed or its geometry is unsupported."""
    pass


class ModelMismatchError(StoreError):
    """Raised when a driver diverges from the model it is checked against."""

    def __init__(self, message: str, operation: object = None):
        super().__init__(message)
        self.operation = operation
