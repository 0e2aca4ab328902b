"""Store Model - executable behavioral model of a log-structured flash store."""

from .components.checker import CheckReport, DifferentialChecker
from .components.generator import OperationGenerator
from .core.config import StoreFormat
from .core.errors import (
    StoreError,
    InvalidArgumentError,
    NoCapacityError,
    ConfigError,
    ModelMismatchError,
)
from .core.model import StoreModel
from .core.types import (
    Key,
    Value,
    Insert,
    Remove,
    StoreUpdate,
    Transaction,
    Clear,
    Prepare,
    StoreOperation,
    StoreRatio,
)

__all__ = [
    "CheckReport",
    "DifferentialChecker",
    "OperationGenerator",
    "StoreFormat",
    "StoreError",
    "InvalidArgumentError",
    "NoCapacityError",
    "ConfigError",
    "ModelMismatchError",
    "StoreModel",
    "Key",
    "Value",
    "Insert",
    "Remove",
    "StoreUpdate",
    "Transaction",
    "Clear",
    "Prepare",
    "StoreOperation",
    "StoreRatio",
]
