"""Store model core package."""

from .config import StoreFormat
from .model import StoreModel

__all__ = ["StoreFormat", "StoreModel"]
