"""Configuration for the store model.

Defines the immutable storage format the model is built against.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields

from .errors import ConfigError

# Limits of the flash format, independent of the page geometry.
WORD_SIZE = 4
PAGE_HEADER_WORDS = 2
MIN_PAGE_WORDS = 8
MAX_PAGE_WORDS = 1024
MIN_NUM_PAGES = 3
MAX_NUM_PAGES = 64
MAX_KEY_INDEX = 4095
MAX_VALUE_LEN = 1023
MAX_UPDATES = 31


@dataclass(frozen=True)
class StoreFormat:
    """Storage limits the model checks operations against.

    Attributes:
        total_capacity: Logical capacity of the store in words
        max_key: Largest valid key
        max_value_len: Largest valid value length in bytes
        max_updates: Largest number of updates in a transaction
        word_size: Number of bytes per storage word

    Capacities are logical: they assume the store is optimally compacted and
    say nothing about the raw free space of the medium.
    """

    total_capacity: int
    max_key: int
    max_value_len: int
    max_updates: int
    word_size: int = WORD_SIZE

    def __post_init__(self):
        for name in ("total_capacity", "max_key", "max_value_len", "max_updates"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.word_size, int) or self.word_size < 1:
            raise ConfigError(f"word_size must be a positive integer, got {self.word_size!r}")

    def bytes_to_words(self, length: int) -> int:
        """Return the number of words needed to hold `length` bytes."""
        if length < 0:
            raise ConfigError(f"Byte length must be non-negative, got {length}")
        return -(-length // self.word_size)

    @classmethod
    def from_geometry(cls, page_size: int, num_pages: int, word_size: int = WORD_SIZE) -> StoreFormat:
        """Derive the format of a flash storage from its page geometry.

        Args:
            page_size: Page size in bytes
            num_pages: Number of pages dedicated to the store
            word_size: Word size in bytes (only 4 is supported)

        Each page loses two header words. One page is kept free for
        compaction, and one word per page is lost to the entry that would
        straddle a page boundary, as is room for the longest value. The
        remaining pages reserve one erase marker each plus one clear marker.
        """
        if word_size != WORD_SIZE:
            raise ConfigError(f"Unsupported word size {word_size}, expected {WORD_SIZE}")
        if page_size % word_size != 0:
            raise ConfigError(f"Page size {page_size} is not a multiple of the word size")
        page_words = page_size // word_size
        if not MIN_PAGE_WORDS <= page_words <= MAX_PAGE_WORDS:
            raise ConfigError(
                f"Page size {page_size} must hold between {MIN_PAGE_WORDS} and {MAX_PAGE_WORDS} words"
            )
        if not MIN_NUM_PAGES <= num_pages <= MAX_NUM_PAGES:
            raise ConfigError(
                f"Number of pages {num_pages} must be between {MIN_NUM_PAGES} and {MAX_NUM_PAGES}"
            )

        virt_page_size = page_words - PAGE_HEADER_WORDS
        max_value_len = min((virt_page_size - 1) * word_size, MAX_VALUE_LEN)
        max_prefix_len = -(-max_value_len // word_size)
        virt_size = (num_pages - 1) * (virt_page_size - 1) - max_prefix_len
        return cls(
            total_capacity=virt_size - num_pages,
            max_key=MAX_KEY_INDEX,
            max_value_len=max_value_len,
            max_updates=MAX_UPDATES,
            word_size=word_size,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> StoreFormat:
        """Build a format from a plain mapping of field names to values."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown format fields: {sorted(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(f"Incomplete format: {e}") from e
