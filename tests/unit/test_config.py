"""Unit tests for the store format."""

import pytest

from store_model.core.config import StoreFormat
from store_model.core.errors import ConfigError


@pytest.fixture
def fmt():
    """Create a small store format for tests."""
    return StoreFormat(total_capacity=10, max_key=100, max_value_len=8, max_updates=4)


def test_bytes_to_words_rounds_up(fmt):
    """Test that partial words count as whole words."""
    assert fmt.bytes_to_words(0) == 0
    assert fmt.bytes_to_words(1) == 1
    assert fmt.bytes_to_words(4) == 1
    assert fmt.bytes_to_words(5) == 2
    assert fmt.bytes_to_words(8) == 2


def test_bytes_to_words_custom_word_size():
    """Test conversion with a one-byte word."""
    fmt = StoreFormat(total_capacity=10, max_key=1, max_value_len=8, max_updates=1, word_size=1)
    assert fmt.bytes_to_words(7) == 7


def test_bytes_to_words_rejects_negative_length(fmt):
    """Test that negative byte lengths are rejected."""
    with pytest.raises(ConfigError):
        fmt.bytes_to_words(-1)


def test_format_is_immutable(fmt):
    """Test that a format cannot be changed after construction."""
    with pytest.raises(AttributeError):
        fmt.total_capacity = 20


@pytest.mark.parametrize(
    "field", ["total_capacity", "max_key", "max_value_len", "max_updates"]
)
def test_format_rejects_negative_limits(field):
    """Test that every limit must be non-negative."""
    limits = dict(total_capacity=10, max_key=100, max_value_len=8, max_updates=4)
    limits[field] = -1
    with pytest.raises(ConfigError):
        StoreFormat(**limits)


def test_format_rejects_zero_word_size():
    """Test that the word size must be positive."""
    with pytest.raises(ConfigError):
        StoreFormat(total_capacity=10, max_key=100, max_value_len=8, max_updates=4, word_size=0)


def test_config_error_is_value_error():
    """Test that configuration errors can be caught as ValueError."""
    with pytest.raises(ValueError):
        StoreFormat(total_capacity=-5, max_key=100, max_value_len=8, max_updates=4)


def test_from_geometry_large_pages():
    """Test format derivation for 20 pages of 4 KiB."""
    fmt = StoreFormat.from_geometry(page_size=4096, num_pages=20)

    assert fmt.word_size == 4
    assert fmt.max_key == 4095
    assert fmt.max_updates == 31
    # Value length is capped regardless of the page size.
    assert fmt.max_value_len == 1023
    # (20 - 1) * (1022 - 1) - 256 words, minus one word per page.
    assert fmt.total_capacity == 19123


def test_from_geometry_small_pages():
    """Test format derivation when pages limit the value length."""
    fmt = StoreFormat.from_geometry(page_size=64, num_pages=3)

    # 16 words per page, 14 after the header.
    assert fmt.max_value_len == 52
    assert fmt.total_capacity == 10


@pytest.mark.parametrize(
    "page_size,num_pages,word_size",
    [
        (4094, 20, 4),  # Not a multiple of the word size
        (16, 20, 4),  # Too few words per page
        (8192, 20, 4),  # Too many words per page
        (4096, 2, 4),  # Too few pages
        (4096, 65, 4),  # Too many pages
        (4096, 20, 8),  # Unsupported word size
    ],
)
def test_from_geometry_rejects_unsupported(page_size, num_pages, word_size):
    """Test that unsupported geometries are rejected."""
    with pytest.raises(ConfigError):
        StoreFormat.from_geometry(page_size, num_pages, word_size)


def test_from_dict(fmt):
    """Test building a format from a mapping."""
    data = {"total_capacity": 10, "max_key": 100, "max_value_len": 8, "max_updates": 4}
    assert StoreFormat.from_dict(data) == fmt


def test_from_dict_rejects_unknown_fields():
    """Test that unknown fields are reported."""
    data = {"total_capacity": 10, "max_key": 100, "max_value_len": 8, "max_updates": 4, "pages": 3}
    with pytest.raises(ConfigError, match="pages"):
        StoreFormat.from_dict(data)


def test_from_dict_rejects_missing_fields():
    """Test that missing fields are reported."""
    with pytest.raises(ConfigError):
        StoreFormat.from_dict({"total_capacity": 10})
