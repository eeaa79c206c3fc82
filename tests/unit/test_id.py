"""Tests for ID generation system."""

from datetime import datetime

from neural_os.core.id import (
    Prefix,
    extract_timestamp,
    is_app_id,
    is_item_id,
    is_valid,
    new_app_id,
    new_item_id,
)


class TestTypedGeneration:
    """Test typed ID generation."""

    def test_app_id_format(self):
        """App IDs should have correct prefix."""
        id_str = new_app_id()
        assert id_str.startswith(f"{Prefix.APP}_")
        assert is_valid(id_str)

    def test_item_id_format(self):
        """Item IDs should have correct prefix."""
        id_str = new_item_id()
        assert id_str.startswith(f"{Prefix.ITEM}_")
        assert is_valid(id_str)

    def test_ulid_part_length(self):
        """The ULID after the prefix is 26 characters."""
        prefix, ulid_part = new_app_id().split("_")
        assert prefix == "app"
        assert len(ulid_part) == 26


class TestValidation:
    """Test ID validation."""

    def test_invalid_ids(self):
        """Invalid IDs should fail validation."""
        assert not is_valid("")
        assert not is_valid("invalid")
        assert not is_valid("1234567890")

    def test_malformed_prefixed_ids(self):
        """Malformed prefixed IDs should fail validation."""
        assert not is_valid("app_INVALID")
        assert not is_valid("app_")
        assert not is_valid("_")


class TestTimestampExtraction:
    """Test timestamp extraction."""

    def test_extract_from_prefixed_ulid(self):
        """Should extract timestamp from prefixed ULID."""
        before = datetime.now()
        id_str = new_app_id()

        timestamp = extract_timestamp(id_str)
        assert timestamp is not None
        # ULID timestamps have millisecond precision, so allow small variance
        assert abs((timestamp - before).total_seconds()) < 1

    def test_invalid_id_returns_none(self):
        """Invalid ID should return None."""
        assert extract_timestamp("invalid") is None


class TestTypeGuards:
    """Test type guard functions."""

    def test_identify_app_ids(self):
        app_id = new_app_id()
        item_id = new_item_id()

        assert is_app_id(app_id)
        assert not is_app_id(item_id)
        assert not is_app_id("invalid")

    def test_identify_item_ids(self):
        item_id = new_item_id()
        app_id = new_app_id()

        assert is_item_id(item_id)
        assert not is_item_id(app_id)
        assert not is_item_id("item-1")


class TestUniquenessUnderLoad:
    """Test uniqueness under high load."""

    def test_typed_ids_uniqueness(self):
        """Should generate unique typed IDs under load."""
        count = 1000
        app_ids = {new_app_id() for _ in range(count)}
        item_ids = {new_item_id() for _ in range(count)}

        assert len(app_ids) == count
        assert len(item_ids) == count
        assert app_ids.isdisjoint(item_ids)
