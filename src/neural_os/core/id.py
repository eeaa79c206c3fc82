"""ID Generation.

ULID-based identifiers for apps and list items.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrappers for each ID category
- Prefixed: app_* and item_* for readable logs and stored data
"""

from datetime import datetime
from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

AppID = NewType("AppID", str)
"""Micro-app identifier, stable for the app's lifetime"""

ItemID = NewType("ItemID", str)
"""List item identifier, assigned at creation"""


class Prefix:
    """ID prefix constants."""

    APP = "app"
    ITEM = "item"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"

    def timestamp(self, id_str: str) -> int:
        """Extract timestamp (milliseconds) from ULID."""
        try:
            ulid_str = id_str.split("_")[1] if "_" in id_str else id_str
            ulid = ULID.from_str(ulid_str)
            return int(ulid.timestamp * 1000)
        except (ValueError, IndexError):
            return 0


_generator = Generator()


def new_app_id() -> AppID:
    """Generate new app ID."""
    return AppID(_generator.generate_with_prefix(Prefix.APP))


def new_item_id() -> ItemID:
    """Generate new list item ID."""
    return ItemID(_generator.generate_with_prefix(Prefix.ITEM))


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID.

    Args:
        id_str: ID string to validate

    Returns:
        True if valid ULID format
    """
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str

        # ULID is 26 characters
        if len(ulid_part) != 26:
            return False

        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract creation time from an ID.

    Args:
        id_str: ULID string

    Returns:
        Datetime object or None if invalid
    """
    timestamp_ms = _generator.timestamp(id_str)
    return datetime.fromtimestamp(timestamp_ms / 1000.0) if timestamp_ms > 0 else None


def is_app_id(id_str: str) -> bool:
    """Check if ID is an app ID."""
    return id_str.startswith(f"{Prefix.APP}_") and is_valid(id_str)


def is_item_id(id_str: str) -> bool:
    """Check if ID is a list item ID."""
    return id_str.startswith(f"{Prefix.ITEM}_") and is_valid(id_str)
