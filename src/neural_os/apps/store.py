"""
App Store
Loads and saves the list of apps; the rest of the system never touches storage.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol

import msgspec
from pydantic import ValidationError as PydanticValidationError

from neural_os.core import get_logger, safe_json_dumps
from .models import App

logger = get_logger(__name__)


class StoreError(Exception):
    """Persisted apps could not be read."""

    pass


class AppStore(Protocol):
    """Repository for App records."""

    def load(self) -> list[App]: ...

    def save(self, apps: list[App]) -> None: ...


class MemoryStore:
    """In-process store holding serialized copies (no aliasing with callers)."""

    def __init__(self, apps: list[App] | None = None) -> None:
        self._records = [app.model_dump(mode="json") for app in apps or []]

    def load(self) -> list[App]:
        return [App.model_validate(record) for record in self._records]

    def save(self, apps: list[App]) -> None:
        self._records = [app.model_dump(mode="json") for app in apps]


class JSONFileStore:
    """
    Apps as a JSON array in a single file.

    Writes go to a temporary file that replaces the target, so a crash
    mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[App]:
        """
        Read all apps.

        Returns:
            Apps in stored order; empty if the file does not exist

        Raises:
            StoreError: If the file is not a JSON array
        """
        if not self.path.exists():
            logger.debug("store_missing", path=str(self.path))
            return []

        try:
            records = msgspec.json.decode(self.path.read_bytes())
        except (OSError, msgspec.DecodeError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(records, list):
            raise StoreError(f"{self.path} does not hold a list of apps")

        apps = []
        for position, record in enumerate(records):
            try:
                apps.append(App.model_validate(record))
            except PydanticValidationError as e:
                logger.warning("store_record_skipped", position=position, error=str(e))

        logger.info("store_loaded", path=str(self.path), apps=len(apps))
        return apps

    def save(self, apps: list[App]) -> None:
        """Write all apps, replacing the file."""
        payload = safe_json_dumps([app.model_dump(mode="json") for app in apps], indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        logger.debug("store_saved", path=str(self.path), apps=len(apps))
