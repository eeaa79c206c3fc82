"""Micro-app records, persistence and lifecycle."""

from .models import App
from .store import AppStore, JSONFileStore, MemoryStore, StoreError
from .manager import AppManager

__all__ = ["App", "AppStore", "JSONFileStore", "MemoryStore", "StoreError", "AppManager"]
