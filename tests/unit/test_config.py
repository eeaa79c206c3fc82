"""Configuration tests."""

import pytest

from neural_os.core import get_settings
from neural_os.core.config import Settings


def test_settings_defaults():
    """Test default settings load correctly."""
    settings = Settings()

    assert settings.tick_interval == 1.0
    assert settings.default_item_label == "New Item"
    assert settings.max_blueprint_depth == 200
    assert not any(name.startswith("gemini") for name in Settings.model_fields)
    assert settings.json_logs is False


def test_settings_from_environment():
    """Test NEURAL_ prefixed environment variables are read."""
    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.store_path == "test-neural-apps.json"


def test_settings_override(monkeypatch):
    """Test overriding a value through the environment."""
    monkeypatch.setenv("NEURAL_TICK_INTERVAL", "0.25")
    monkeypatch.setenv("NEURAL_DEFAULT_ITEM_LABEL", "Untitled")

    settings = Settings()
    assert settings.tick_interval == 0.25
    assert settings.default_item_label == "Untitled"


def test_settings_validation():
    """Test settings validation."""
    settings = Settings(tick_interval=0.5)
    assert settings.tick_interval == 0.5

    # Non-positive tick interval
    with pytest.raises(Exception):
        Settings(tick_interval=0)

    # Non-positive depth limit
    with pytest.raises(Exception):
        Settings(max_blueprint_depth=-1)


def test_get_settings_cached():
    """Test settings are created once."""
    assert get_settings() is get_settings()
