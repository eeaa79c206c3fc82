"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    decode_nested_json,
    safe_json_dumps,
    JSONParseError,
)
from .validate import (
    ValidationError,
    ValidationResult,
    BuildRequest,
    BlueprintValidator,
    validate_json_depth,
    validate_blueprint,
)


def create_container(settings=None, llm=None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, llm)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "decode_nested_json",
    "safe_json_dumps",
    "JSONParseError",
    # Validation
    "ValidationError",
    "ValidationResult",
    "BuildRequest",
    "BlueprintValidator",
    "validate_json_depth",
    "validate_blueprint",
    # DI
    "create_container",
]
