"""Input validation with strong typing."""

from dataclasses import dataclass
from typing import Any
from returns.result import Result, Success, Failure

from pydantic import BaseModel, Field, field_validator, ConfigDict


# Validation limits
MAX_JSON_DEPTH = 200
MAX_MESSAGE_LENGTH = 10_000


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class BuildRequest(RequestValidator):
    """Validated request to build or update a micro-app."""

    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)
    app_id: str | None = Field(default=None)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Message cannot be empty")
        return stripped


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent stack overflow.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)


class BlueprintValidator:
    """Validates decoded blueprints coming from a generator."""

    @staticmethod
    def validate(blueprint: Any, max_depth: int = MAX_JSON_DEPTH) -> None:
        """
        Validate blueprint structure.

        Args:
            blueprint: Decoded blueprint (list of block dicts)
            max_depth: Maximum nesting depth

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(blueprint, list):
            raise ValidationError("Blueprint must be a list of blocks")

        for index, block in enumerate(blueprint):
            if not isinstance(block, (dict, str)):
                raise ValidationError(
                    f"Blueprint entry {index} must be an object, got {type(block).__name__}"
                )

        validate_json_depth(blueprint, max_depth)


def validate_blueprint(blueprint: Any, max_depth: int = MAX_JSON_DEPTH) -> Result[None, ValidationResult]:
    """
    Validate a blueprint (Result pattern version).

    Args:
        blueprint: Decoded blueprint
        max_depth: Maximum nesting depth

    Returns:
        Result indicating success or validation error
    """
    try:
        BlueprintValidator.validate(blueprint, max_depth)
        return Success(None)
    except ValidationError as e:
        return Failure(ValidationResult(str(e), field="blueprint"))
