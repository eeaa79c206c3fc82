"""Response Parser - model output text to a GenerationResult with validation."""

from typing import Any

from pydantic import BaseModel, Field
from returns.result import Failure

from neural_os.core import get_logger, ValidationError
from neural_os.core.json import decode_nested_json, extract_json, JSONParseError
from neural_os.core.validate import MAX_JSON_DEPTH, validate_blueprint, validate_json_depth
from .models import Archetype

logger = get_logger(__name__)


class GenerationResult(BaseModel):
    """Decoded model response: a micro-app definition, a chat message, or both."""

    tool_name: str | None = Field(default=None, description="App title")
    archetype: Archetype | None = Field(default=None)
    blueprint: list[Any] = Field(default_factory=list, description="Raw (un-normalized) blocks")
    initial_state: dict[str, Any] = Field(default_factory=dict, description="Data bag")
    message: str | None = Field(default=None, description="Text for the chat transcript")

    @property
    def is_app(self) -> bool:
        """True when the response defines an app, not just a message."""
        return bool(self.tool_name) and bool(self.blueprint)


class ResponseParser:
    """
    Parses model responses into GenerationResult.

    Tolerates:
    - Markdown fences and prose around the JSON object
    - Repairable JSON syntax errors
    - JSON documents encoded as strings inside the outer document
    - Alternate top-level field names
    """

    TITLE_FIELDS = ("tool_name", "title", "name")
    BLUEPRINT_FIELDS = ("blueprint", "ui", "components")
    STATE_FIELDS = ("initial_state", "state", "data")

    def __init__(self, max_depth: int = MAX_JSON_DEPTH) -> None:
        self.max_depth = max_depth

    def parse(self, content: str) -> GenerationResult:
        """
        Parse a model response string.

        Args:
            content: Raw response text

        Returns:
            GenerationResult

        Raises:
            ValidationError: If no usable JSON object can be recovered
        """
        try:
            raw = extract_json(content, repair=True)
        except JSONParseError as e:
            logger.error("json_parse_failed", error=str(e), preview=content[:200])
            raise ValidationError(f"Invalid JSON: {e}") from e

        return self.parse_dict(raw)

    def parse_dict(self, raw: dict[str, Any]) -> GenerationResult:
        """Build a GenerationResult from an already-decoded response object."""
        if not isinstance(raw, dict):
            logger.error("invalid_format", type=type(raw).__name__)
            raise ValidationError("Invalid response format: expected JSON object")

        title = self._first(raw, self.TITLE_FIELDS)
        raw_blueprint = self._first(raw, self.BLUEPRINT_FIELDS)
        # Depth is bounded before expansion, which walks the tree recursively
        try:
            validate_json_depth(raw_blueprint, self.max_depth)
        except ValidationError as e:
            logger.error("blueprint_too_deep", error=str(e))
            raise
        blueprint = self._expand_blueprint(raw_blueprint)
        state = self._expand_state(self._first(raw, self.STATE_FIELDS))
        message = raw.get("message")

        if not blueprint and not message:
            logger.error("empty_response", keys=list(raw.keys()))
            raise ValidationError("Response contains neither a blueprint nor a message")

        self._validate(blueprint)

        return GenerationResult(
            tool_name=str(title) if title not in (None, "") else None,
            archetype=Archetype.parse(raw.get("archetype")),
            blueprint=blueprint,
            initial_state=state,
            message=str(message) if message not in (None, "") else None,
        )

    def _validate(self, blueprint: Any) -> None:
        result = validate_blueprint(blueprint, self.max_depth)
        if isinstance(result, Failure):
            failure = result.failure()
            logger.error("blueprint_invalid", error=failure.message)
            raise ValidationError(failure.message)

    @staticmethod
    def _first(raw: dict[str, Any], names: tuple[str, ...]) -> Any:
        for name in names:
            if raw.get(name) is not None:
                return raw[name]
        return None

    def _expand_blueprint(self, blueprint: Any) -> list[Any]:
        """
        Decode the blueprint field into a list of blocks.

        Supports:
        - A list of blocks (possibly JSON-encoded as a string)
        - {"root": node} from the compact format
        - {"components": [...]} wrappers
        - A single block object
        """
        blueprint = decode_nested_json(blueprint)

        if blueprint is None or isinstance(blueprint, str):
            if isinstance(blueprint, str) and blueprint.strip():
                logger.warning("blueprint_not_json", preview=blueprint[:100])
            return []
        if isinstance(blueprint, dict):
            if "root" in blueprint:
                blueprint = [blueprint["root"]]
            elif isinstance(blueprint.get("components"), list):
                blueprint = blueprint["components"]
            else:
                blueprint = [blueprint]
        if not isinstance(blueprint, list):
            return [blueprint]

        return [self._expand_block(block) for block in blueprint]

    def _expand_block(self, block: Any) -> Any:
        """Decode string-encoded payloads and children, recursively."""
        block = decode_nested_json(block)
        if not isinstance(block, dict):
            return block

        block = dict(block)
        for field_name in ("payload", "props", "p"):
            if field_name in block:
                block[field_name] = decode_nested_json(block[field_name])

        for field_name in ("children", "c", "actions", "buttons", "btns"):
            children = decode_nested_json(block.get(field_name))
            if isinstance(children, list):
                block[field_name] = [self._expand_block(child) for child in children]

        return block

    def _expand_state(self, state: Any) -> dict[str, Any]:
        """Decode the data bag, including string-encoded list/record values."""
        state = decode_nested_json(state)
        if state is None:
            return {}
        if not isinstance(state, dict):
            logger.warning("state_not_object", type=type(state).__name__)
            return {}
        return {key: decode_nested_json(value) for key, value in state.items()}


def parse_response(content: str) -> GenerationResult:
    """
    Convenience function to parse a model response.

    Args:
        content: Raw response text

    Returns:
        GenerationResult
    """
    parser = ResponseParser()
    return parser.parse(content)
