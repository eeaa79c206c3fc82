"""Fast JSON parsing for model output, with extraction and repair fallbacks."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_boundaries(text: str) -> tuple[str, int, int] | None:
    """
    Locate the outermost JSON object in text.

    Args:
        text: Text potentially containing JSON

    Returns:
        (working_text, start, end) or None if not found
    """
    working_text = text

    # Remove markdown code blocks
    if "```" in working_text:
        if "```json" in working_text:
            start_marker = working_text.find("```json") + 7
        else:
            start_marker = working_text.find("```") + 3

        end_marker = working_text.find("```", start_marker)
        if end_marker != -1:
            working_text = working_text[start_marker:end_marker].strip()

    # First brace to last brace
    start = working_text.find("{")
    end = working_text.rfind("}")

    if start == -1 or end == -1 or end < start:
        return None

    return (working_text, start, end + 1)


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from text with multiple fallbacks.

    Args:
        text: Text containing JSON
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If parsing fails
    """
    text = text.strip()

    boundaries = extract_json_boundaries(text)
    if boundaries is None:
        raise JSONParseError("No JSON object found in text")

    extracted_text, start, end = boundaries
    json_str = extracted_text[start:end]

    # Try msgspec first (fastest)
    try:
        result = msgspec.json.decode(json_str.encode("utf-8"))
        if not isinstance(result, dict):
            raise JSONParseError(f"Expected dict, got {type(result).__name__}")
        return result
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)

    # Last resort: json_repair
    try:
        repaired = repair_json(json_str)
        result = json.loads(repaired)
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def decode_nested_json(value: Any) -> Any:
    """
    Decode a value that arrived as JSON encoded inside a JSON string.

    Strings that do not look like a JSON object or array are returned as-is,
    as are strings that fail to parse.
    """
    if not isinstance(value, str):
        return value

    stripped = value.strip()
    if not stripped or stripped[0] not in "{[":
        return value

    try:
        return msgspec.json.decode(stripped.encode("utf-8"))
    except msgspec.DecodeError:
        return value


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # e.g. integers outside 64-bit range
            pass

        try:
            return msgspec.json.encode(obj).decode("utf-8")
        except (TypeError, ValueError):
            pass

    if indent == 2:
        try:
            return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
        except (TypeError, ValueError):
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None)
