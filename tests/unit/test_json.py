"""JSON helper tests with property-based testing."""

import json

import pytest
from hypothesis import given, strategies as st

from neural_os.core import JSONParseError, decode_nested_json, extract_json, safe_json_dumps


def test_extract_json_clean():
    """Test extracting clean JSON."""
    text = '{"tool_name": "Counter", "count": 42}'
    result = extract_json(text)
    assert result == {"tool_name": "Counter", "count": 42}


def test_extract_json_with_markdown():
    """Test extracting JSON from markdown code blocks."""
    text = '''Here's your app:
```json
{"tool_name": "Counter", "count": 42}
```
Enjoy!'''
    result = extract_json(text)
    assert result == {"tool_name": "Counter", "count": 42}


def test_extract_json_with_extra_text():
    """Test extracting JSON with surrounding text."""
    text = 'Sure! {"tool_name": "Counter"} Let me know.'
    assert extract_json(text) == {"tool_name": "Counter"}


def test_extract_json_repairs_trailing_comma():
    """Test repair of almost-valid model output."""
    text = '{"tool_name": "Counter", "blueprint": [{"type": "Stat"},],}'
    result = extract_json(text)
    assert result["blueprint"] == [{"type": "Stat"}]


def test_extract_json_invalid():
    """Test error on text without JSON."""
    with pytest.raises(JSONParseError):
        extract_json("This has no JSON", repair=False)


def test_extract_json_no_repair():
    """Test error on malformed JSON when repair is disabled."""
    with pytest.raises(JSONParseError):
        extract_json('{"a": 1,}', repair=False)


@pytest.mark.parametrize("value,expected", [
    ('{"key": "count"}', {"key": "count"}),
    ('[{"type": "Text"}]', [{"type": "Text"}]),
    ("  [1, 2]  ", [1, 2]),
    ("{broken", "{broken"),
    ("plain text", "plain text"),
    (5, 5),
    ({"already": "decoded"}, {"already": "decoded"}),
])
def test_decode_nested_json(value, expected):
    """Test decoding of JSON-in-a-string values."""
    assert decode_nested_json(value) == expected


def test_safe_json_dumps():
    """Test JSON serialization."""
    obj = {"title": "Test", "items": [1, 2, 3]}
    result = safe_json_dumps(obj)
    assert json.loads(result) == obj


def test_safe_json_dumps_with_indent():
    """Test JSON serialization with indentation."""
    obj = {"title": "Test"}
    result = safe_json_dumps(obj, indent=2)
    assert json.loads(result) == obj
    assert "\n" in result


def test_safe_json_dumps_big_integers():
    """Test fallback for integers outside the 64-bit range."""
    obj = {"big": 2 ** 70}
    assert json.loads(safe_json_dumps(obj)) == obj


@given(st.dictionaries(st.text(min_size=1), st.integers()))
def test_json_roundtrip(data):
    """Property test: JSON serialization roundtrip."""
    json_str = safe_json_dumps(data)
    result = json.loads(json_str)
    assert result == data
