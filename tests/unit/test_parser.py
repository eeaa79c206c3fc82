"""Tests for model response parsing."""

import json

import pytest

from neural_os.blueprint import GenerationResult, parse_response
from neural_os.blueprint.models import Archetype
from neural_os.blueprint.parser import ResponseParser
from neural_os.core import ValidationError


@pytest.mark.unit
def test_parse_full_response(response_parser):
    content = json.dumps({
        "tool_name": "Car Spotter",
        "archetype": "accumulator",
        "initial_state": {"count": 0},
        "blueprint": [{"type": "Stat", "value_key": "count"}],
        "message": "Counting cars.",
    })

    result = response_parser.parse(content)

    assert result.tool_name == "Car Spotter"
    assert result.archetype is Archetype.ACCUMULATOR
    assert result.initial_state == {"count": 0}
    assert result.blueprint == [{"type": "Stat", "value_key": "count"}]
    assert result.message == "Counting cars."
    assert result.is_app


@pytest.mark.unit
def test_parse_message_only(response_parser):
    result = response_parser.parse('{"message": "What should the timer be called?"}')
    assert not result.is_app
    assert result.blueprint == []
    assert result.message == "What should the timer be called?"


@pytest.mark.unit
def test_parse_fenced_response(response_parser, mock_llm):
    result = response_parser.parse(mock_llm.invoke.return_value)
    assert result.tool_name == "Laundry Timer"
    assert result.archetype is Archetype.REGULATOR
    assert result.initial_state["time_remaining"] == 1800


@pytest.mark.unit
def test_parse_alternate_field_names(response_parser):
    result = response_parser.parse(json.dumps({
        "title": "Notes",
        "ui": [{"type": "Text", "text": "hi"}],
        "state": {"note": ""},
    }))
    assert result.tool_name == "Notes"
    assert result.blueprint[0]["type"] == "Text"
    assert result.initial_state == {"note": ""}


@pytest.mark.unit
def test_parse_stringified_blueprint_and_state(response_parser):
    """JSON documents encoded as strings inside the response are decoded."""
    content = json.dumps({
        "tool_name": "Ledger",
        "blueprint": json.dumps([
            {"type": "Btn", "action": "ADD_LIST_ITEM", "payload": json.dumps({"key": "log"})},
            {"type": "Card", "children": json.dumps([{"type": "DataList", "items_key": "log"}])},
        ]),
        "initial_state": json.dumps({"log": json.dumps([{"name": "Rent"}])}),
    })

    result = response_parser.parse(content)

    button, card = result.blueprint
    assert button["payload"] == {"key": "log"}
    assert card["children"] == [{"type": "DataList", "items_key": "log"}]
    assert result.initial_state == {"log": [{"name": "Rent"}]}


@pytest.mark.unit
def test_parse_compact_root(response_parser):
    result = response_parser.parse(json.dumps({
        "tool_name": "Counter",
        "blueprint": {"root": {"t": "Card", "c": [{"t": "H1", "p": {"x": "Hi"}}]}},
    }))
    assert result.blueprint == [{"t": "Card", "c": [{"t": "H1", "p": {"x": "Hi"}}]}]


@pytest.mark.unit
def test_parse_components_wrapper(response_parser):
    result = response_parser.parse(json.dumps({
        "tool_name": "Counter",
        "blueprint": {"components": [{"type": "Stat"}]},
    }))
    assert result.blueprint == [{"type": "Stat"}]


@pytest.mark.unit
def test_unknown_archetype_is_none(response_parser):
    result = response_parser.parse('{"tool_name": "X", "archetype": "Juggler", "blueprint": [{"type": "Text"}]}')
    assert result.archetype is None


@pytest.mark.unit
def test_blueprint_without_title_is_not_an_app(response_parser):
    result = response_parser.parse('{"blueprint": [{"type": "Text"}]}')
    assert not result.is_app


@pytest.mark.unit
@pytest.mark.parametrize("content", [
    "no json here",
    '{"tool_name": "Empty"}',
    '{"tool_name": "X", "blueprint": [1, 2]}',
])
def test_parse_errors_raise_validation_error(response_parser, content):
    with pytest.raises(ValidationError):
        response_parser.parse(content)


@pytest.mark.unit
def test_depth_limit_at_boundary():
    node = {"type": "Text"}
    for _ in range(20):
        node = {"type": "Card", "children": [node]}
    content = json.dumps({"tool_name": "Deep", "blueprint": [node]})

    with pytest.raises(ValidationError):
        ResponseParser(max_depth=10).parse(content)
    assert ResponseParser().parse(content).is_app


@pytest.mark.unit
def test_depth_limit_applies_before_expansion():
    """A tree past the interpreter's recursion limit is rejected, not crashed on."""
    node = {"type": "Text"}
    for _ in range(2000):
        node = {"type": "Card", "children": [node]}

    with pytest.raises(ValidationError, match="depth"):
        ResponseParser().parse_dict({"tool_name": "Deep", "blueprint": [node]})


@pytest.mark.unit
def test_parse_response_helper():
    result = parse_response('{"message": "hello"}')
    assert isinstance(result, GenerationResult)
    assert result.message == "hello"
