"""Validation tests."""

import pytest
from hypothesis import given, strategies as st
from returns.result import Failure, Success

from neural_os.core import (
    BlueprintValidator,
    BuildRequest,
    ValidationError,
    validate_blueprint,
    validate_json_depth,
)


def test_build_request_valid():
    """Test valid build request."""
    req = BuildRequest(message="Make a tea timer")
    assert req.message == "Make a tea timer"
    assert req.app_id is None


def test_build_request_empty():
    """Test empty message validation."""
    with pytest.raises(Exception):
        BuildRequest(message="")


def test_build_request_whitespace():
    """Test whitespace-only message validation."""
    with pytest.raises(Exception):
        BuildRequest(message="   ")


def test_build_request_immutable():
    """Test requests are frozen."""
    req = BuildRequest(message="hi")
    with pytest.raises(Exception):
        req.message = "changed"


def test_validate_json_depth():
    """Test JSON depth validation."""
    shallow = {"a": {"b": {"c": 1}}}
    validate_json_depth(shallow, max_depth=5)

    deep = {"level": 1}
    current = deep
    for i in range(25):
        current["nested"] = {"level": i + 2}
        current = current["nested"]

    with pytest.raises(ValidationError):
        validate_json_depth(deep, max_depth=20)


def test_blueprint_validator_accepts_blocks_and_strings():
    """Test a list of objects and bare strings is a valid blueprint."""
    BlueprintValidator.validate([{"type": "Text"}, "Hello"])


@pytest.mark.parametrize("blueprint", [{"type": "Text"}, "Text", None, [1], [[{"type": "Text"}]]])
def test_blueprint_validator_rejects_bad_shapes(blueprint):
    """Test non-list blueprints and non-object entries are rejected."""
    with pytest.raises(ValidationError):
        BlueprintValidator.validate(blueprint)


def test_validate_blueprint_result():
    """Test Result pattern version."""
    assert validate_blueprint([{"type": "Stat"}]) == Success(None)

    result = validate_blueprint("nope")
    assert isinstance(result, Failure)
    assert result.failure().field == "blueprint"


def test_validate_blueprint_depth_limit():
    """Test the depth limit applies to blueprints."""
    node = {"type": "Text"}
    for _ in range(10):
        node = {"type": "Card", "children": [node]}

    assert isinstance(validate_blueprint([node], max_depth=5), Failure)
    assert validate_blueprint([node], max_depth=50) == Success(None)


@given(st.text(min_size=1, max_size=1000))
def test_message_validation_property(message):
    """Property test: Any non-empty string should be valid."""
    if message.strip():
        req = BuildRequest(message=message)
        assert req.message == message.strip()
