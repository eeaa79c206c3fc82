"""Pytest configuration and fixtures."""

import os
import pytest
from unittest.mock import MagicMock

from neural_os.apps import AppManager, MemoryStore
from neural_os.blueprint import GenerationResult, ResponseParser, TreeRenderer
from neural_os.blueprint.models import Archetype


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['NEURAL_LOG_LEVEL'] = 'DEBUG'
    os.environ['NEURAL_STORE_PATH'] = 'test-neural-apps.json'


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def renderer():
    """Tree renderer with the default registry."""
    return TreeRenderer()


@pytest.fixture
def response_parser():
    """Response parser fixture."""
    return ResponseParser()


@pytest.fixture
def store():
    """Empty in-memory app store."""
    return MemoryStore()


@pytest.fixture
def manager(store):
    """App manager over an in-memory store."""
    return AppManager(store)


@pytest.fixture
def dispatched():
    """Recording dispatch: collects (action, payload) pairs."""
    calls = []

    def dispatch(action, payload):
        calls.append((action, payload))

    dispatch.calls = calls
    return dispatch


# ============================================================================
# Model Fixtures
# ============================================================================

@pytest.fixture
def mock_llm():
    """Mock LLM returning a timer app."""
    mock = MagicMock()
    mock.invoke.return_value = """```json
{
  "tool_name": "Laundry Timer",
  "archetype": "Regulator",
  "initial_state": {"time_remaining": 1800, "is_running": false, "finished": false},
  "blueprint": [
    {"type": "Timer", "label": "Laundry", "value_key": "time_remaining"},
    {"type": "Btn", "label": "Start", "action": "START_TIMER"}
  ],
  "message": "Built a laundry timer."
}
```"""
    return mock


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_blueprint():
    """Counter + checklist blueprint as a model would produce it."""
    return [
        {"type": "H1", "text": "Car Spotter"},
        {"type": "Stat", "label": "Red cars", "value_key": "red_cars", "icon": "Car"},
        {
            "type": "ButtonList",
            "buttons": [
                {"label": "+1", "action": "INCREMENT_COUNT", "payload": {"key": "red_cars", "amount": 1}},
                {"label": "Reset", "action": "SET_VALUE", "payload": {"key": "red_cars", "value": 0}},
            ],
        },
        {"type": "Checklist", "label": "Spotted", "items_key": "items"},
    ]


@pytest.fixture
def sample_data():
    """Data bag matching sample_blueprint."""
    return {
        "red_cars": 2,
        "items": [
            {"label": "Ferrari", "checked": False, "id": "item-1"},
            {"label": "Mini", "checked": True, "id": "item-2"},
        ],
    }


@pytest.fixture
def timer_result():
    """Generation result for a timer app."""
    return GenerationResult(
        tool_name="Tea Timer",
        archetype=Archetype.REGULATOR,
        blueprint=[
            {"type": "Timer", "value_key": "time"},
            {"type": "Btn", "label": "Start", "action": "START_TIMER"},
        ],
        initial_state={"time": 3, "is_running": False, "finished": False},
        message="Tea timer ready.",
    )


@pytest.fixture
def checklist_result():
    """Generation result for a checklist app whose items lack ids."""
    return GenerationResult(
        tool_name="Packing",
        archetype=Archetype.CHECKLIST,
        blueprint=[
            {"type": "Input", "id": "new_item", "placeholder": "Add..."},
            {"type": "Btn", "label": "Add", "action": "ADD_ITEM", "payload": {"key": "items", "value": "$INPUT:new_item"}},
            {"type": "Checklist", "items_key": "items"},
        ],
        initial_state={"items": [{"label": "Passport", "checked": False}]},
    )
