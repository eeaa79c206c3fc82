"""Tests for the headless host."""

import asyncio

import pytest

from neural_os.apps import AppManager, JSONFileStore
from neural_os.blueprint import GenerationResult
from neural_os.blueprint.models import Archetype
from neural_os.core import Settings
from neural_os.host import serve_async


@pytest.mark.integration
@pytest.mark.asyncio
async def test_host_ticks_saved_timers(tmp_path):
    path = tmp_path / "apps.json"
    seed = AppManager(JSONFileStore(path))
    app = seed.apply_generation(GenerationResult(
        tool_name="Tea",
        archetype=Archetype.REGULATOR,
        blueprint=[{"type": "Timer", "value_key": "time"}],
        initial_state={"time": 2, "is_running": True, "finished": False},
    ))

    stop = asyncio.Event()
    settings = Settings(store_path=str(path), tick_interval=0.01)
    host = asyncio.create_task(serve_async(settings, stop=stop))
    await asyncio.sleep(0.2)
    stop.set()
    manager = await host

    assert manager.get_app(app.id).data == {"time": 0, "is_running": False, "finished": True}
    assert AppManager(JSONFileStore(path)).get_app(app.id).data["finished"] is True
