"""Tests for app persistence."""

import json

import pytest

from neural_os.apps import App, JSONFileStore, MemoryStore, StoreError
from neural_os.blueprint.models import Archetype


@pytest.fixture
def apps():
    return [
        App(title="Tea", archetype=Archetype.REGULATOR, blueprint=[{"type": "Timer", "value_key": "time"}], data={"time": 60}),
        App(title="Cars", archetype="accumulator", data={"count": 3}),
    ]


@pytest.mark.unit
def test_file_store_round_trip(tmp_path, apps):
    store = JSONFileStore(tmp_path / "apps.json")
    store.save(apps)

    loaded = store.load()

    assert [app.id for app in loaded] == [app.id for app in apps]
    assert loaded[0].archetype is Archetype.REGULATOR
    assert loaded[0].blueprint == [{"type": "Timer", "value_key": "time"}]
    assert loaded[1].data == {"count": 3}


@pytest.mark.unit
def test_file_store_missing_file(tmp_path):
    assert JSONFileStore(tmp_path / "absent.json").load() == []


@pytest.mark.unit
def test_file_store_creates_parent_dirs(tmp_path, apps):
    path = tmp_path / "nested" / "dir" / "apps.json"
    JSONFileStore(path).save(apps)
    assert path.exists()


@pytest.mark.unit
def test_file_store_leaves_no_temp_files(tmp_path, apps):
    JSONFileStore(tmp_path / "apps.json").save(apps)
    assert [p.name for p in tmp_path.iterdir()] == ["apps.json"]


@pytest.mark.unit
def test_file_store_corrupt_file(tmp_path):
    path = tmp_path / "apps.json"
    path.write_text("{not json")
    with pytest.raises(StoreError):
        JSONFileStore(path).load()


@pytest.mark.unit
def test_file_store_non_list(tmp_path):
    path = tmp_path / "apps.json"
    path.write_text('{"apps": []}')
    with pytest.raises(StoreError):
        JSONFileStore(path).load()


@pytest.mark.unit
def test_file_store_skips_invalid_records(tmp_path):
    path = tmp_path / "apps.json"
    path.write_text(json.dumps([
        {"id": 1712000000000, "title": "Legacy", "archetype": "Checklist", "data": {"items": []}},
        {"id": "broken"},
    ]))

    loaded = JSONFileStore(path).load()

    assert len(loaded) == 1
    assert loaded[0].id == "1712000000000"
    assert loaded[0].archetype is Archetype.CHECKLIST


@pytest.mark.unit
def test_memory_store_does_not_alias(apps):
    store = MemoryStore(apps)
    loaded = store.load()
    loaded[1].data["count"] = 99

    assert store.load()[1].data == {"count": 3}
    assert apps[1].data == {"count": 3}
