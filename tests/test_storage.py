"""Tests for local JSON persistence."""

import json

from jobtracker.seed import seed_snapshot
from jobtracker.storage import (
    attach_persistence,
    load_snapshot,
    read_json,
    save_snapshot,
    state_path,
    write_json,
)
from jobtracker.store import AppStore


def test_save_and_load_snapshot(tmp_path, store):
    data = store.snapshot()
    path = save_snapshot(data, tmp_path)

    assert path == state_path(tmp_path)
    assert load_snapshot(tmp_path) == data
    assert not path.with_suffix(".json.tmp").exists()


def test_load_snapshot_missing(tmp_path):
    assert load_snapshot(tmp_path) is None


def test_corrupt_file_is_restored_from_backup(tmp_path):
    save_snapshot({"folders": [], "jobs": [], "marker": 1}, tmp_path)
    save_snapshot({"folders": [], "jobs": [], "marker": 2}, tmp_path)
    state_path(tmp_path).write_text("{broken", encoding="utf-8")

    data = load_snapshot(tmp_path)

    assert data["marker"] == 1
    # The primary file is rewritten from the backup
    assert json.loads(state_path(tmp_path).read_text(encoding="utf-8"))["marker"] == 1


def test_unreadable_file_without_backup(tmp_path):
    state_path(tmp_path).write_text("{broken", encoding="utf-8")
    assert load_snapshot(tmp_path) is None


def test_read_json_default(tmp_path):
    assert read_json(tmp_path / "nope.json", default={"users": []}) == {"users": []}
    write_json(tmp_path / "sub" / "x.json", {"ok": True})
    assert read_json(tmp_path / "sub" / "x.json") == {"ok": True}


def test_first_run_loads_seed_and_saves(tmp_path, queue):
    store = AppStore(notifications=queue)
    attach_persistence(store, tmp_path, seed=seed_snapshot)

    assert len(store.folders) == 3
    assert len(store.jobs) == 4
    assert load_snapshot(tmp_path)["folders"] == store.snapshot()["folders"]


def test_mutations_are_persisted_and_restored(tmp_path, queue):
    store = AppStore(notifications=queue)
    attach_persistence(store, tmp_path, seed=seed_snapshot)
    folder = store.add_folder("校招")
    store.delete_job("job-3")

    reloaded = AppStore(notifications=queue)
    attach_persistence(reloaded, tmp_path, seed=seed_snapshot)

    assert reloaded.get_folder(folder.id).name == "校招"
    assert reloaded.get_job("job-3") is None
    assert reloaded.snapshot() == store.snapshot()


def test_unsubscribe_stops_writing(tmp_path, queue):
    store = AppStore(notifications=queue)
    unsubscribe = attach_persistence(store, tmp_path)
    unsubscribe()

    store.add_folder("not saved")
    assert load_snapshot(tmp_path)["folders"] == []
