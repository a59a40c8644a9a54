from __future__ import annotations

import json
from pathlib import Path

import pytest

from catcommand.presentation.cli import config
from catcommand.presentation.cli.save_slots import SaveSlotStore


def test_empty_store_lists_three_empty_slots(tmp_path: Path) -> None:
    store = SaveSlotStore(base_dir=tmp_path)
    slots = store.list_slots()
    assert [slot.slot for slot in slots] == [1, 2, 3]
    assert not any(slot.exists for slot in slots)


def test_write_then_read_slot(tmp_path: Path) -> None:
    store = SaveSlotStore(base_dir=tmp_path / "saves")
    payload = {"metadata": {"name": "Run", "room": 2}, "state": {}}

    store.write_slot(2, payload)

    assert store.read_slot(2) == payload
    listed = store.list_slots()[1]
    assert listed.exists and listed.metadata == {"name": "Run", "room": 2}
    assert not (tmp_path / "saves" / "slot_2.json.tmp").exists()


def test_corrupt_slot_is_flagged(tmp_path: Path) -> None:
    (tmp_path / "slot_1.json").write_text("{oops", encoding="utf-8")
    (tmp_path / "slot_3.json").write_text(json.dumps({"state": {}}), encoding="utf-8")
    slots = SaveSlotStore(base_dir=tmp_path).list_slots()
    assert slots[0].is_corrupt
    assert not slots[1].exists
    assert slots[2].is_corrupt


def test_slot_index_is_validated(tmp_path: Path) -> None:
    store = SaveSlotStore(base_dir=tmp_path)
    with pytest.raises(ValueError):
        store.write_slot(0, {})
    with pytest.raises(ValueError):
        store.read_slot(4)


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    assert config.load_config(tmp_path / "config.json") == {"tick_interval_seconds": 1.0, "log_lines": 10}


def test_config_values_are_clamped(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"tick_interval_seconds": -3, "log_lines": 0}), encoding="utf-8")
    assert config.load_config(path) == {"tick_interval_seconds": 0.0, "log_lines": 1}


def test_bad_config_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"tick_interval_seconds": "fast", "log_lines": True}), encoding="utf-8")
    assert config.load_config(path) == config.default_config()


def test_user_data_dir_on_posix(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config.os, "name", "posix")
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
    assert config.get_save_dir() == tmp_path / ".config" / "cat_command" / "saves"
