import json
from pathlib import Path

import pytest

from catcommand.data.errors import DataLoadError, DataReferenceError, DataValidationError
from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository


def _attack_gambits() -> list[dict]:
    return [{"priority": 1, "condition": "ALWAYS", "target": "ENEMY_CLOSEST", "action": "ATTACK"}]


def _enemy(name: str = "Kettle") -> dict:
    return {
        "name": name,
        "icon": "K",
        "base_stats": {"max_hp": 20, "attack": 5, "defense": 1, "speed": 3},
        "gambits": _attack_gambits(),
    }


def test_personas_repo_keeps_file_order(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    persona = {
        "name": "Zed",
        "icon": "Z",
        "base_stats": {"max_hp": 30, "attack": 4, "defense": 1, "speed": 5},
        "gambits": _attack_gambits(),
    }
    _write_json(definitions_dir / "personas.json", {"zed": persona, "abe": dict(persona, name="Abe")})
    repo = PersonasRepository(base_path=definitions_dir)

    assert [p.id for p in repo.ordered()] == ["zed", "abe"]
    assert [p.id for p in repo.all()] == ["abe", "zed"]
    assert repo.get("zed").description == ""
    assert repo.get("zed").gambits[0].active is True


def test_enemies_repo_get_missing_raises(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"kettle": _enemy()})
    repo = EnemiesRepository(base_path=definitions_dir)
    with pytest.raises(KeyError):
        repo.get("missing_enemy")


def test_enemy_without_active_gambit_is_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    enemy = _enemy()
    enemy["gambits"][0]["active"] = False
    _write_json(definitions_dir / "enemies.json", {"kettle": enemy})
    with pytest.raises(DataValidationError):
        EnemiesRepository(base_path=definitions_dir).all()


def test_unknown_gambit_vocabulary_is_rejected(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    enemy = _enemy()
    enemy["gambits"][0]["action"] = "FIREBALL"
    _write_json(definitions_dir / "enemies.json", {"kettle": enemy})
    with pytest.raises(DataValidationError):
        EnemiesRepository(base_path=definitions_dir).all()


def test_bool_is_not_accepted_as_stat(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    enemy = _enemy()
    enemy["base_stats"]["attack"] = True
    _write_json(definitions_dir / "enemies.json", {"kettle": enemy})
    with pytest.raises(DataValidationError):
        EnemiesRepository(base_path=definitions_dir).all()


def test_rooms_repo_orders_by_number(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"kettle": _enemy(), "fridge": _enemy("Fridge")})
    _write_json(
        definitions_dir / "rooms.json",
        {
            "pantry": {"number": 2, "name": "Pantry", "description": "Dark.", "enemy_ids": ["fridge", "kettle"]},
            "hall": {"number": 1, "name": "Hall", "description": "Long.", "enemy_ids": ["kettle"]},
        },
    )
    repo = RoomsRepository(base_path=definitions_dir)

    assert repo.room_count() == 2
    assert repo.get_by_number(1).id == "hall"
    assert repo.get_by_number(2).enemy_ids == ("fridge", "kettle")
    with pytest.raises(KeyError):
        repo.get_by_number(3)


def test_rooms_repo_rejects_unknown_enemy(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"kettle": _enemy()})
    _write_json(
        definitions_dir / "rooms.json",
        {"hall": {"number": 1, "name": "Hall", "description": "", "enemy_ids": ["ghost"]}},
    )
    with pytest.raises(DataReferenceError):
        RoomsRepository(base_path=definitions_dir).room_count()


def test_rooms_repo_rejects_gap_in_numbers(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"kettle": _enemy()})
    _write_json(
        definitions_dir / "rooms.json",
        {
            "hall": {"number": 1, "name": "Hall", "description": "", "enemy_ids": ["kettle"]},
            "attic": {"number": 3, "name": "Attic", "description": "", "enemy_ids": ["kettle"]},
        },
    )
    with pytest.raises(DataValidationError):
        RoomsRepository(base_path=definitions_dir).room_count()


def test_rooms_repo_rejects_empty_roster(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "enemies.json", {"kettle": _enemy()})
    _write_json(
        definitions_dir / "rooms.json",
        {"hall": {"number": 1, "name": "Hall", "description": "", "enemy_ids": []}},
    )
    with pytest.raises(DataValidationError):
        RoomsRepository(base_path=definitions_dir).room_count()


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    with pytest.raises(DataLoadError):
        PersonasRepository(base_path=definitions_dir).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "enemies.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(DataLoadError):
        EnemiesRepository(base_path=definitions_dir).all()


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir


def _write_json(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")
