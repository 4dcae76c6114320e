from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from rpg_world.cli import _build_overrides, _build_parser, _parse_tool_args, run

DESCRIPTION = "A world of floating islands bound by chains of old iron, ruled by guilds of wind-readers and ferrymen."


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for name in ("RPG_WORLD_DATA_DIR", "RPG_WORLD_STORAGE_BACKEND", "RPG_WORLD_JSON", "JSON"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _call(workspace: Path, tool: str, arguments: dict) -> int:
    return run(["--data-dir", str(workspace), "call", tool, "--args", orjson.dumps(arguments).decode()])


def test_parser_reads_global_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--data-dir", "saves", "--backend", "sqlite", "call", "get_world"])

    assert args.command == "call"
    assert args.tool == "get_world"
    assert args.args == "{}"
    assert _build_overrides(args) == {"app": {"data_dir": "saves"}, "storage": {"backend": "sqlite"}}


def test_parser_without_overrides() -> None:
    args = _build_parser().parse_args(["tree"])

    assert _build_overrides(args) == {}


def test_tool_arguments_must_be_a_json_object() -> None:
    assert _parse_tool_args('{"id": 3}') == {"id": 3}
    with pytest.raises(ValueError):
        _parse_tool_args("[1, 2]")
    with pytest.raises(ValueError):
        _parse_tool_args("{not json")


def test_call_persists_world(workspace: Path) -> None:
    assert _call(workspace, "create_world", {"name": "Skyreach", "description": DESCRIPTION}) == 0
    assert _call(workspace, "create_location", {"parentId": 0, "name": "Harbor", "description": DESCRIPTION}) == 0

    stored = orjson.loads((workspace / "world.json").read_bytes())
    assert stored["world"]["children"][0]["name"] == "Harbor"

    assert _call(workspace, "delete_location", {"id": 0}) == 1
    assert run(["--data-dir", str(workspace), "tree"]) == 0
    assert run(["--data-dir", str(workspace), "check"]) == 0


def test_tree_without_world_fails(workspace: Path) -> None:
    assert run(["--data-dir", str(workspace), "tree"]) == 1


def test_sqlite_backend_from_flag(workspace: Path) -> None:
    assert run(["--data-dir", str(workspace), "--backend", "sqlite", "call", "create_world", "--args",
                orjson.dumps({"name": "Skyreach", "description": DESCRIPTION}).decode()]) == 0

    assert (workspace / "world.db").exists()
    assert not (workspace / "world.json").exists()


def test_invalid_args_json_exits(workspace: Path) -> None:
    with pytest.raises(SystemExit):
        run(["--data-dir", str(workspace), "call", "get_world", "--args", "nope"])


def test_env_store_path_used_by_sqlite_flag(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RPG_WORLD_JSON", str(workspace / "saves" / "mine.db"))

    assert run(["--data-dir", str(workspace), "--backend", "sqlite", "call", "create_world", "--args",
                orjson.dumps({"name": "Skyreach", "description": DESCRIPTION}).decode()]) == 0

    assert (workspace / "saves" / "mine.db").exists()
    assert not (workspace / "world.db").exists()
