"""Tests for the wonbyte-progress command line."""

import json

import pytest

from wonbyte.cli import main
from wonbyte.ledger import GameLedger, SQLiteStore, StorageKey


@pytest.fixture()
def db_path(tmp_path, catalog):
    path = tmp_path / "progress.db"
    GameLedger(SQLiteStore(path), catalog=catalog).add_points(42)
    return path


def test_summary(db_path, capsys):
    assert main(["--db", str(db_path), "summary"]) == 0
    out = capsys.readouterr().out
    assert "Level:" in out
    assert "42 points" in out


def test_weekly(db_path, capsys):
    assert main(["--db", str(db_path), "weekly"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 8


def test_usage(db_path, capsys):
    assert main(["--db", str(db_path), "usage"]) == 0
    assert capsys.readouterr().out.strip().endswith("KB")


def test_export(db_path, tmp_path):
    output = tmp_path / "backup" / "progress.json"
    assert main(["--db", str(db_path), "export", "--output", str(output)]) == 0

    document = json.loads(output.read_text(encoding="utf-8"))
    assert set(document) == {key.value for key in StorageKey}
    assert document[StorageKey.GAME_DATA.value]["points"] == 42
    assert document[StorageKey.USER_PROFILE.value] is None


def test_clear_requires_confirmation(db_path, capsys):
    assert main(["--db", str(db_path), "clear"]) == 1
    assert "--yes" in capsys.readouterr().err
    assert SQLiteStore(db_path).load(StorageKey.GAME_DATA) is not None

    assert main(["--db", str(db_path), "clear", "--yes"]) == 0
    assert SQLiteStore(db_path).load(StorageKey.GAME_DATA) is None


def test_namespace_isolation(db_path, capsys):
    assert main(["--db", str(db_path), "--namespace", "junho", "summary"]) == 0
    assert "0 points" in capsys.readouterr().out
