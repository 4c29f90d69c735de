"""Tests for the key-value store backends and their error policy."""

import sqlite3
import threading

import pytest

from wonbyte.ledger import (
    GameLedger,
    MemoryStore,
    SQLiteStore,
    StorageKey,
    get_default_store,
    set_default_store,
)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLiteStore(tmp_path / "progress.db")


class TestStoreContract:
    """Behaviour shared by every backend."""

    def test_save_and_load(self, any_store):
        assert any_store.save(StorageKey.GAME_DATA, {"level": 2, "badges": ["x"]})
        assert any_store.load(StorageKey.GAME_DATA) == {"level": 2, "badges": ["x"]}

    def test_string_and_enum_keys_are_the_same(self, any_store):
        any_store.save("wonbyte_game_data", {"a": 1})
        assert any_store.load(StorageKey.GAME_DATA) == {"a": 1}

    def test_missing_key_returns_default_copy(self, any_store):
        default = {"items": []}
        loaded = any_store.load("absent", default)
        assert loaded == default
        loaded["items"].append("x")
        assert default == {"items": []}

    def test_korean_text_round_trips(self, any_store):
        any_store.save("k", {"word": "문해력"})
        assert any_store.load("k") == {"word": "문해력"}

    def test_unserializable_value_returns_false(self, any_store):
        assert any_store.save("k", {"bad": {1, 2}}) is False
        assert any_store.save("k", {"bad": float("nan")}) is False
        assert any_store.load("k", "default") == "default"

    def test_remove(self, any_store):
        any_store.save("k", 1)
        assert any_store.remove("k") is True
        assert any_store.load("k") is None
        assert any_store.remove("k") is True

    def test_clear_removes_only_application_keys(self, any_store):
        for key in StorageKey:
            any_store.save(key, {"v": 1})
        any_store.save("other_app_key", {"v": 2})

        assert any_store.clear() is True

        for key in StorageKey:
            assert any_store.load(key) is None
        assert any_store.load("other_app_key") == {"v": 2}

    def test_usage(self, any_store):
        assert any_store.get_usage() == 0
        any_store.save("ab", "xyz")
        # key (2) + '"xyz"' (5)
        assert any_store.get_usage() == 7
        assert any_store.format_usage() == "0.01 KB"

    def test_resave_is_byte_identical(self, any_store):
        any_store.save("k", {"b": [3, 2, 1], "a": {"z": None, "y": "값"}})
        before = any_store._read("k")
        any_store.save("k", any_store.load("k"))
        assert any_store._read("k") == before


class TestMemoryStore:

    def test_corrupt_json_returns_default(self):
        store = MemoryStore()
        store._write(StorageKey.GAME_DATA.value, "{not json")
        assert store.load(StorageKey.GAME_DATA, {"fallback": True}) == {"fallback": True}

    def test_transaction_serializes_writers(self, catalog):
        store = MemoryStore()
        ledger = GameLedger(store, catalog=catalog)

        def spend():
            for _ in range(50):
                ledger.add_points(1)

        threads = [threading.Thread(target=spend) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert ledger.get_game_data().points == 400


class TestSQLiteStore:

    def test_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "nested" / "progress.db"
        SQLiteStore(db_path).save(StorageKey.USER_PROFILE, {"nickname": "민지"})
        assert SQLiteStore(db_path).load(StorageKey.USER_PROFILE) == {"nickname": "민지"}

    def test_namespaces_are_isolated(self, tmp_path):
        db_path = tmp_path / "progress.db"
        first = SQLiteStore(db_path, namespace="minji")
        second = SQLiteStore(db_path, namespace="junho")

        first.save(StorageKey.GAME_DATA, {"points": 10})
        assert second.load(StorageKey.GAME_DATA) is None

        second.clear()
        assert first.load(StorageKey.GAME_DATA) == {"points": 10}

    def test_write_failure_is_logged_not_raised(self, tmp_path, monkeypatch, caplog):
        store = SQLiteStore(tmp_path / "progress.db")

        def broken(*args):
            raise sqlite3.OperationalError("database or disk is full")

        monkeypatch.setattr(store, "_write", broken)
        assert store.save("k", {"a": 1}) is False
        assert "database or disk is full" in caplog.text

    def test_read_failure_returns_default(self, tmp_path, monkeypatch):
        store = SQLiteStore(tmp_path / "progress.db")

        def broken(*args):
            raise sqlite3.DatabaseError("file is not a database")

        monkeypatch.setattr(store, "_read", broken)
        assert store.load("k", 42) == 42

    def test_ledger_survives_failed_writes(self, tmp_path, monkeypatch, catalog):
        store = SQLiteStore(tmp_path / "progress.db")

        def broken(*args):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store, "_write", broken)
        data = GameLedger(store, catalog=catalog).add_points(5)
        assert data.points == 5


class TestDefaultStore:

    def test_lazily_created_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WONBYTE_DB_PATH", str(tmp_path / "default.db"))
        monkeypatch.setenv("WONBYTE_NAMESPACE", "minji")
        set_default_store(None)
        try:
            store = get_default_store()
            assert isinstance(store, SQLiteStore)
            assert store.db_path == tmp_path / "default.db"
            assert store.namespace == "minji"
            assert get_default_store() is store
        finally:
            set_default_store(None)

    def test_ledgers_fall_back_to_default_store(self, catalog):
        store = MemoryStore()
        set_default_store(store)
        try:
            GameLedger(catalog=catalog).add_points(3)
            assert store.load(StorageKey.GAME_DATA)["points"] == 3
        finally:
            set_default_store(None)


class TestSnapshotRoundTrip:
    """Re-saving each ledger's loaded snapshot leaves the stored text unchanged."""

    @staticmethod
    def _assert_resave_identical(store, key, resave):
        before = store._read(key.value)
        assert before is not None
        resave()
        assert store._read(key.value) == before

    def test_learning_stats(self, store, clock, stats_ledger):
        stats_ledger.update_stats(time=12, texts_read=1, problems_solved=3, correct_answers=2)
        clock.advance(days=1)
        stats_ledger.update_stats(vocabulary_learned=4, sessions=1)
        stats_ledger.add_achievement("first_week")
        self._assert_resave_identical(
            store, StorageKey.LEARNING_STATS,
            lambda: stats_ledger._save(stats_ledger.get_stats()),
        )

    def test_vocabulary(self, store, clock, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "우정", "synonyms": ["친분"], "difficulty": 3})[0]
        clock.advance(hours=2)
        vocabulary_ledger.record_review(entry.id, True)
        self._assert_resave_identical(
            store, StorageKey.VOCABULARY_LIST,
            lambda: vocabulary_ledger._save_entries(vocabulary_ledger.get_vocabulary()),
        )

    def test_wrong_answers(self, store, clock, wrong_answer_ledger):
        entry = wrong_answer_ledger.add_wrong_answer({"question": "주인공은?", "correct_answer": "토끼"})[0]
        clock.advance(minutes=30)
        wrong_answer_ledger.record_retry(entry.id, "거북")
        self._assert_resave_identical(
            store, StorageKey.WRONG_ANSWERS,
            lambda: wrong_answer_ledger._save_entries(wrong_answer_ledger.get_wrong_answers()),
        )

    def test_bookmarks(self, store, clock, bookmark_ledger):
        entry = bookmark_ledger.add_bookmark({"content": "옛날 옛적에", "tags": ["전래동화"]})[0]
        clock.advance(days=1)
        bookmark_ledger.use_bookmark(entry.id)
        self._assert_resave_identical(
            store, StorageKey.BOOKMARKED_TEXTS,
            lambda: bookmark_ledger._save_entries(bookmark_ledger.get_bookmarks()),
        )

    def test_game_data(self, store, game_ledger):
        game_ledger.claim_daily_login()
        game_ledger.add_exp(150)
        game_ledger.unlock_badge("first_step")
        game_ledger.claim_quest("daily_read", "2026-10-19")
        self._assert_resave_identical(
            store, StorageKey.GAME_DATA,
            lambda: game_ledger._save(game_ledger.get_game_data()),
        )

    def test_user_profile(self, store, profile_store):
        profile_store.update_profile({"nickname": "민지", "interests": ["과학"], "grade_level": "elem5"})
        self._assert_resave_identical(
            store, StorageKey.USER_PROFILE,
            lambda: profile_store._persist(profile_store.get_profile().model_dump(mode="json")),
        )
