"""
Key-value store behind every ledger.

Each ledger snapshot is one JSON document under one key. Two backends:
- SQLiteStore: durable, ~/.wonbyte/progress.db by default
- MemoryStore: in-process, for tests and throwaway sessions

Storage failures never raise: they are logged and reported as a False
return (writes) or the caller's default (reads).
"""

import copy
import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

from wonbyte.config import DEFAULT_DATA_DIR, DEFAULT_DB_NAME, DEFAULT_NAMESPACE, load_settings

logger = logging.getLogger(__name__)

DEFAULT_STORE_DB = DEFAULT_DATA_DIR / DEFAULT_DB_NAME


class StorageKey(str, Enum):
    """Keys owned by this application, one per ledger."""
    USER_PROFILE = "wonbyte_user_profile"
    LEARNING_STATS = "wonbyte_learning_stats"
    VOCABULARY_LIST = "wonbyte_vocabulary_list"
    BOOKMARKED_TEXTS = "wonbyte_bookmarked_texts"
    WRONG_ANSWERS = "wonbyte_wrong_answers"
    GAME_DATA = "wonbyte_game_data"
    PREFERENCES = "wonbyte_preferences"


def _key_name(key: StorageKey | str) -> str:
    return key.value if isinstance(key, StorageKey) else key


def encode_value(value: Any) -> str:
    """Serialize deterministically so an unchanged value re-saves byte-identical."""
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"), allow_nan=False)


class KeyValueStore:
    """
    JSON codec, error policy and write lock shared by the backends.

    Subclasses implement the raw string operations. Ledgers wrap each
    read-modify-write in transaction() so concurrent writers in one
    process cannot lose updates.
    """

    # Exceptions the backend may raise; these are logged, never propagated
    backend_errors: tuple[type[Exception], ...] = (OSError,)

    def __init__(self):
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["KeyValueStore"]:
        """Hold the store lock across a read-modify-write."""
        with self._lock:
            yield self

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def save(self, key: StorageKey | str, value: Any) -> bool:
        """Persist value under key. Returns False (after logging) on failure."""
        name = _key_name(key)
        try:
            text = encode_value(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Storage save error for {name}: cannot serialize value: {e}")
            return False

        with self._lock:
            try:
                self._write(name, text)
            except self.backend_errors as e:
                logger.error(f"Storage save error for {name}: {e}")
                return False
        return True

    def load(self, key: StorageKey | str, default: Any = None) -> Any:
        """Load the value under key, or a copy of default if absent or unreadable."""
        name = _key_name(key)
        with self._lock:
            try:
                text = self._read(name)
            except self.backend_errors as e:
                logger.error(f"Storage load error for {name}: {e}")
                return copy.deepcopy(default)

        if text is None:
            return copy.deepcopy(default)

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Storage load error for {name}: corrupt JSON: {e}")
            return copy.deepcopy(default)

    def remove(self, key: StorageKey | str) -> bool:
        name = _key_name(key)
        with self._lock:
            try:
                self._delete([name])
            except self.backend_errors as e:
                logger.error(f"Storage remove error for {name}: {e}")
                return False
        return True

    def clear(self) -> bool:
        """Remove every application key in one locked operation."""
        names = [key.value for key in StorageKey]
        with self._lock:
            try:
                self._delete(names)
            except self.backend_errors as e:
                logger.error(f"Storage clear error: {e}")
                return False
        logger.info("Cleared all stored learning data")
        return True

    def get_usage(self) -> int:
        """Approximate bytes used: key length plus value length per entry."""
        with self._lock:
            try:
                return sum(len(name) + len(text) for name, text in self._items())
            except self.backend_errors as e:
                logger.error(f"Storage usage error: {e}")
                return 0

    def format_usage(self) -> str:
        return f"{self.get_usage() / 1024:.2f} KB"

    # -------------------------------------------------------------------------
    # Backend hooks
    # -------------------------------------------------------------------------

    def _read(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, name: str, text: str):
        raise NotImplementedError

    def _delete(self, names: list[str]):
        raise NotImplementedError

    def _items(self) -> list[tuple[str, str]]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Dictionary-backed store; contents vanish with the object."""

    def __init__(self):
        super().__init__()
        self._data: dict[str, str] = {}

    def _read(self, name: str) -> Optional[str]:
        return self._data.get(name)

    def _write(self, name: str, text: str):
        self._data[name] = text

    def _delete(self, names: list[str]):
        for name in names:
            self._data.pop(name, None)

    def _items(self) -> list[tuple[str, str]]:
        return list(self._data.items())


class SQLiteStore(KeyValueStore):
    """
    Store snapshots in a SQLite database.

    One row per (namespace, key) so several learners can share a file.
    """

    backend_errors = (sqlite3.Error, OSError)

    def __init__(self, db_path: Optional[Path] = None, namespace: str = DEFAULT_NAMESPACE):
        """
        Initialize the store.

        Args:
            db_path: Path to the database (default: ~/.wonbyte/progress.db)
            namespace: Learner namespace inside the database
        """
        super().__init__()
        self.db_path = Path(db_path) if db_path else DEFAULT_STORE_DB
        self.namespace = namespace
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (namespace, key)
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _read(self, name: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                """SELECT value FROM kv_store WHERE namespace = ? AND key = ?""",
                (self.namespace, name)
            ).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def _write(self, name: str, text: str):
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            conn.execute(
                """INSERT INTO kv_store (namespace, key, value, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(namespace, key) DO UPDATE SET
                     value = excluded.value,
                     updated_at = excluded.updated_at""",
                (self.namespace, name, text, now)
            )
            conn.commit()
        finally:
            conn.close()

    def _delete(self, names: list[str]):
        conn = self._get_connection()
        try:
            conn.executemany(
                "DELETE FROM kv_store WHERE namespace = ? AND key = ?",
                [(self.namespace, name) for name in names]
            )
            conn.commit()
        finally:
            conn.close()

    def _items(self) -> list[tuple[str, str]]:
        conn = self._get_connection()
        try:
            rows = conn.execute(
                "SELECT key, value FROM kv_store WHERE namespace = ?",
                (self.namespace,)
            ).fetchall()
            return [(row["key"], row["value"]) for row in rows]
        finally:
            conn.close()


# -----------------------------------------------------------------------------
# Process-wide default
# -----------------------------------------------------------------------------

_default_store: Optional[KeyValueStore] = None
_default_store_lock = threading.Lock()


def get_default_store() -> KeyValueStore:
    """Return the lazily created store configured by the environment."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            settings = load_settings()
            _default_store = SQLiteStore(settings.db_path, namespace=settings.namespace)
            logger.debug(f"Opened default store at {settings.db_path} ({settings.namespace})")
        return _default_store


def set_default_store(store: Optional[KeyValueStore]):
    """Replace (or with None, reset) the process-wide store."""
    global _default_store
    with _default_store_lock:
        _default_store = store
