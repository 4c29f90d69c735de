"""
Wonbyte Ledger - persistent learning-progress records.

This module provides:
- KeyValueStore backends: SQLiteStore, MemoryStore
- One ledger per record type: stats, vocabulary, wrong answers,
  bookmarks, game data, profile
- StudyCoordinator: cross-ledger effects of learner actions
"""

from .store import (
    StorageKey,
    KeyValueStore,
    MemoryStore,
    SQLiteStore,
    DEFAULT_STORE_DB,
    get_default_store,
    set_default_store,
)

from .stats import LearningStatsLedger
from .vocabulary import VocabularyLedger
from .wrong_answers import WrongAnswerLedger
from .bookmarks import BookmarkLedger
from .profile import ProfileStore

from .game import (
    GameLedger,
    InsufficientPointsError,
    load_reward_catalog,
)

from .coordinator import (
    StudyCoordinator,
    QuizResult,
    QuizScore,
    QuestStatus,
    StudySummary,
)

__all__ = [
    # Store
    "StorageKey",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "DEFAULT_STORE_DB",
    "get_default_store",
    "set_default_store",
    # Ledgers
    "LearningStatsLedger",
    "VocabularyLedger",
    "WrongAnswerLedger",
    "BookmarkLedger",
    "ProfileStore",
    "GameLedger",
    "InsufficientPointsError",
    "load_reward_catalog",
    # Coordinator
    "StudyCoordinator",
    "QuizResult",
    "QuizScore",
    "QuestStatus",
    "StudySummary",
]
