"""
Wonbyte Schemas - Pydantic models for the learning-progress ledger.

This module exports all schema classes for:
- Stats: daily buckets, cumulative stats, streak computation
- Vocabulary: saved words and mastery
- Wrong answers: missed problems and retry outcomes
- Bookmarks: saved reading passages
- Game: learner game snapshot and reward catalog
- Profile: learner settings
"""

# Stats schemas
from .stats import (
    DailyStatBucket,
    WeeklyDayStats,
    StatsDelta,
    LearningStats,
    STREAK_LOOKBACK_DAYS,
    DELTA_FIELD_MAP,
    compute_streak,
    percent,
)

# Vocabulary schemas
from .vocabulary import (
    NewVocabulary,
    VocabularyEntry,
    MASTERY_THRESHOLD,
)

# Wrong-answer schemas
from .wrong_answer import (
    NewWrongAnswer,
    WrongAnswerEntry,
    RetryOutcome,
    MAX_ACTIVE_RETRIES,
    answers_match,
)

# Bookmark schemas
from .bookmark import (
    NewBookmark,
    BookmarkEntry,
)

# Game schemas
from .game import (
    GameData,
    QuestPeriod,
    LevelRules,
    RewardRule,
    BadgeDefinition,
    CharacterDefinition,
    ShopItem,
    QuestDefinition,
    RewardCatalog,
    KNOWN_METRICS,
)

# Profile schemas
from .profile import (
    LearningStyle,
    GradeLevel,
    UserProfile,
)

__all__ = [
    # Stats
    'DailyStatBucket',
    'WeeklyDayStats',
    'StatsDelta',
    'LearningStats',
    'STREAK_LOOKBACK_DAYS',
    'DELTA_FIELD_MAP',
    'compute_streak',
    'percent',
    # Vocabulary
    'NewVocabulary',
    'VocabularyEntry',
    'MASTERY_THRESHOLD',
    # Wrong answers
    'NewWrongAnswer',
    'WrongAnswerEntry',
    'RetryOutcome',
    'MAX_ACTIVE_RETRIES',
    'answers_match',
    # Bookmarks
    'NewBookmark',
    'BookmarkEntry',
    # Game
    'GameData',
    'QuestPeriod',
    'LevelRules',
    'RewardRule',
    'BadgeDefinition',
    'CharacterDefinition',
    'ShopItem',
    'QuestDefinition',
    'RewardCatalog',
    'KNOWN_METRICS',
    # Profile
    'LearningStyle',
    'GradeLevel',
    'UserProfile',
]
