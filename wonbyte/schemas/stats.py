"""
Learning statistics schemas for Wonbyte.

Defines Pydantic models for:
- Per-day activity buckets
- The cumulative learning stats snapshot
- Stats deltas applied by the stats ledger
"""

import math
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from wonbyte.utils.dates import parse_date_key

# Streak display looks back over at most one week of active dates
STREAK_LOOKBACK_DAYS = 7


def compute_streak(dates: Iterable[str], lookback: int = STREAK_LOOKBACK_DAYS) -> int:
    """
    Count consecutive active days ending at the most recent active day.

    Dates are walked newest first; the count stops at the first gap larger
    than one day or after `lookback` dates. Returns 0 when no date exists.
    """
    ordered = sorted((parse_date_key(d) for d in dates), reverse=True)
    if not ordered:
        return 0

    streak = 1
    for i in range(1, min(len(ordered), lookback)):
        if (ordered[i - 1] - ordered[i]).days == 1:
            streak += 1
        else:
            break
    return streak


def percent(part: int, whole: int) -> int:
    """Rounded percentage (half up), 0 when whole is 0."""
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


class DailyStatBucket(BaseModel):
    """Activity recorded on one calendar day."""
    time: int = Field(default=0, ge=0)        # minutes
    problems: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)
    texts: int = Field(default=0, ge=0)
    vocabulary: int = Field(default=0, ge=0)


class WeeklyDayStats(DailyStatBucket):
    """A bucket annotated with its date and short weekday label."""
    date: str
    day: str


class StatsDelta(BaseModel):
    """Increments for one stats update. Omitted fields count as zero."""
    model_config = ConfigDict(extra="forbid")

    time: int = Field(default=0, ge=0)
    texts_read: int = Field(default=0, ge=0)
    vocabulary_learned: int = Field(default=0, ge=0)
    problems_solved: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    sessions: int = Field(default=0, ge=0)


# delta field -> (cumulative field, daily bucket field)
DELTA_FIELD_MAP = {
    "time": ("total_time", "time"),
    "texts_read": ("texts_read", "texts"),
    "vocabulary_learned": ("vocabulary_learned", "vocabulary"),
    "problems_solved": ("problems_solved", "problems"),
    "correct_answers": ("correct_answers", "correct"),
    "sessions": ("total_sessions", None),
}


class LearningStats(BaseModel):
    """Cumulative learning stats plus the per-day history."""
    total_sessions: int = Field(default=0, ge=0)
    total_time: int = Field(default=0, ge=0)
    texts_read: int = Field(default=0, ge=0)
    vocabulary_learned: int = Field(default=0, ge=0)
    problems_solved: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    daily_stats: dict[str, DailyStatBucket] = Field(default_factory=dict)
    last_study_date: Optional[str] = None
    achievements: list[str] = Field(default_factory=list)

    @field_validator('daily_stats')
    @classmethod
    def date_keys_valid(cls, v):
        for key in v:
            parse_date_key(key)
        return v

    @field_validator('achievements')
    @classmethod
    def achievements_unique(cls, v):
        return list(dict.fromkeys(v))

    @model_validator(mode='after')
    def correct_within_solved(self):
        if self.correct_answers > self.problems_solved:
            raise ValueError('correct_answers cannot exceed problems_solved')
        return self

    @computed_field
    @property
    def weekly_streak(self) -> int:
        """Consecutive active days, derived from daily_stats."""
        return compute_streak(self.daily_stats.keys())

    @computed_field
    @property
    def accuracy_rate(self) -> int:
        """Percent of solved problems answered correctly."""
        return percent(self.correct_answers, self.problems_solved)

    @property
    def active_days(self) -> int:
        return len(self.daily_stats)
