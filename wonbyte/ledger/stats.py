"""
LearningStatsLedger - cumulative and per-day study metrics.

Every update adds to the running totals and to today's bucket; the
consecutive-day streak is derived from the buckets on read.
"""

import logging
from typing import Mapping, Optional

from pydantic import ValidationError

from wonbyte.schemas import (
    DELTA_FIELD_MAP,
    DailyStatBucket,
    LearningStats,
    StatsDelta,
    WeeklyDayStats,
)
from wonbyte.utils.dates import date_key, last_n_days, weekday_label

from .base import Ledger
from .store import StorageKey

logger = logging.getLogger(__name__)

# Derived on read, never persisted
COMPUTED_FIELDS = {"weekly_streak", "accuracy_rate"}


class LearningStatsLedger(Ledger):
    """Track study time, problems, texts and vocabulary per day."""

    key = StorageKey.LEARNING_STATS

    def get_stats(self) -> LearningStats:
        """Load the stats snapshot, or all-zero defaults if absent or unreadable."""
        raw = self.store.load(self.key, None)
        if raw is None:
            return LearningStats()
        try:
            return LearningStats.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored learning stats unreadable, using defaults: {e}")
            return LearningStats()

    def update_stats(self, delta: Optional[Mapping[str, int] | StatsDelta] = None, **increments: int) -> LearningStats:
        """
        Add a delta to the totals and to today's bucket.

        Args:
            delta: StatsDelta or mapping of delta fields (time, texts_read,
                vocabulary_learned, problems_solved, correct_answers, sessions)
            **increments: Delta fields as keyword arguments

        Returns:
            The updated snapshot

        Raises:
            ValueError: For negative or unknown fields, or if correct answers
                would exceed problems solved
        """
        if isinstance(delta, StatsDelta):
            delta = delta.model_dump(exclude_unset=True)
        delta = StatsDelta.model_validate({**(delta or {}), **increments})

        with self.store.transaction():
            data = self.get_stats().model_dump(exclude=COMPUTED_FIELDS)
            today = date_key(self._today())

            bucket = data["daily_stats"].setdefault(today, DailyStatBucket().model_dump())
            for field, (total_field, bucket_field) in DELTA_FIELD_MAP.items():
                amount = getattr(delta, field)
                data[total_field] += amount
                if bucket_field:
                    bucket[bucket_field] += amount

            data["last_study_date"] = today
            stats = LearningStats.model_validate(data)
            self._save(stats)
            return stats

    def get_today_stats(self) -> DailyStatBucket:
        """Today's bucket, or zeros if nothing was recorded today."""
        today = date_key(self._today())
        return self.get_stats().daily_stats.get(today, DailyStatBucket())

    def get_weekly_stats(self) -> list[WeeklyDayStats]:
        """The last seven days, oldest first, zero-filled and labelled."""
        stats = self.get_stats()
        week = []
        for day in last_n_days(self._today(), 7):
            key = date_key(day)
            bucket = stats.daily_stats.get(key, DailyStatBucket())
            week.append(WeeklyDayStats(date=key, day=weekday_label(day), **bucket.model_dump()))
        return week

    def get_range_totals(self, days: int) -> DailyStatBucket:
        """Sum of the buckets over the last `days` days, today inclusive."""
        stats = self.get_stats()
        totals = DailyStatBucket()
        for day in last_n_days(self._today(), days):
            bucket = stats.daily_stats.get(date_key(day))
            if bucket is None:
                continue
            for field in DailyStatBucket.model_fields:
                setattr(totals, field, getattr(totals, field) + getattr(bucket, field))
        return totals

    def add_achievement(self, achievement_id: str) -> LearningStats:
        """Record an achievement once."""
        with self.store.transaction():
            stats = self.get_stats()
            if achievement_id in stats.achievements:
                return stats
            stats.achievements.append(achievement_id)
            self._save(stats)
            return stats

    def _save(self, stats: LearningStats) -> bool:
        return self._persist(stats.model_dump(mode="json", exclude=COMPUTED_FIELDS))
