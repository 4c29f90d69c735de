"""
StudyCoordinator - cross-ledger effects of learner actions.

Provides:
- Quiz submission (stats, wrong-answer notebook, rewards)
- Vocabulary saving and review sessions
- Wrong-answer retries
- Daily login, quests and milestone badges
- A combined progress summary
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel

from wonbyte.schemas import (
    BookmarkEntry,
    DailyStatBucket,
    GameData,
    LearningStats,
    NewVocabulary,
    NewWrongAnswer,
    QuestDefinition,
    QuestPeriod,
    RetryOutcome,
    RewardCatalog,
    UserProfile,
    VocabularyEntry,
    percent,
)
from wonbyte.utils.dates import Clock, date_key, iso_week_key, system_clock

from .bookmarks import BookmarkLedger
from .game import GameLedger, load_reward_catalog
from .profile import ProfileStore
from .stats import LearningStatsLedger
from .store import KeyValueStore, get_default_store
from .vocabulary import VocabularyLedger
from .wrong_answers import WrongAnswerLedger

logger = logging.getLogger(__name__)

CONTEXT_EXCERPT_LENGTH = 200
MINUTES_PER_REVIEWED_WORD = 0.5
MASTER_BADGE_ACCURACY = 0.9
BONUS_ACCURACY = 0.7


@dataclass
class QuizResult:
    """One graded answer from a reading-comprehension quiz."""
    question: str
    correct_answer: str
    correct: bool
    user_answer: Optional[str] = None   # None: left unanswered
    type: str = "multiple_choice"
    explanation: str = ""


@dataclass
class QuizScore:
    correct: int
    total: int
    percentage: int
    wrong_answer_ids: list[str] = field(default_factory=list)


@dataclass
class QuestStatus:
    quest: QuestDefinition
    period_key: str
    progress: int
    complete: bool
    claimed: bool


@dataclass
class StudySummary:
    """Everything the dashboard shows, read in one pass."""
    stats: LearningStats
    today: DailyStatBucket
    game: GameData
    profile: UserProfile
    vocabulary_count: int
    unmastered_count: int
    unsolved_count: int
    bookmark_count: int
    daily_goal_percent: int


def excerpt(text: str, length: int = CONTEXT_EXCERPT_LENGTH) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


class StudyCoordinator:
    """
    Sequence the ledger updates behind each learner action.

    Ledgers never call one another; the coordinator owns one of each,
    all sharing the same store and clock.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Optional[Clock] = None,
        catalog: Optional[RewardCatalog] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            store: Store shared by all ledgers (default: process-wide store)
            clock: Clock deciding "now" and "today" (default: system clock)
            catalog: Reward catalog (default: configured rewards.yaml)
        """
        self.store = store or get_default_store()
        self.clock = clock or system_clock()
        self.catalog = catalog or load_reward_catalog()

        self.stats = LearningStatsLedger(self.store, self.clock)
        self.vocabulary = VocabularyLedger(self.store, self.clock)
        self.wrong_answers = WrongAnswerLedger(self.store, self.clock)
        self.bookmarks = BookmarkLedger(self.store, self.clock)
        self.game = GameLedger(self.store, self.clock, self.catalog)
        self.profile = ProfileStore(self.store, self.clock)

    def _grant(self, event: str, times: int = 1) -> GameData:
        rule = self.catalog.reward(event)
        self.game.add_points(rule.points * times)
        return self.game.add_exp(rule.exp * times)

    # -------------------------------------------------------------------------
    # Quizzes and sessions
    # -------------------------------------------------------------------------

    def submit_quiz(
        self,
        results: Iterable[QuizResult],
        context: str = "",
        grade_level: Optional[str] = None,
    ) -> QuizScore:
        """
        Grade a finished quiz.

        Answered-but-wrong results go to the wrong-answer notebook with an
        excerpt of the passage; answered results count as solved problems.
        """
        results = list(results)
        answered = [r for r in results if r.user_answer is not None]
        correct = sum(1 for r in answered if r.correct)

        wrong_ids = []
        for result in answered:
            if result.correct:
                continue
            entries = self.wrong_answers.add_wrong_answer(NewWrongAnswer(
                question=result.question,
                user_answer=result.user_answer,
                correct_answer=result.correct_answer,
                type=result.type,
                context=excerpt(context),
                explanation=result.explanation,
                grade_level=grade_level,
            ))
            wrong_ids.append(entries[0].id)

        if answered:
            self.stats.update_stats(problems_solved=len(answered), correct_answers=correct)
        if correct:
            self._grant("quiz_correct", correct)
        self.check_milestone_badges()

        logger.info(f"Quiz submitted: {correct}/{len(results)} correct, {len(wrong_ids)} saved for retry")
        return QuizScore(
            correct=correct,
            total=len(results),
            percentage=percent(correct, len(results)),
            wrong_answer_ids=wrong_ids,
        )

    def finish_session(self, minutes: int, texts_read: int = 0) -> LearningStats:
        """Close a study session: one session, its minutes and texts."""
        stats = self.stats.update_stats(sessions=1, time=minutes, texts_read=texts_read)
        self.check_milestone_badges()
        return stats

    # -------------------------------------------------------------------------
    # Vocabulary
    # -------------------------------------------------------------------------

    def save_vocabulary(self, words: Iterable[Mapping[str, Any] | NewVocabulary]) -> int:
        """Save extracted words; returns how many were new."""
        added = 0
        for word in words:
            before = len(self.vocabulary.get_vocabulary())
            if len(self.vocabulary.add_vocabulary(word)) > before:
                added += 1
        if added:
            self.stats.update_stats(vocabulary_learned=added)
        return added

    def review_word(self, entry_id: str, correct: bool) -> Optional[VocabularyEntry]:
        entry = self.vocabulary.record_review(entry_id, correct)
        if entry is not None and correct:
            self._grant("word_review_correct")
        return entry

    def complete_vocabulary_review(self, reviewed: int, correct: int) -> GameData:
        """
        Close a review session of `reviewed` words, `correct` of them right.

        High accuracy unlocks the vocabulary master badge; good accuracy
        earns a smaller point bonus.
        """
        if correct > reviewed:
            raise ValueError("correct cannot exceed reviewed")

        self.stats.update_stats(
            vocabulary_learned=reviewed,
            time=math.floor(reviewed * MINUTES_PER_REVIEWED_WORD + 0.5),
        )
        if reviewed == 0:
            return self.game.get_game_data()

        self._grant("review_completion_per_word", reviewed)
        accuracy = correct / reviewed
        if accuracy >= MASTER_BADGE_ACCURACY:
            self.game.unlock_badge("vocabulary_master")
        elif accuracy >= BONUS_ACCURACY:
            self._grant("review_accuracy_bonus")
        return self.game.get_game_data()

    # -------------------------------------------------------------------------
    # Wrong answers
    # -------------------------------------------------------------------------

    def retry_wrong_answer(self, entry_id: str, answer: str) -> Optional[RetryOutcome]:
        outcome = self.wrong_answers.record_retry(entry_id, answer)
        if outcome is None:
            return None

        self.stats.update_stats(problems_solved=1, correct_answers=1 if outcome.correct else 0)
        if outcome.correct:
            self._grant("retry_correct")
            if not self.wrong_answers.get_unsolved_problems():
                self.game.unlock_badge("perfect_learner")
        return outcome

    # -------------------------------------------------------------------------
    # Bookmarks and profile
    # -------------------------------------------------------------------------

    def use_bookmark(self, entry_id: str) -> Optional[BookmarkEntry]:
        return self.bookmarks.use_bookmark(entry_id)

    def update_profile(self, patch: Mapping[str, Any] | BaseModel) -> UserProfile:
        profile = self.profile.update_profile(patch)
        self._grant("profile_update")
        return profile

    def daily_goal_progress(self) -> int:
        """Percent of today's goal minutes studied, capped at 100."""
        goal = self.profile.get_profile().daily_goal
        return min(100, percent(self.stats.get_today_stats().time, goal))

    # -------------------------------------------------------------------------
    # Rewards
    # -------------------------------------------------------------------------

    def claim_daily_login(self) -> bool:
        return self.game.claim_daily_login()

    def metric_value(self, metric: str) -> int:
        """Current value of a badge/quest metric."""
        if metric == "level":
            return self.game.get_game_data().level
        if metric.startswith("today_"):
            today = self.stats.get_today_stats()
            return getattr(today, {
                "today_texts": "texts",
                "today_vocabulary": "vocabulary",
                "today_problems": "problems",
                "today_time": "time",
            }[metric])
        if metric.startswith("week_"):
            week = self.stats.get_range_totals(7)
            if metric == "week_accuracy":
                return percent(week.correct, week.problems)
            return {"week_texts": week.texts, "week_vocabulary": week.vocabulary}[metric]

        stats = self.stats.get_stats()
        if metric == "problems_solved":
            return stats.problems_solved
        if metric == "weekly_streak":
            return stats.weekly_streak
        if metric == "active_days":
            return stats.active_days
        raise ValueError(f"Unknown metric: {metric}")

    def _period_key(self, quest: QuestDefinition) -> str:
        today = self.clock().date()
        if quest.period == QuestPeriod.WEEKLY:
            return iso_week_key(today)
        return date_key(today)

    def quest_progress(self, quest_id: str) -> QuestStatus:
        quest = self.catalog.quest(quest_id)
        if quest is None:
            raise ValueError(f"Unknown quest: {quest_id}")
        period_key = self._period_key(quest)
        progress = self.metric_value(quest.metric)
        return QuestStatus(
            quest=quest,
            period_key=period_key,
            progress=progress,
            complete=progress >= quest.target,
            claimed=f"{quest_id}@{period_key}" in self.game.get_game_data().claimed_quests,
        )

    def claim_quest(self, quest_id: str) -> bool:
        """Claim a completed quest for the current period."""
        status = self.quest_progress(quest_id)
        if not status.complete:
            return False
        return self.game.claim_quest(quest_id, status.period_key)

    def check_milestone_badges(self) -> list[str]:
        """Unlock every threshold badge whose metric is met; returns new ids."""
        unlocked = []
        owned = set(self.game.get_game_data().badges)
        for badge in self.catalog.badges:
            if badge.metric is None or badge.id in owned:
                continue
            if self.metric_value(badge.metric) >= badge.threshold:
                self.game.unlock_badge(badge.id)
                unlocked.append(badge.id)
        return unlocked

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def summary(self) -> StudySummary:
        vocabulary = self.vocabulary.get_vocabulary()
        return StudySummary(
            stats=self.stats.get_stats(),
            today=self.stats.get_today_stats(),
            game=self.game.get_game_data(),
            profile=self.profile.get_profile(),
            vocabulary_count=len(vocabulary),
            unmastered_count=sum(1 for v in vocabulary if not v.mastered),
            unsolved_count=len(self.wrong_answers.get_unsolved_problems()),
            bookmark_count=len(self.bookmarks.get_bookmarks()),
            daily_goal_percent=self.daily_goal_progress(),
        )

    def reset_all(self) -> bool:
        """Erase every ledger."""
        return self.store.clear()
