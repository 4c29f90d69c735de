"""
WrongAnswerLedger - the wrong-answer notebook.

Every missed problem becomes a new entry, newest first. Retries are graded
here: a correct retry, or reaching MAX_ACTIVE_RETRIES attempts, marks the
entry solved. Solved entries are kept as history and take no more retries.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from wonbyte.schemas import (
    MAX_ACTIVE_RETRIES,
    NewWrongAnswer,
    RetryOutcome,
    WrongAnswerEntry,
    answers_match,
)
from wonbyte.utils.ids import generate_id

from .base import CollectionLedger
from .store import StorageKey

logger = logging.getLogger(__name__)


class WrongAnswerLedger(CollectionLedger[WrongAnswerEntry]):
    """Missed problems kept for retry, newest first."""

    key = StorageKey.WRONG_ANSWERS
    entry_model = WrongAnswerEntry

    def get_wrong_answers(self) -> list[WrongAnswerEntry]:
        return self._load_entries()

    def get_entry(self, entry_id: str) -> Optional[WrongAnswerEntry]:
        return self._get(entry_id)

    def add_wrong_answer(self, problem: Mapping[str, Any] | NewWrongAnswer) -> list[WrongAnswerEntry]:
        """Prepend a new entry; the same question may be recorded many times."""
        if not isinstance(problem, NewWrongAnswer):
            problem = NewWrongAnswer.model_validate(problem)

        with self.store.transaction():
            wrong_answers = self._load_entries()
            wrong_answers.insert(0, WrongAnswerEntry(
                **problem.model_dump(),
                id=generate_id("wrong"),
                added_date=self._now(),
            ))
            self._save_entries(wrong_answers)
            return wrong_answers

    def update_wrong_answer(self, entry_id: str, patch: Mapping[str, Any] | BaseModel) -> list[WrongAnswerEntry]:
        return self._update(entry_id, patch)

    def remove_wrong_answer(self, entry_id: str) -> list[WrongAnswerEntry]:
        return self._remove(entry_id)

    def get_unsolved_problems(self) -> list[WrongAnswerEntry]:
        return [entry for entry in self._load_entries() if not entry.solved]

    def get_solved_problems(self) -> list[WrongAnswerEntry]:
        return [entry for entry in self._load_entries() if entry.solved]

    def record_retry(self, entry_id: str, answer: str) -> Optional[RetryOutcome]:
        """
        Grade a retry and apply the retirement rule.

        Args:
            entry_id: Wrong-answer entry being retried
            answer: The learner's new answer

        Returns:
            RetryOutcome with the graded result and updated entry,
            or None if no entry has this id or the entry is already solved
        """
        with self.store.transaction():
            entry = self._get(entry_id)
            if entry is None:
                logger.debug(f"No wrong answer {entry_id}, retry ignored")
                return None
            if entry.solved:
                logger.debug(f"Wrong answer {entry_id} already solved, retry ignored")
                return None

            correct = answers_match(answer, entry.correct_answer)
            review_count = entry.review_count + 1
            self._update(entry_id, {
                "review_count": review_count,
                "last_review_date": self._now(),
                "solved": correct or review_count >= MAX_ACTIVE_RETRIES,
            })
            return RetryOutcome(correct=correct, entry=self._get(entry_id))
