"""
VocabularyLedger - the learner's personal word list.

Words are unique by exact spelling. Review results are recorded here so
the mastery rule lives in one place.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from wonbyte.schemas import MASTERY_THRESHOLD, NewVocabulary, VocabularyEntry
from wonbyte.utils.ids import generate_id

from .base import CollectionLedger
from .store import StorageKey

logger = logging.getLogger(__name__)


class VocabularyLedger(CollectionLedger[VocabularyEntry]):
    """Saved words with review counters and mastery."""

    key = StorageKey.VOCABULARY_LIST
    entry_model = VocabularyEntry

    def get_vocabulary(self) -> list[VocabularyEntry]:
        return self._load_entries()

    def get_entry(self, entry_id: str) -> Optional[VocabularyEntry]:
        return self._get(entry_id)

    def add_vocabulary(self, word: Mapping[str, Any] | NewVocabulary) -> list[VocabularyEntry]:
        """Append a word unless the same spelling is already saved."""
        if not isinstance(word, NewVocabulary):
            word = NewVocabulary.model_validate(word)

        with self.store.transaction():
            vocabulary = self._load_entries()
            if any(entry.word == word.word for entry in vocabulary):
                logger.debug(f"Word already saved: {word.word}")
                return vocabulary

            vocabulary.append(VocabularyEntry(
                **word.model_dump(),
                id=generate_id("vocab"),
                added_date=self._now(),
            ))
            self._save_entries(vocabulary)
            return vocabulary

    def update_vocabulary(self, entry_id: str, patch: Mapping[str, Any] | BaseModel) -> list[VocabularyEntry]:
        """Merge patch into the entry with this id; unknown ids are ignored."""
        return self._update(entry_id, patch)

    def remove_vocabulary(self, entry_id: str) -> list[VocabularyEntry]:
        return self._remove(entry_id)

    def get_unmastered_vocabulary(self) -> list[VocabularyEntry]:
        return [entry for entry in self._load_entries() if not entry.mastered]

    def record_review(self, entry_id: str, correct: bool) -> Optional[VocabularyEntry]:
        """
        Record one quiz review of a word.

        Mastery is set once the correct count reaches MASTERY_THRESHOLD.
        Returns the updated entry, or None for an unknown id.
        """
        with self.store.transaction():
            entry = self._get(entry_id)
            if entry is None:
                return None
            correct_count = entry.correct_count + (1 if correct else 0)
            self._update(entry_id, {
                "review_count": entry.review_count + 1,
                "correct_count": correct_count,
                "last_review_date": self._now(),
                "mastered": correct_count >= MASTERY_THRESHOLD,
            })
            return self._get(entry_id)

    def mark_seen(self, entry_id: str) -> Optional[VocabularyEntry]:
        """Record a flashcard flip: counts as a review without grading."""
        with self.store.transaction():
            entry = self._get(entry_id)
            if entry is None:
                return None
            self._update(entry_id, {
                "review_count": entry.review_count + 1,
                "last_review_date": self._now(),
            })
            return self._get(entry_id)

    def set_mastered(self, entry_id: str, mastered: bool) -> Optional[VocabularyEntry]:
        """Manual mastery override from the review screen."""
        with self.store.transaction():
            self._update(entry_id, {"mastered": mastered})
            return self._get(entry_id)
