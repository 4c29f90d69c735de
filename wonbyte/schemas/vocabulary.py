"""
Vocabulary schemas for Wonbyte.

A learner's personal word list with per-word review progress.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Correct reviews needed before a word counts as mastered
MASTERY_THRESHOLD = 3


class NewVocabulary(BaseModel):
    """Word details supplied when saving a word to the list."""
    word: str = Field(..., min_length=1)
    meaning: str = ""
    etymology: Optional[str] = None   # e.g. the hanja behind a Sino-Korean word
    synonyms: list[str] = []
    antonyms: list[str] = []
    difficulty: int = Field(default=1, ge=1, le=5)
    example: str = ""


class VocabularyEntry(NewVocabulary):
    """A saved word with its review counters."""
    id: str
    added_date: datetime
    review_count: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    last_review_date: Optional[datetime] = None
    mastered: bool = False

    @property
    def ready_for_mastery(self) -> bool:
        return self.correct_count >= MASTERY_THRESHOLD
