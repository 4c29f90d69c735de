"""
Wrong-answer notebook schemas for Wonbyte.

Missed problems are kept for retry until solved; solved entries stay as
history.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Retries tracked before an entry is retired regardless of correctness
MAX_ACTIVE_RETRIES = 2


class NewWrongAnswer(BaseModel):
    """A missed problem as reported by the quiz screen."""
    question: str = Field(..., min_length=1)
    user_answer: str = ""
    correct_answer: str
    type: str = "multiple_choice"
    context: str = ""        # excerpt of the reading passage
    explanation: str = ""
    grade_level: Optional[str] = None


class WrongAnswerEntry(NewWrongAnswer):
    id: str
    added_date: datetime
    review_count: int = Field(default=0, ge=0)
    solved: bool = False
    last_review_date: Optional[datetime] = None


class RetryOutcome(BaseModel):
    """Result of one retry attempt."""
    correct: bool
    entry: WrongAnswerEntry


def answers_match(answer: str, expected: str) -> bool:
    """Compare answers ignoring surrounding whitespace and case."""
    return answer.strip().lower() == expected.strip().lower()
