"""Bookmarked reading passages."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

TITLE_PREVIEW_LENGTH = 30


class NewBookmark(BaseModel):
    content: str = Field(..., min_length=1)
    title: Optional[str] = None
    grade_level: Optional[str] = None
    tags: list[str] = []

    def resolved_title(self) -> str:
        """Explicit title, or the first characters of the passage."""
        if self.title:
            return self.title
        return self.content[:TITLE_PREVIEW_LENGTH] + "..."


class BookmarkEntry(BaseModel):
    id: str
    title: str
    content: str
    grade_level: Optional[str] = None
    tags: list[str] = []
    added_date: datetime
    last_used_date: datetime
    use_count: int = Field(default=1, ge=0)
