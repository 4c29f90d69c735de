"""BookmarkLedger - saved reading passages with usage counters."""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from wonbyte.schemas import BookmarkEntry, NewBookmark
from wonbyte.utils.ids import generate_id

from .base import CollectionLedger
from .store import StorageKey

logger = logging.getLogger(__name__)


class BookmarkLedger(CollectionLedger[BookmarkEntry]):
    """Bookmarked passages, newest first."""

    key = StorageKey.BOOKMARKED_TEXTS
    entry_model = BookmarkEntry

    def get_bookmarks(self) -> list[BookmarkEntry]:
        return self._load_entries()

    def add_bookmark(self, text: Mapping[str, Any] | NewBookmark) -> list[BookmarkEntry]:
        """Prepend a bookmark; saving it counts as its first use."""
        if not isinstance(text, NewBookmark):
            text = NewBookmark.model_validate(text)

        now = self._now()
        with self.store.transaction():
            bookmarks = self._load_entries()
            bookmarks.insert(0, BookmarkEntry(
                id=generate_id("bookmark"),
                title=text.resolved_title(),
                content=text.content,
                grade_level=text.grade_level,
                tags=text.tags,
                added_date=now,
                last_used_date=now,
                use_count=1,
            ))
            self._save_entries(bookmarks)
            return bookmarks

    def update_bookmark(self, entry_id: str, patch: Mapping[str, Any] | BaseModel) -> list[BookmarkEntry]:
        return self._update(entry_id, patch)

    def remove_bookmark(self, entry_id: str) -> list[BookmarkEntry]:
        return self._remove(entry_id)

    def use_bookmark(self, entry_id: str) -> Optional[BookmarkEntry]:
        """Select a bookmark for study: bump its use count and last-used time."""
        with self.store.transaction():
            bookmark = self._get(entry_id)
            if bookmark is None:
                return None
            self._update(entry_id, {
                "use_count": bookmark.use_count + 1,
                "last_used_date": self._now(),
            })
            return self._get(entry_id)

    def search(self, term: str = "", tag: Optional[str] = None) -> list[BookmarkEntry]:
        """Bookmarks whose title or content contains term (any case), optionally with tag."""
        needle = term.lower()
        return [
            bookmark for bookmark in self._load_entries()
            if (needle in bookmark.title.lower() or needle in bookmark.content.lower())
            and (tag is None or tag in bookmark.tags)
        ]

    def all_tags(self) -> list[str]:
        """Distinct tags in first-seen order."""
        tags: dict[str, None] = {}
        for bookmark in self._load_entries():
            for t in bookmark.tags:
                tags.setdefault(t, None)
        return list(tags)
