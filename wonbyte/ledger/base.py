"""
Shared plumbing for the ledgers.

A ledger owns one store key. Snapshot ledgers keep a single document;
collection ledgers keep a list of records addressed by id.
"""

import logging
from datetime import date, datetime
from typing import Any, Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from wonbyte.utils.dates import Clock, system_clock

from .store import KeyValueStore, StorageKey, get_default_store

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=BaseModel)


def as_patch(patch: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    """Normalize a patch to a dict of the fields the caller actually set."""
    if isinstance(patch, BaseModel):
        return patch.model_dump(exclude_unset=True)
    return dict(patch)


class Ledger:
    """Base ledger: a store, a clock, and the key this ledger owns."""

    key: StorageKey

    def __init__(self, store: Optional[KeyValueStore] = None, clock: Optional[Clock] = None):
        self.store = store or get_default_store()
        self.clock = clock or system_clock()

    def _now(self) -> datetime:
        return self.clock()

    def _today(self) -> date:
        return self._now().date()

    def _persist(self, value: Any) -> bool:
        ok = self.store.save(self.key, value)
        if not ok:
            logger.warning(f"{self.key.value}: save failed, returning unsaved snapshot")
        return ok


class CollectionLedger(Ledger, Generic[EntryT]):
    """Ledger over a list of id-addressed records."""

    entry_model: type[BaseModel]

    def _load_entries(self) -> list[EntryT]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            logger.warning(f"{self.key.value}: expected a list, found {type(raw).__name__}; using empty list")
            return []

        entries = []
        for item in raw:
            try:
                entries.append(self.entry_model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"{self.key.value}: dropping unreadable record: {e}")
        return entries

    def _save_entries(self, entries: list[EntryT]) -> bool:
        return self._persist([entry.model_dump(mode="json") for entry in entries])

    @staticmethod
    def _index_of(entries: list[EntryT], entry_id: str) -> Optional[int]:
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                return index
        return None

    def _merge(self, entry: EntryT, patch: Mapping[str, Any] | BaseModel) -> EntryT:
        """Merge patch fields into entry; ids are immutable."""
        changes = {k: v for k, v in as_patch(patch).items() if k != "id"}
        return self.entry_model.model_validate({**entry.model_dump(), **changes})

    def _get(self, entry_id: str) -> Optional[EntryT]:
        entries = self._load_entries()
        index = self._index_of(entries, entry_id)
        return entries[index] if index is not None else None

    def _update(self, entry_id: str, patch: Mapping[str, Any] | BaseModel) -> list[EntryT]:
        with self.store.transaction():
            entries = self._load_entries()
            index = self._index_of(entries, entry_id)
            if index is None:
                logger.debug(f"{self.key.value}: no record {entry_id}, update skipped")
                return entries
            entries[index] = self._merge(entries[index], patch)
            self._save_entries(entries)
            return entries

    def _remove(self, entry_id: str) -> list[EntryT]:
        with self.store.transaction():
            entries = self._load_entries()
            remaining = [entry for entry in entries if entry.id != entry_id]
            if len(remaining) == len(entries):
                logger.debug(f"{self.key.value}: no record {entry_id}, nothing removed")
            self._save_entries(remaining)
            return remaining
