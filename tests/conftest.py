from datetime import datetime, timedelta, timezone

import pytest

from wonbyte.ledger import (
    BookmarkLedger,
    GameLedger,
    LearningStatsLedger,
    MemoryStore,
    ProfileStore,
    StudyCoordinator,
    VocabularyLedger,
    WrongAnswerLedger,
    load_reward_catalog,
)

# A Monday
START = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock the tests can move forward."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, **kwargs):
        self.now += timedelta(days=days, **kwargs)


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def catalog():
    return load_reward_catalog()


@pytest.fixture()
def stats_ledger(store, clock):
    return LearningStatsLedger(store, clock)


@pytest.fixture()
def vocabulary_ledger(store, clock):
    return VocabularyLedger(store, clock)


@pytest.fixture()
def wrong_answer_ledger(store, clock):
    return WrongAnswerLedger(store, clock)


@pytest.fixture()
def bookmark_ledger(store, clock):
    return BookmarkLedger(store, clock)


@pytest.fixture()
def game_ledger(store, clock, catalog):
    return GameLedger(store, clock, catalog)


@pytest.fixture()
def profile_store(store, clock):
    return ProfileStore(store, clock)


@pytest.fixture()
def coordinator(store, clock, catalog):
    return StudyCoordinator(store=store, clock=clock, catalog=catalog)
