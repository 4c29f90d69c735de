"""Tests for VocabularyLedger."""

from wonbyte.ledger import StorageKey
from wonbyte.schemas import NewVocabulary


class TestAddVocabulary:

    def test_add_appends_with_defaults(self, vocabulary_ledger):
        vocabulary_ledger.add_vocabulary({"word": "사과", "meaning": "apple"})
        vocabulary = vocabulary_ledger.add_vocabulary(NewVocabulary(word="배", meaning="pear"))

        assert [v.word for v in vocabulary] == ["사과", "배"]
        first = vocabulary[0]
        assert first.id.startswith("vocab_")
        assert first.review_count == 0
        assert first.correct_count == 0
        assert first.mastered is False
        assert first.last_review_date is None
        assert first.difficulty == 1

    def test_duplicate_word_ignored(self, vocabulary_ledger):
        vocabulary_ledger.add_vocabulary({"word": "사과", "meaning": "apple"})
        vocabulary = vocabulary_ledger.add_vocabulary({"word": "사과", "meaning": "different"})
        assert len(vocabulary) == 1
        assert vocabulary[0].meaning == "apple"

    def test_duplicate_check_is_exact(self, vocabulary_ledger):
        vocabulary_ledger.add_vocabulary({"word": "Apple"})
        vocabulary = vocabulary_ledger.add_vocabulary({"word": "apple"})
        assert len(vocabulary) == 2

    def test_ids_are_unique(self, vocabulary_ledger):
        for word in ("가", "나", "다", "라"):
            vocabulary_ledger.add_vocabulary({"word": word})
        ids = [v.id for v in vocabulary_ledger.get_vocabulary()]
        assert len(set(ids)) == 4


class TestUpdateAndRemove:

    def test_update_merges_fields(self, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]
        vocabulary = vocabulary_ledger.update_vocabulary(entry.id, {"meaning": "apple", "synonyms": ["능금"]})
        assert vocabulary[0].meaning == "apple"
        assert vocabulary[0].synonyms == ["능금"]
        assert vocabulary[0].word == "사과"

    def test_id_cannot_change(self, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]
        vocabulary_ledger.update_vocabulary(entry.id, {"id": "hijacked"})
        assert vocabulary_ledger.get_entry(entry.id) is not None
        assert vocabulary_ledger.get_entry("hijacked") is None

    def test_unknown_id_is_noop(self, vocabulary_ledger):
        vocabulary_ledger.add_vocabulary({"word": "사과"})
        before = vocabulary_ledger.get_vocabulary()
        assert vocabulary_ledger.update_vocabulary("vocab_missing", {"meaning": "x"}) == before
        assert vocabulary_ledger.remove_vocabulary("vocab_missing") == before

    def test_remove(self, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]
        vocabulary_ledger.add_vocabulary({"word": "배"})
        assert [v.word for v in vocabulary_ledger.remove_vocabulary(entry.id)] == ["배"]

    def test_unreadable_record_is_dropped(self, vocabulary_ledger, store):
        vocabulary_ledger.add_vocabulary({"word": "사과"})
        raw = store.load(StorageKey.VOCABULARY_LIST)
        raw.append({"word": "no id"})
        store.save(StorageKey.VOCABULARY_LIST, raw)
        assert [v.word for v in vocabulary_ledger.get_vocabulary()] == ["사과"]


class TestReview:

    def test_mastered_after_three_correct(self, vocabulary_ledger, clock):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]

        vocabulary_ledger.record_review(entry.id, True)
        vocabulary_ledger.record_review(entry.id, False)
        assert vocabulary_ledger.record_review(entry.id, True).mastered is False

        clock.advance(days=1)
        reviewed = vocabulary_ledger.record_review(entry.id, True)
        assert reviewed.mastered is True
        assert reviewed.review_count == 4
        assert reviewed.correct_count == 3
        assert reviewed.last_review_date == clock.now
        assert vocabulary_ledger.get_unmastered_vocabulary() == []

    def test_mark_seen_counts_review_only(self, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]
        seen = vocabulary_ledger.mark_seen(entry.id)
        assert seen.review_count == 1
        assert seen.correct_count == 0

    def test_manual_mastery_override(self, vocabulary_ledger):
        entry = vocabulary_ledger.add_vocabulary({"word": "사과"})[0]
        assert vocabulary_ledger.set_mastered(entry.id, True).mastered is True
        assert vocabulary_ledger.set_mastered(entry.id, False).mastered is False

    def test_review_unknown_id(self, vocabulary_ledger):
        assert vocabulary_ledger.record_review("vocab_missing", True) is None
        assert vocabulary_ledger.mark_seen("vocab_missing") is None
