"""
Test Suite for the AnswerStore

Tests the session-scoped answer store:
- Write-once recording
- Alias-style resolution across candidate nodes
- Snapshots and clearing
"""

import pytest

from dxgraph import AnswerStore, AnswerOverwriteError


@pytest.fixture
def store():
    """Create a store with two recorded answers."""
    s = AnswerStore()
    s.record("normalPath_EeRatio", "positive")
    s.record("normalPath_TRVelocity", "unavailable")
    return s


class TestRecording:
    """Test recording answers."""

    def test_record_and_read(self, store):
        """Test that recorded answers read back as a mapping."""
        assert store["normalPath_EeRatio"] == "positive"
        assert len(store) == 2
        assert "normalPath_LAVolume" not in store

    def test_insertion_order(self, store):
        """Test that iteration follows recording order."""
        assert list(store) == ["normalPath_EeRatio", "normalPath_TRVelocity"]

    def test_overwrite_rejected(self, store):
        """Test that a node can only be answered once."""
        with pytest.raises(AnswerOverwriteError) as exc_info:
            store.record("normalPath_EeRatio", "negative")

        assert exc_info.value.node_id == "normalPath_EeRatio"
        # Original answer kept
        assert store["normalPath_EeRatio"] == "positive"

    def test_initial_answers(self):
        """Test construction from an existing mapping."""
        s = AnswerStore({"q1": "yes"})
        assert s["q1"] == "yes"
        with pytest.raises(AnswerOverwriteError):
            s.record("q1", "no")


class TestResolution:
    """Test first-populated-source resolution."""

    def test_first_populated_source_wins(self, store):
        """Test that the first source in order with an answer is used."""
        store.record("reducedPath_EeRatio", "negative")

        assert store.resolve(["reducedPath_EeRatio", "normalPath_EeRatio"]) == ("reducedPath_EeRatio", "negative")
        assert store.resolve(["normalPath_EeRatio", "reducedPath_EeRatio"]) == ("normalPath_EeRatio", "positive")

    def test_skips_missing_sources(self, store):
        """Test that unanswered sources are skipped."""
        assert store.resolve(["reducedPath_EeRatio", "normalPath_EeRatio"]) == ("normalPath_EeRatio", "positive")

    def test_unavailable_is_a_populated_answer(self, store):
        """Test that an explicit 'unavailable' answer still counts as populated."""
        assert store.resolve(["normalPath_TRVelocity"]) == ("normalPath_TRVelocity", "unavailable")

    def test_nothing_populated(self, store):
        """Test that resolution returns None when no source was answered."""
        assert store.resolve(["reducedPath_LAVolume", "normalPath_LAVolume"]) is None
        assert store.resolve([]) is None


class TestSnapshots:
    """Test snapshot and clear."""

    def test_snapshot_is_a_copy(self, store):
        """Test that mutating a snapshot leaves the store untouched."""
        snap = store.snapshot()
        snap["normalPath_EeRatio"] = "negative"
        snap["extra"] = "x"

        assert store["normalPath_EeRatio"] == "positive"
        assert "extra" not in store

    def test_clear(self, store):
        """Test that clear empties the store and allows re-recording."""
        store.clear()
        assert len(store) == 0
        store.record("normalPath_EeRatio", "negative")
        assert store["normalPath_EeRatio"] == "negative"
