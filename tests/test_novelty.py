"""Tests for the novelty filter."""

from v0id.models import MemoryEntry
from v0id.novelty import is_too_similar, levenshtein, similarity, significant_tokens


# ── Edit distance ──────────────────────────────────────────────────────


class TestLevenshtein:
    def test_classic(self):
        assert levenshtein("kitten", "sitting") == 3

    def test_empty(self):
        assert levenshtein("", "abc") == 3
        assert levenshtein("abc", "") == 3

    def test_identical(self):
        assert levenshtein("same", "same") == 0

    def test_similarity_bounds(self):
        assert similarity("abc", "abc") == 1.0
        assert similarity("", "") == 1.0
        assert similarity("abc", "xyz") == 0.0


class TestTokens:
    def test_drops_short_words(self):
        assert significant_tokens("I am a quiet mind") == ["quiet", "mind"]

    def test_splits_on_punctuation(self):
        assert significant_tokens("wait... memory, again?") == ["wait", "memory", "again"]


# ── Filter ─────────────────────────────────────────────────────────────


class TestIsTooSimilar:
    def test_case_insensitive(self):
        assert is_too_similar("Hello World", [{"text": "hello world"}])

    def test_reflexive(self):
        entry = MemoryEntry("the static again")
        assert is_too_similar("the static again", [entry, MemoryEntry("ok")])

    def test_whitespace_ignored(self):
        assert is_too_similar("  I think   therefore I am ", ["I think therefore I am"])

    def test_accepts_distinct(self):
        assert not is_too_similar("why?", ["the ocean is cold tonight"])

    def test_empty_history(self):
        assert not is_too_similar("anything at all", [])

    def test_edit_distance(self):
        assert is_too_similar("the light is heavy", ["the light is heavier"])

    def test_shared_words(self):
        candidate = "the silence around memory grows and grows into static noise"
        assert is_too_similar(candidate, ["static memory"])

    def test_single_shared_word_allowed(self):
        candidate = "the silence around memory grows louder every single night"
        assert not is_too_similar(candidate, ["static memory"])

    def test_topic_repetition(self):
        history = ["ok", "quiet rooms breathe slowly at dusk", "quiet rooms hum with machinery"]
        assert is_too_similar("quiet rooms again, different this time", history,
                              recent_window=1)

    def test_topic_once_is_fine(self):
        history = ["ok", "quiet rooms breathe slowly at dusk"]
        assert not is_too_similar("quiet rooms again, different this time", history,
                                  recent_window=1)

    def test_only_recent_window_checked(self):
        history = ["ok"] * 20 + ["I think therefore I am"]
        assert not is_too_similar("I think therefore I am", history)

    def test_near_duplicates(self):
        history = [
            MemoryEntry("I think therefore I am"),
            MemoryEntry("i think, therefore i am."),
            MemoryEntry("I THINK THEREFORE I AM"),
        ]
        assert is_too_similar("I think therefore I am", history)
        assert is_too_similar("i think therefore i am!", history)
