"""Tests for the diff engine."""

import random

import pytest

from core.diff_engine import DiffCache, Mark, classify, classify_at, is_complete
from core.errors import OutOfRangeError

HIT, MISS = Mark.HIT, Mark.MISS


class TestClassify:
    """Test classify function."""

    def test_correct_prefix(self):
        """Typing the start of the phrase gives only hits."""
        assert classify("cat dog", "cat") == [HIT, HIT, HIT]

    def test_miss_in_middle(self):
        """A wrong character is a miss, neighbours stay hits."""
        assert classify("cat", "cxt") == [HIT, MISS, HIT]

    def test_empty_buffer(self):
        """Nothing typed means no classifications."""
        assert classify("cat", "") == []

    def test_case_sensitive(self):
        """Upper and lower case letters differ."""
        assert classify("Cat", "cat") == [MISS, HIT, HIT]

    def test_space_compared_like_any_char(self):
        """The separator must be typed exactly."""
        assert classify("a b", "a_b") == [HIT, MISS, HIT]

    def test_over_length_buffer_raises(self):
        """A buffer longer than the phrase violates the contract."""
        with pytest.raises(OutOfRangeError):
            classify("cat", "cats")

    def test_out_of_range_is_index_error(self):
        """OutOfRangeError can be caught as IndexError."""
        with pytest.raises(IndexError):
            classify("a", "ab")

    def test_matches_definition_for_random_buffers(self):
        """Every position is a hit exactly when the characters agree."""
        gen = random.Random(5)
        alphabet = "ab "
        for _ in range(200):
            phrase = "".join(gen.choice(alphabet) for _ in range(gen.randint(1, 12)))
            typed = "".join(gen.choice(alphabet) for _ in range(gen.randint(0, len(phrase))))
            marks = classify(phrase, typed)
            assert len(marks) == len(typed)
            for i, mark in enumerate(marks):
                assert (mark == HIT) == (typed[i] == phrase[i])


class TestClassifyAt:
    """Test classify_at function."""

    def test_single_position(self):
        assert classify_at("cat", "cx", 0) == HIT
        assert classify_at("cat", "cx", 1) == MISS

    def test_unwritten_index_raises(self):
        """Indices at or beyond the typed length are unwritten."""
        with pytest.raises(OutOfRangeError):
            classify_at("cat", "c", 1)


class TestIsComplete:
    """Test is_complete function."""

    def test_exact_match_is_complete(self):
        assert is_complete("cat", "cat")

    def test_partial_is_not_complete(self):
        assert not is_complete("cat dog", "cat")

    def test_full_length_with_miss_is_not_complete(self):
        """Reaching the phrase length is not enough."""
        assert not is_complete("cat", "cxt")

    def test_empty_is_not_complete(self):
        assert not is_complete("cat", "")

    def test_over_length_raises(self):
        with pytest.raises(OutOfRangeError):
            is_complete("cat", "catt")


class TestDiffCache:
    """Test DiffCache class."""

    def test_push_classifies_last_char(self):
        """Each push adds the mark of the appended position."""
        cache = DiffCache("cat")
        assert cache.push("c") == HIT
        assert cache.push("cx") == MISS
        assert cache.marks == (HIT, MISS)
        assert cache.miss_count == 1

    def test_pop_removes_last_mark(self):
        """Popping a miss lowers the miss count."""
        cache = DiffCache("cat")
        cache.push("c")
        cache.push("cx")
        cache.pop()
        assert cache.marks == (HIT,)
        assert cache.miss_count == 0

    def test_pop_on_empty_is_noop(self):
        cache = DiffCache("cat")
        cache.pop()
        assert cache.marks == ()

    def test_clear_switches_phrase(self):
        """Clearing with a new phrase forgets old marks."""
        cache = DiffCache("cat")
        cache.push("x")
        cache.clear("dog")
        assert cache.phrase == "dog"
        assert cache.marks == ()
        assert cache.miss_count == 0
        assert cache.push("d") == HIT

    def test_push_out_of_step_raises(self):
        """A buffer that skipped an append is rejected."""
        cache = DiffCache("cat")
        with pytest.raises(OutOfRangeError):
            cache.push("ca")

    def test_push_beyond_phrase_raises(self):
        cache = DiffCache("c")
        cache.push("c")
        with pytest.raises(OutOfRangeError):
            cache.push("cc")

    def test_agrees_with_full_rescan(self):
        """Incremental marks equal a full classification after edits."""
        phrase = "the quick fox"
        cache = DiffCache(phrase)
        typed = ""
        for step in ["t", "h", "x", None, "e", " ", "q", "i", None, None, "q"]:
            if step is None:
                typed = typed[:-1]
                cache.pop()
            else:
                typed += step
                cache.push(typed)
            assert list(cache.marks) == classify(phrase, typed)
            assert cache.miss_count == classify(phrase, typed).count(MISS)
