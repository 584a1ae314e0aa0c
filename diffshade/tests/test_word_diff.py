# diffshade/tests/test_word_diff.py
"""Tests for word-level diff computation."""

import pytest

from ..word_diff import (
    EditKind,
    EditSpan,
    compute_word_diff,
    edit_script,
    similarity,
    split_graphemes,
    tokenize,
)


def changed_text(text, spans):
    return "".join(text[s.start:s.end] for s in spans if s.kind != EditKind.UNCHANGED)


def unchanged_text(text, spans):
    return "".join(text[s.start:s.end] for s in spans if s.kind == EditKind.UNCHANGED)


class TestTokenize:
    """Tests for line segmentation."""

    def test_words_spaces_and_punctuation(self):
        assert tokenize("foo(bar, baz)") == ["foo", "(", "bar", ",", " ", "baz", ")"]

    def test_tokens_join_to_text(self):
        text = "  x += f(y)\t# note"
        assert "".join(tokenize(text)) == text

    def test_combining_mark_stays_with_base(self):
        assert split_graphemes("e\u0301a") == ["e\u0301", "a"]

    def test_zwj_sequence_is_one_cluster(self):
        family = "\U0001F469\u200d\U0001F4BB"
        assert split_graphemes(family + "x") == [family, "x"]

    def test_flag_pair_is_one_cluster(self):
        flag = "\U0001F1EB\U0001F1F7"
        assert split_graphemes(flag) == [flag]


class TestEditScript:
    """Tests for the token edit script."""

    def test_identical(self):
        assert edit_script(["a", "b"], ["a", "b"]) == [("equal", 0, 2, 0, 2)]

    def test_replace_in_middle(self):
        assert edit_script(["a", "b", "c"], ["a", "x", "c"]) == [
            ("equal", 0, 1, 0, 1),
            ("replace", 1, 2, 1, 2),
            ("equal", 2, 3, 2, 3),
        ]

    def test_insert_and_delete(self):
        assert edit_script(["a"], ["a", "b"]) == [("equal", 0, 1, 0, 1), ("insert", 1, 1, 1, 2)]
        assert edit_script(["a", "b"], ["b"]) == [("delete", 0, 1, 0, 0), ("equal", 1, 2, 0, 1)]

    def test_empty(self):
        assert edit_script([], []) == []


class TestComputeWordDiff:
    """Tests for token-level diff computation."""

    def test_identical_lines(self):
        word_diff = compute_word_diff("hello world", "hello world")

        assert word_diff.old_spans == [EditSpan(0, 11, EditKind.UNCHANGED)]
        assert word_diff.new_spans == [EditSpan(0, 11, EditKind.UNCHANGED)]
        assert word_diff.similarity == 1.0

    def test_simple_change(self):
        word_diff = compute_word_diff("hello world", "hello there")

        assert changed_text(word_diff.old_text, word_diff.old_spans) == "world"
        assert changed_text(word_diff.new_text, word_diff.new_spans) == "there"
        assert unchanged_text(word_diff.old_text, word_diff.old_spans) == "hello "

    def test_appended_character_marks_only_that_character(self):
        word_diff = compute_word_diff("foo", "foob")

        assert word_diff.is_edit
        assert word_diff.old_spans == [EditSpan(0, 3, EditKind.UNCHANGED)]
        assert word_diff.new_spans == [
            EditSpan(0, 3, EditKind.UNCHANGED),
            EditSpan(3, 4, EditKind.ADDED),
        ]

    def test_addition_at_end(self):
        word_diff = compute_word_diff("hello", "hello world")

        assert changed_text(word_diff.old_text, word_diff.old_spans) == ""
        assert changed_text(word_diff.new_text, word_diff.new_spans) == " world"

    def test_deletion_at_end(self):
        word_diff = compute_word_diff("hello world", "hello")

        assert "world" in changed_text(word_diff.old_text, word_diff.old_spans)

    def test_change_in_middle(self):
        word_diff = compute_word_diff("the quick fox", "the slow fox")

        assert changed_text(word_diff.old_text, word_diff.old_spans) == "quick"
        assert changed_text(word_diff.new_text, word_diff.new_spans) == "slow"

    def test_preserves_unchanged_portions(self):
        word_diff = compute_word_diff("prefix_old_suffix", "prefix_new_suffix")

        old_unchanged = unchanged_text(word_diff.old_text, word_diff.old_spans)
        assert "prefix_" in old_unchanged
        assert "_suffix" in old_unchanged

    def test_spans_partition_both_lines(self):
        old, new = "a = compute(x, y)", "b = compute(x, z, y)"
        word_diff = compute_word_diff(old, new)

        for text, spans in ((old, word_diff.old_spans), (new, word_diff.new_spans)):
            assert spans[0].start == 0
            assert spans[-1].end == len(text)
            assert all(a.end == b.start for a, b in zip(spans, spans[1:]))
        assert all(s.kind != EditKind.ADDED for s in word_diff.old_spans)
        assert all(s.kind != EditKind.REMOVED for s in word_diff.new_spans)

    def test_combining_mark_never_split(self):
        word_diff = compute_word_diff("x = e\u0301", "x = e\u0302")

        assert word_diff.old_spans == [
            EditSpan(0, 4, EditKind.UNCHANGED),
            EditSpan(4, 6, EditKind.REMOVED),
        ]

    def test_zwj_sequence_never_split(self):
        family = "\U0001F469\u200d\U0001F4BB"
        word_diff = compute_word_diff("a " + family, "a \U0001F469")

        assert word_diff.old_spans == [
            EditSpan(0, 2, EditKind.UNCHANGED),
            EditSpan(2, 5, EditKind.REMOVED),
        ]

    def test_deterministic(self):
        first = compute_word_diff("return a + b", "return a - b * c")
        second = compute_word_diff("return a + b", "return a - b * c")
        assert first == second


class TestSimilarityThreshold:
    """Tests for the edit/non-edit decision."""

    # "ab " is unchanged: 2 * 3 / 10 = 0.6
    OLD = "ab cd"
    NEW = "ab xy"

    def test_similarity_value(self):
        assert compute_word_diff(self.OLD, self.NEW).similarity == pytest.approx(0.6)

    def test_at_threshold_is_edit(self):
        assert compute_word_diff(self.OLD, self.NEW, min_similarity=0.6).is_edit

    def test_just_below_threshold_is_not_edit(self):
        assert not compute_word_diff(self.OLD, self.NEW, min_similarity=0.61).is_edit

    def test_dissimilar_lines_are_not_edits(self):
        word_diff = compute_word_diff("alpha beta", "gamma delta")

        assert word_diff.similarity < 0.4
        assert not word_diff.is_edit

    def test_whitespace_only_overlap_is_not_edit(self):
        assert not compute_word_diff("x y", "a b", min_similarity=0.0).is_edit

    def test_similarity_function(self):
        spans = [EditSpan(0, 2, EditKind.UNCHANGED), EditSpan(2, 4, EditKind.REMOVED)]
        assert similarity("abcd", "ab", spans) == pytest.approx(4 / 6)
        assert similarity("", "", []) == 1.0

    def test_oversized_pair_is_not_edit(self):
        word_diff = compute_word_diff("a " * 600, "b " * 600)

        assert not word_diff.is_edit
        assert word_diff.old_spans == [EditSpan(0, 1200, EditKind.REMOVED)]

