# diffshade/tests/test_pairing.py
"""Tests for change-block pairing."""

from ..pairing import (
    ChangeBlock,
    LinePairing,
    find_change_blocks,
    get_paired_lines,
    pair_block,
    pair_hunk,
)
from ..parser import parse_unified_diff


def hunk_from(body, header="@@ -1,10 +1,10 @@"):
    """Parse a single hunk; the header counts only need to be large enough."""
    patches = parse_unified_diff(f"--- a/f\n+++ b/f\n{header}\n{body}")
    return patches[0].hunks[0]


class TestPairBlock:
    """Tests for positional pairing within one block."""

    def test_equal_lengths_pair_positionally(self):
        pairings = pair_block(ChangeBlock((1, 2), (3, 4)))
        assert pairings == [LinePairing(1, 3), LinePairing(2, 4)]

    def test_more_plus_lines(self):
        # 2 minus and 3 plus: two pairs, the third plus line is unmatched
        pairings = pair_block(ChangeBlock((0, 1), (2, 3, 4)))
        assert pairings == [
            LinePairing(0, 2),
            LinePairing(1, 3),
            LinePairing(None, 4),
        ]

    def test_more_minus_lines(self):
        pairings = pair_block(ChangeBlock((0, 1, 2), (3,)))
        assert pairings == [
            LinePairing(0, 3),
            LinePairing(1, None),
            LinePairing(2, None),
        ]

    def test_pure_deletion_has_no_pairs(self):
        pairings = pair_block(ChangeBlock((0, 1), ()))
        assert not any(p.is_matched for p in pairings)
        assert len(pairings) == 2

    def test_pure_addition_has_no_pairs(self):
        assert pair_block(ChangeBlock((), (5,))) == [LinePairing(None, 5)]


class TestFindChangeBlocks:
    """Tests for locating change blocks in a hunk."""

    def test_blocks_split_by_context(self):
        hunk = hunk_from("-a\n+b\n c\n-d\n+e\n")
        assert find_change_blocks(hunk.lines) == [
            ChangeBlock((0,), (1,)),
            ChangeBlock((3,), (4,)),
        ]

    def test_plus_then_minus_are_separate_blocks(self):
        hunk = hunk_from("+a\n-b\n")
        assert find_change_blocks(hunk.lines) == [
            ChangeBlock((), (0,)),
            ChangeBlock((1,), ()),
        ]

    def test_no_newline_marker_does_not_split(self):
        hunk = hunk_from("-a\n\\ No newline at end of file\n+a\n", "@@ -1 +1 @@")
        assert find_change_blocks(hunk.lines) == [ChangeBlock((0,), (2,))]


class TestPairHunk:
    """Tests for hunk-level pairing."""

    def test_pairs_across_block(self):
        hunk = hunk_from(" ctx\n-old1\n-old2\n+new1\n+new2\n+new3\n")
        assert pair_hunk(hunk) == [
            LinePairing(1, 3),
            LinePairing(2, 4),
            LinePairing(None, 5),
        ]

    def test_pairing_is_deterministic(self):
        hunk = hunk_from("-a\n-b\n+c\n c\n-d\n+e\n+f\n")
        assert pair_hunk(hunk) == pair_hunk(hunk)


class TestGetPairedLines:
    """Tests for side-by-side rows."""

    def test_pair_unchanged_lines(self):
        hunk = hunk_from(" line1\n line2\n", "@@ -1,2 +1,2 @@")
        assert get_paired_lines(hunk) == [(0, 0), (1, 1)]

    def test_pair_additions(self):
        hunk = hunk_from(" line1\n+added1\n+added2\n", "@@ -1 +1,3 @@")
        assert get_paired_lines(hunk) == [(0, 0), (None, 1), (None, 2)]

    def test_pair_deletions(self):
        hunk = hunk_from(" line1\n-deleted1\n-deleted2\n", "@@ -1,3 +1 @@")
        assert get_paired_lines(hunk) == [(0, 0), (1, None), (2, None)]

    def test_pair_modifications(self):
        hunk = hunk_from(" line1\n-old\n+new\n line3\n", "@@ -1,3 +1,3 @@")
        rows = get_paired_lines(hunk)
        assert rows == [(0, 0), (1, 2), (3, 3)]
        assert hunk.lines[rows[1][0]].content == "old"
        assert hunk.lines[rows[1][1]].content == "new"

    def test_no_newline_marker_row(self):
        hunk = hunk_from("-a\n\\ No newline at end of file\n+a\n", "@@ -1 +1 @@")
        assert get_paired_lines(hunk) == [(0, 2), (1, None)]
