# diffshade/pairing.py
"""Line pairing within change blocks.

A change block is a run of removed lines immediately followed by a run of
added lines inside one hunk. Pairing decides which removed line is
compared with which added line for intra-line highlighting:

- equal run lengths pair positionally, minus[i] with plus[i];
- unequal lengths pair the first min(n_minus, n_plus) positionally and
  leave the rest unmatched (pure deletions or additions);
- a block with no removed or no added lines produces no pairs.

Pairing never crosses a hunk boundary and depends only on the block's
content, so output is reproducible.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .classifier import DiffLine, LineKind
from .parser import DiffStats, Hunk


@dataclass(frozen=True)
class ChangeBlock:
    """Indices (into the hunk's lines) of one minus run and its plus run."""
    minus_indices: Tuple[int, ...]
    plus_indices: Tuple[int, ...]


@dataclass(frozen=True)
class LinePairing:
    """A minus line matched with a plus line, or either side left unmatched."""
    minus_index: Optional[int]
    plus_index: Optional[int]

    @property
    def is_matched(self) -> bool:
        return self.minus_index is not None and self.plus_index is not None


def find_change_blocks(lines: Sequence[DiffLine]) -> List[ChangeBlock]:
    """Locate maximal minus-then-plus runs in a hunk's lines.

    "No newline at end of file" markers do not interrupt a run.

    Args:
        lines: The lines of one hunk.

    Returns:
        Change blocks in input order.
    """
    blocks: List[ChangeBlock] = []
    i = 0
    n = len(lines)

    while i < n:
        kind = lines[i].kind
        if kind not in (LineKind.MINUS, LineKind.PLUS):
            i += 1
            continue

        minus: List[int] = []
        while i < n and lines[i].kind in (LineKind.MINUS, LineKind.NO_NEWLINE):
            if lines[i].kind == LineKind.MINUS:
                minus.append(i)
            i += 1

        plus: List[int] = []
        while i < n and lines[i].kind in (LineKind.PLUS, LineKind.NO_NEWLINE):
            if lines[i].kind == LineKind.PLUS:
                plus.append(i)
            i += 1

        blocks.append(ChangeBlock(tuple(minus), tuple(plus)))

    return blocks


def pair_block(block: ChangeBlock) -> List[LinePairing]:
    """Pair one change block positionally.

    Returns:
        Matched pairs first, then unmatched minus lines, then unmatched
        plus lines. Pure additions/deletions yield only unmatched entries.
    """
    matched = min(len(block.minus_indices), len(block.plus_indices))
    pairings = [
        LinePairing(block.minus_indices[k], block.plus_indices[k])
        for k in range(matched)
    ]
    pairings.extend(LinePairing(m, None) for m in block.minus_indices[matched:])
    pairings.extend(LinePairing(None, p) for p in block.plus_indices[matched:])
    return pairings


def pair_hunk(hunk: Hunk) -> List[LinePairing]:
    """Pair every change block of a closed hunk."""
    pairings: List[LinePairing] = []
    for block in find_change_blocks(hunk.lines):
        pairings.extend(pair_block(block))
    return pairings


def get_paired_lines(hunk: Hunk) -> List[Tuple[Optional[int], Optional[int]]]:
    """Convert hunk lines to (left, right) index rows for side-by-side display.

    - Context: (i, i), the same line on both sides
    - Matched change: (minus_i, plus_i)
    - Unmatched deletion: (i, None); unmatched addition: (None, i)
    - No-newline marker: on the side of the line it annotates

    Args:
        hunk: A closed hunk.

    Returns:
        Rows in display order.
    """
    lines = hunk.lines
    rows: List[Tuple[Optional[int], Optional[int]]] = []
    blocks = {block.minus_indices[0] if block.minus_indices else block.plus_indices[0]: block
              for block in find_change_blocks(lines)}

    i = 0
    while i < len(lines):
        block = blocks.get(i)
        if block is not None:
            last = max(block.minus_indices + block.plus_indices)
            for pairing in pair_block(block):
                rows.append((pairing.minus_index, pairing.plus_index))
            for j in range(i, last + 1):
                if lines[j].kind == LineKind.NO_NEWLINE:
                    rows.append(_marker_row(lines, j))
            i = last + 1
            continue

        line = lines[i]
        if line.kind == LineKind.NO_NEWLINE:
            rows.append(_marker_row(lines, i))
        else:
            rows.append((i, i))
        i += 1

    return rows


def _marker_row(lines: Sequence[DiffLine], index: int) -> Tuple[Optional[int], Optional[int]]:
    previous = lines[index - 1].kind if index > 0 else LineKind.CONTEXT
    if previous == LineKind.MINUS:
        return (index, None)
    if previous == LineKind.PLUS:
        return (None, index)
    return (index, index)


def compute_stats(hunks: Sequence[Hunk]) -> DiffStats:
    """Count added, deleted and modified (paired) lines across hunks."""
    stats = DiffStats()
    for hunk in hunks:
        for pairing in pair_hunk(hunk):
            if pairing.is_matched:
                stats.modified += 1
            elif pairing.minus_index is not None:
                stats.deleted += 1
            else:
                stats.added += 1
    return stats
