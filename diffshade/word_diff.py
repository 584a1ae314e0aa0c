# diffshade/word_diff.py
"""Word-level diff computation for paired lines.

Splits a removed line and its paired added line into word, whitespace and
punctuation tokens, aligns them with Myers' shortest edit script, and
reports which character ranges of each line are unchanged, removed or
added. Tokens never split a grapheme cluster, so a combining accent or an
emoji ZWJ sequence is always kept whole.

Where a single word was replaced by a single word, the common prefix and
suffix of the two words are re-marked unchanged: ``foo`` -> ``foob``
highlights only the ``b``.

Pairs that share too little are not worth highlighting token by token;
WordDiff.is_edit is False for them and renderers fall back to whole-line
deletion/addition styling.
"""

import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

# Fraction of the pair's characters that must be unchanged for token-level
# highlighting (see similarity()).
DEFAULT_MIN_SIMILARITY = 0.4

# Above this many token comparisons the pair is shown as whole lines.
MAX_EDIT_CELLS = 1_000_000

ZWJ = "\u200d"


class EditKind(Enum):
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"


@dataclass(frozen=True)
class EditSpan:
    """A character range [start, end) of a line and how it changed."""
    start: int
    end: int
    kind: EditKind


@dataclass
class WordDiff:
    """Result of diffing a removed line against its paired added line.

    Attributes:
        old_text: The removed line's content.
        new_text: The added line's content.
        old_spans: Partition of old_text into UNCHANGED/REMOVED spans.
        new_spans: Partition of new_text into UNCHANGED/ADDED spans.
        similarity: 2 * unchanged chars / total chars, in [0, 1].
        is_edit: True when token-level highlighting should be shown.
    """
    old_text: str
    new_text: str
    old_spans: List[EditSpan] = field(default_factory=list)
    new_spans: List[EditSpan] = field(default_factory=list)
    similarity: float = 1.0
    is_edit: bool = True


# ==================== Segmentation ====================


def _is_extending(char: str) -> bool:
    """True if char attaches to the preceding character's cluster."""
    if char == ZWJ:
        return True
    code = ord(char)
    if 0xFE00 <= code <= 0xFE0F or 0xE0100 <= code <= 0xE01EF:  # variation selectors
        return True
    if 0x1F3FB <= code <= 0x1F3FF:  # emoji skin-tone modifiers
        return True
    if 0xE0020 <= code <= 0xE007F:  # emoji tag sequences
        return True
    return unicodedata.category(char) in ("Mn", "Me", "Mc")


def _is_regional_indicator(char: str) -> bool:
    return 0x1F1E6 <= ord(char) <= 0x1F1FF


def split_graphemes(text: str) -> List[str]:
    """Split text into user-perceived characters.

    Handles combining marks, ZWJ emoji sequences, variation selectors,
    skin-tone modifiers and regional-indicator flag pairs.
    """
    clusters: List[str] = []
    for char in text:
        if clusters:
            last = clusters[-1]
            if _is_extending(char) or last.endswith(ZWJ):
                clusters[-1] = last + char
                continue
            if (_is_regional_indicator(char) and len(last) == 1
                    and _is_regional_indicator(last)):
                clusters[-1] = last + char
                continue
        clusters.append(char)
    return clusters


def _char_class(cluster: str) -> str:
    base = cluster[0]
    if base.isalnum() or base == "_":
        return "word"
    if base.isspace():
        return "space"
    return "other"


def tokenize(text: str) -> List[str]:
    """Split a line into word, whitespace and punctuation tokens.

    Word characters and whitespace group into maximal runs; every other
    grapheme cluster is a token of its own. Joining the tokens gives back
    the original text.
    """
    tokens: List[str] = []
    last_class = ""
    for cluster in split_graphemes(text):
        cls = _char_class(cluster)
        if tokens and cls == last_class and cls != "other":
            tokens[-1] += cluster
        else:
            tokens.append(cluster)
        last_class = cls
    return tokens


# ==================== Edit script ====================


def _myers_moves(a: Sequence[str], b: Sequence[str]) -> List[str]:
    """Return the shortest edit path as a list of 'equal'/'delete'/'insert'.

    Myers' O(ND) greedy algorithm with a recorded frontier per edit
    distance for backtracking. Deletions are preferred over insertions
    where both are equally short.
    """
    n, m = len(a), len(b)
    frontier: Dict[int, int] = {1: 0}
    trace: List[Dict[int, int]] = []

    for d in range(n + m + 1):
        trace.append(dict(frontier))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and frontier[k - 1] < frontier[k + 1]):
                x = frontier[k + 1]
            else:
                x = frontier[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            frontier[k] = x
            if x >= n and y >= m:
                return _backtrack(trace, n, m)

    raise AssertionError("edit path not found")  # pragma: no cover


def _backtrack(trace: List[Dict[int, int]], n: int, m: int) -> List[str]:
    moves: List[str] = []
    x, y = n, m
    for d in range(len(trace) - 1, -1, -1):
        frontier = trace[d]
        k = x - y
        if k == -d or (k != d and frontier[k - 1] < frontier[k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = frontier[prev_k]
        prev_y = prev_x - prev_k
        while x > prev_x and y > prev_y:
            moves.append("equal")
            x -= 1
            y -= 1
        if d > 0:
            moves.append("insert" if x == prev_x else "delete")
        x, y = prev_x, prev_y
    moves.reverse()
    return moves


def edit_script(a: Sequence[str], b: Sequence[str]) -> List[Tuple[str, int, int, int, int]]:
    """Compute opcodes turning token sequence a into b.

    Returns:
        difflib-style ``(tag, i1, i2, j1, j2)`` tuples where tag is
        ``"equal"`` or ``"replace"``/``"delete"``/``"insert"``. Adjacent
        deletions and insertions between two equal runs form one opcode.
    """
    prefix = 0
    while prefix < len(a) and prefix < len(b) and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (suffix < len(a) - prefix and suffix < len(b) - prefix
           and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]):
        suffix += 1

    middle_a = a[prefix:len(a) - suffix]
    middle_b = b[prefix:len(b) - suffix]

    moves = ["equal"] * prefix
    moves.extend(_myers_moves(middle_a, middle_b))
    moves.extend(["equal"] * suffix)

    opcodes: List[Tuple[str, int, int, int, int]] = []
    i = j = 0
    pos = 0
    while pos < len(moves):
        if moves[pos] == "equal":
            i1, j1 = i, j
            while pos < len(moves) and moves[pos] == "equal":
                i += 1
                j += 1
                pos += 1
            opcodes.append(("equal", i1, i, j1, j))
            continue

        i1, j1 = i, j
        while pos < len(moves) and moves[pos] != "equal":
            if moves[pos] == "delete":
                i += 1
            else:
                j += 1
            pos += 1
        if i > i1 and j > j1:
            tag = "replace"
        elif i > i1:
            tag = "delete"
        else:
            tag = "insert"
        opcodes.append((tag, i1, i, j1, j))

    return opcodes


# ==================== Spans ====================


def _common_affixes(old: str, new: str) -> Tuple[int, int]:
    """Lengths (in code points) of the common grapheme prefix and suffix."""
    old_g = split_graphemes(old)
    new_g = split_graphemes(new)
    p = 0
    while p < len(old_g) and p < len(new_g) and old_g[p] == new_g[p]:
        p += 1
    s = 0
    while (s < len(old_g) - p and s < len(new_g) - p
           and old_g[-1 - s] == new_g[-1 - s]):
        s += 1
    prefix_len = sum(len(g) for g in old_g[:p])
    suffix_len = sum(len(g) for g in old_g[len(old_g) - s:]) if s else 0
    return prefix_len, suffix_len


class _SpanBuilder:
    """Accumulates adjacent spans, merging runs of the same kind."""

    def __init__(self):
        self.spans: List[EditSpan] = []
        self.offset = 0

    def add(self, length: int, kind: EditKind) -> None:
        if length <= 0:
            return
        start = self.offset
        self.offset += length
        if self.spans and self.spans[-1].kind == kind:
            last = self.spans.pop()
            start = last.start
        self.spans.append(EditSpan(start, self.offset, kind))


def _token_spans(
    old_tokens: List[str], new_tokens: List[str]
) -> Tuple[List[EditSpan], List[EditSpan]]:
    old_spans = _SpanBuilder()
    new_spans = _SpanBuilder()

    for tag, i1, i2, j1, j2 in edit_script(old_tokens, new_tokens):
        old_len = sum(len(t) for t in old_tokens[i1:i2])
        new_len = sum(len(t) for t in new_tokens[j1:j2])

        if tag == "equal":
            old_spans.add(old_len, EditKind.UNCHANGED)
            new_spans.add(new_len, EditKind.UNCHANGED)
            continue

        if (tag == "replace" and i2 - i1 == 1 and j2 - j1 == 1
                and _char_class(old_tokens[i1]) == "word"
                and _char_class(new_tokens[j1]) == "word"):
            prefix, suffix = _common_affixes(old_tokens[i1], new_tokens[j1])
            old_spans.add(prefix, EditKind.UNCHANGED)
            old_spans.add(old_len - prefix - suffix, EditKind.REMOVED)
            old_spans.add(suffix, EditKind.UNCHANGED)
            new_spans.add(prefix, EditKind.UNCHANGED)
            new_spans.add(new_len - prefix - suffix, EditKind.ADDED)
            new_spans.add(suffix, EditKind.UNCHANGED)
            continue

        old_spans.add(old_len, EditKind.REMOVED)
        new_spans.add(new_len, EditKind.ADDED)

    return old_spans.spans, new_spans.spans


def similarity(old_text: str, new_text: str, old_spans: Sequence[EditSpan]) -> float:
    """Fraction of the pair's characters that are unchanged.

    Computed as 2 * unchanged / (len(old) + len(new)); the unchanged count
    is the same on both sides. Two empty lines are fully similar.
    """
    total = len(old_text) + len(new_text)
    if total == 0:
        return 1.0
    common = sum(s.end - s.start for s in old_spans if s.kind == EditKind.UNCHANGED)
    return 2.0 * common / total


def compute_word_diff(
    old_text: str,
    new_text: str,
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
) -> WordDiff:
    """Compute the token-level diff of a paired removed/added line.

    Args:
        old_text: Content of the removed line (without marker).
        new_text: Content of the added line (without marker).
        min_similarity: Pairs below this similarity are not edits.

    Returns:
        WordDiff with span partitions of both lines. is_edit is False when
        the lines share no non-whitespace text or their similarity is
        below min_similarity; the spans are still filled in.
    """
    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)

    if len(old_tokens) * len(new_tokens) > MAX_EDIT_CELLS:
        return WordDiff(
            old_text=old_text,
            new_text=new_text,
            old_spans=[EditSpan(0, len(old_text), EditKind.REMOVED)],
            new_spans=[EditSpan(0, len(new_text), EditKind.ADDED)],
            similarity=0.0,
            is_edit=False,
        )

    old_spans, new_spans = _token_spans(old_tokens, new_tokens)
    score = similarity(old_text, new_text, old_spans)
    shares_text = any(
        s.kind == EditKind.UNCHANGED and old_text[s.start:s.end].strip()
        for s in old_spans
    )

    return WordDiff(
        old_text=old_text,
        new_text=new_text,
        old_spans=old_spans,
        new_spans=new_spans,
        similarity=score,
        is_edit=shares_text and score >= min_similarity,
    )

