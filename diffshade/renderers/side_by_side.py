# diffshade/renderers/side_by_side.py
"""Side-by-side diff renderer.

Displays old and new versions in two panels of equal width separated by
a vertical line. Rows come from get_paired_lines(): context lines appear
on both sides, paired changes face each other, and unmatched removed or
added lines face an empty cell. Each panel wraps independently; the
shorter side of a row is padded with blank rows.

Output format (with line numbers):
     1  ⋮a = 1             │ 1  │a = 1
     2  ⋮b = 2             │ 2  │bb = 2
"""

from typing import List, Optional

from rich.segment import Segment

from ..box_drawing import Row, separator_segment
from ..compose import RenderedLine
from ..display_width import pad_segments
from ..line_numbers import LEFT, RIGHT
from ..pairing import get_paired_lines
from ..parser import Hunk
from .base import BaseRenderer

SEPARATOR_WIDTH = 1


class SideBySideRenderer(BaseRenderer):
    """Renders each hunk as two panels, old on the left and new on the right."""

    @property
    def panel_width(self) -> int:
        return max(1, (self.width - SEPARATOR_WIDTH) // 2)

    def render_hunk(self, hunk: Hunk) -> List[str]:
        """Render a closed hunk.

        Args:
            hunk: The hunk to render.

        Returns:
            Finished output lines, header first.
        """
        rows = self.render_hunk_header(hunk)
        if self.line_numbers is not None:
            self.line_numbers.initialize_hunk(hunk)

        rendered = self.compose_hunk(hunk)
        separator = separator_segment(self.colors.file_decoration)

        for left_index, right_index in get_paired_lines(hunk):
            left_rows = self._panel_rows(hunk, rendered, left_index, LEFT)
            right_rows = self._panel_rows(hunk, rendered, right_index, RIGHT)
            height = max(len(left_rows), len(right_rows))
            for k in range(height):
                left = left_rows[k] if k < len(left_rows) else self._blank_panel(LEFT)
                right = right_rows[k] if k < len(right_rows) else self._blank_panel(RIGHT)
                rows.append(left + [separator] + right)

        return self._finish(rows)

    def _panel_rows(self, hunk: Hunk, rendered: List[Optional[RenderedLine]],
                    index: Optional[int], side: str) -> List[Row]:
        """Rows of one panel cell (empty for a missing line)."""
        if index is None:
            return []

        segments, fill = self.line_content(hunk.lines[index], rendered[index])
        content_width = self.panel_width - self.gutter_width(side)
        blank_gutter = self.gutter(None, side)

        rows = []
        for k, body in enumerate(self.fit(segments, content_width, fill)):
            gutter = self.gutter(index, side) if k == 0 else blank_gutter
            row = gutter + body
            if side == LEFT:
                row = pad_segments(row, self.panel_width, None, self.ambiguous_width)
            rows.append(row)
        return rows

    def _blank_panel(self, side: str) -> Row:
        gutter = self.gutter(None, side)
        if side == RIGHT:
            return gutter
        return pad_segments(gutter or [Segment("")], self.panel_width, None, self.ambiguous_width)
