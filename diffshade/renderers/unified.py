# diffshade/renderers/unified.py
"""Unified diff renderer.

Keeps the input's line order. Each hunk line becomes one or more output
rows: an optional line-number gutter followed by the styled content.
Removed and added rows are filled to the full width with their
background, and rows that do not fit are wrapped (continuation rows get a
blank gutter) or truncated with an ellipsis.

Output format (with line numbers):
     1  ⋮ 1  │a = 1
     2  ⋮    │b = 2
        ⋮ 2  │bb = 2
"""

from typing import List

from ..parser import Hunk
from .base import BaseRenderer


class UnifiedRenderer(BaseRenderer):
    """Renders hunks in input order, one hunk line per row."""

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
        content_width = self.width - self.gutter_width()
        blank_gutter = self.gutter(None)

        for index, line in enumerate(hunk.lines):
            segments, fill = self.line_content(line, rendered[index])
            for k, body in enumerate(self.fit(segments, content_width, fill)):
                gutter = self.gutter(index) if k == 0 else blank_gutter
                rows.append(gutter + body)

        return self._finish(rows)
