"""Terminal presentation of a raster surface using upper half-block cells.

Each terminal cell shows two logical pixels stacked vertically: the glyph
foreground paints the top one and the cell background the bottom one. Hosts
therefore size the renderer at ``columns x rows * 2`` logical units.
"""

from __future__ import annotations

from rich.color import Color
from rich.style import Style
from rich.text import Text

from .surface import RGB, RasterSurface

UPPER_HALF_BLOCK = "▀"
ROWS_PER_CELL = 2


def logical_size_for_cells(columns: int, rows: int) -> tuple[int, int]:
    """Logical drawing size for a ``columns x rows`` cell region."""
    return max(0, columns), max(0, rows) * ROWS_PER_CELL


def render_halfblock(surface: RasterSurface) -> Text:
    """Downsample ``surface`` and encode it as styled half-block text."""
    grid = surface.logical_pixels()
    text = Text(no_wrap=True, overflow="crop")
    styles: dict[tuple[RGB, RGB], Style] = {}
    for top_y in range(0, len(grid), ROWS_PER_CELL):
        if top_y:
            text.append("\n")
        top_row = grid[top_y]
        bottom_row = grid[top_y + 1] if top_y + 1 < len(grid) else None
        run_style: Style | None = None
        run_length = 0
        for column, top in enumerate(top_row):
            bottom = bottom_row[column] if bottom_row is not None else surface.background
            key = (top, bottom)
            style = styles.get(key)
            if style is None:
                style = Style(
                    color=Color.from_rgb(*top),
                    bgcolor=Color.from_rgb(*bottom),
                )
                styles[key] = style
            if style is run_style:
                run_length += 1
                continue
            if run_style is not None:
                text.append(UPPER_HALF_BLOCK * run_length, run_style)
            run_style = style
            run_length = 1
        if run_style is not None:
            text.append(UPPER_HALF_BLOCK * run_length, run_style)
    return text
