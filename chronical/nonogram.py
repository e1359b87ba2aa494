"""Nonogram puzzles: fill cells so that row and column run lengths match the clues.

A clue such as "4 8 3" means runs of four, eight and three filled cells, in
that order, with at least one blank cell between consecutive runs. The
primary action fills a cell; the secondary action marks it as known empty.
A state counts as solved when its row and column runs match the solution's.
"""

from __future__ import annotations

import logging
from itertools import groupby
from typing import List, Optional, Tuple

from .cell import Cell, CellState
from .engine import GameEngine
from .layout import Align, Style, join_horizontal, join_vertical
from .level import Level, Save

logger = logging.getLogger(__name__)

FILLED_TILE = "1"
KNOWN_EMPTY_TILE = "X"
EMPTY_TILE = " "

CELL_WIDTH = 3

_RENDER_STYLES = {
    FILLED_TILE: Style(foreground="255", background="255"),
    KNOWN_EMPTY_TILE: Style(foreground="245"),
    EMPTY_TILE: Style(foreground="250"),
}
_HIGHLIGHT_STYLE = Style(foreground="255", background="205")
_RENDER_GLYPHS = {
    FILLED_TILE: "⬤",
    KNOWN_EMPTY_TILE: "⊗",
    EMPTY_TILE: "◯",
}

Hints = List[List[int]]


def _runs(line) -> List[int]:
    """Lengths of consecutive filled cells in a line, or [0] if none."""
    runs = [
        sum(1 for _ in group) for filled, group in groupby(line, key=lambda c: c == FILLED_TILE)
        if filled
    ]
    return runs or [0]


def generate_tomography(state: str) -> Tuple[Hints, Hints]:
    """Row and column run lengths of filled cells in a newline-separated grid.

    Columns span the widest row; shorter rows count as empty beyond their end.
    """
    rows = state.split("\n")
    width = max((len(row) for row in rows), default=0)
    row_hints = [_runs(row) for row in rows]
    col_hints = [
        _runs(row[x] if x < len(row) else EMPTY_TILE for row in rows)
        for x in range(width)
    ]
    return row_hints, col_hints


def _tile_view(cell: Cell, highlighted: bool) -> str:
    style = _RENDER_STYLES.get(cell.value)
    if style is None:
        logger.debug('event="unknown_tile" value="%s"', cell.value)
        style = _RENDER_STYLES[EMPTY_TILE]
    if highlighted:
        style = _HIGHLIGHT_STYLE
    glyph = _RENDER_GLYPHS.get(cell.value, _RENDER_GLYPHS[EMPTY_TILE])
    sized = Style(
        foreground=style.foreground,
        background=style.background,
        width=CELL_WIDTH,
        align=Align.CENTER,
    )
    return sized.render(glyph)


class NonogramEngine(GameEngine):
    """Engine for nonogram levels, with clues derived from the solution."""

    def __init__(self, level: Level, save: Optional[Save] = None) -> None:
        super().__init__(level, save)
        self.row_hints, self.col_hints = generate_tomography(self.level.solution)
        self.hint_col_height = max((len(h) for h in self.col_hints), default=0)
        # Each hint takes about three characters, e.g. " 4 " or "10 ".
        self.hint_row_width = max((len(h) for h in self.row_hints), default=0) * 3

    def primary_action(self, x: int, y: int) -> None:
        self.set_cell_value(x, y, FILLED_TILE)

    def secondary_action(self, x: int, y: int) -> None:
        self.set_cell_value(x, y, KNOWN_EMPTY_TILE)

    def evaluate(self) -> bool:
        """Whether the current state's runs match the solution's clues."""
        rows, cols = generate_tomography(self.save.state)
        return rows == self.row_hints and cols == self.col_hints

    def view(self, cursor_x: int = 0, cursor_y: int = 0) -> str:
        grid = self._grid_view(cursor_x, cursor_y)
        row_hints = self._row_hint_view()
        col_hints = self._col_hint_view()
        help_text = self._help_view(cursor_x, cursor_y)

        spacer = Style(width=self.hint_row_width, height=self.hint_col_height).render("")
        top = join_horizontal(Align.BOTTOM, spacer, col_hints)
        body = join_horizontal(Align.TOP, row_hints, grid)
        return join_vertical(Align.LEFT, top, body, help_text)

    def _grid_view(self, cursor_x: int, cursor_y: int) -> str:
        rows = [
            join_horizontal(
                Align.TOP,
                *(
                    _tile_view(cell, x == cursor_x and y == cursor_y)
                    for x, cell in enumerate(row)
                ),
            )
            for y, row in enumerate(self.grid)
        ]
        return join_vertical(Align.LEFT, *rows)

    def _col_hint_view(self) -> str:
        blank = Style(width=CELL_WIDTH).render(" ")
        number = Style(width=CELL_WIDTH, align=Align.CENTER)
        columns = [
            join_vertical(
                Align.LEFT,
                *([blank] * (self.hint_col_height - len(hints))),
                *(number.render(str(h)) for h in hints),
            )
            for hints in self.col_hints
        ]
        return join_horizontal(Align.TOP, *columns)

    def _row_hint_view(self) -> str:
        style = Style(width=self.hint_row_width, align=Align.RIGHT)
        rows = [
            style.render(" ".join(f"{h:2d}" for h in hints)) for hints in self.row_hints
        ]
        return join_vertical(Align.LEFT, *rows)

    def _help_view(self, cursor_x: int, cursor_y: int) -> str:
        text = "\n"
        if self.grid[cursor_y][cursor_x].state is not CellState.GIVEN:
            text += "z: Toggle\tx: Mark Empty\tbackspace: clear\n"
        else:
            text += "\n"
        text += "arrow keys or hjkl to move\n"
        text += "Press 'esc' to return to the menu.\n"
        if self.save.solved:
            text += "Congrats!\n"
        return text