"""Game engines: the shared grid logic and a fallback engine."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from .cell import Cell, CellState, new_cell
from .layout import Align, join_vertical
from .level import Level, Save

logger = logging.getLogger(__name__)

DEBUG_PRIMARY_TILE = "P"
DEBUG_SECONDARY_TILE = "S"
DEBUG_EMPTY_TILE = " "


class CoordinatesOutOfBounds(IndexError):
    """Raised when an action targets a position outside the grid."""

    def __init__(self, x: int, y: int) -> None:
        super().__init__("coordinates out of bounds")
        self.x = x
        self.y = y


def _saved_char(rows: List[str], x: int, y: int) -> Optional[str]:
    if y < len(rows) and x < len(rows[y]):
        return rows[y][x]
    return None


class GameEngine:
    """Grid of cells for a level, kept in step with its save."""

    def __init__(self, level: Level, save: Optional[Save] = None) -> None:
        level = dataclasses.replace(level)
        if save is None:
            logger.info('event="EmptyLevelLoad" level_id=%d', level.id)
            save = level.create_save(level.initial, False)
        else:
            logger.info(
                'event="StatefulLevelLoad" level_id=%d state="%s"', level.id, save.state
            )
            save = dataclasses.replace(save)

        saved_rows = save.state.split("\n")
        self.grid: List[List[Cell]] = [
            [new_cell(x, y, char, _saved_char(saved_rows, x, y)) for x, char in enumerate(row)]
            for y, row in enumerate(level.initial.split("\n"))
        ]
        self.game_name = level.engine
        self.level = level
        self.save = save

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    def evaluate(self) -> bool:
        """Whether the current state solves the level."""
        return self.level.solution == self.save.state

    def has_cell(self, x: int, y: int) -> bool:
        return 0 <= y < len(self.grid) and 0 <= x < len(self.grid[y])

    def set_cell_value(self, x: int, y: int, value: str) -> None:
        if not self.has_cell(x, y):
            raise CoordinatesOutOfBounds(x, y)
        self.grid[y][x].enter_value(value)
        self._update_save_state()

    def clear_cell(self, x: int, y: int) -> None:
        if not self.has_cell(x, y):
            raise CoordinatesOutOfBounds(x, y)
        self.grid[y][x].clear()
        self._update_save_state()

    def view(self, cursor_x: int = 0, cursor_y: int = 0) -> str:
        return ""

    def _update_save_state(self) -> None:
        self.save.state = "\n".join(
            "".join(cell.value for cell in row) for row in self.grid
        )
        self.save.solved = bool(self.evaluate())


class DebugEngine(GameEngine):
    """Fallback engine that writes marker tiles and shows only help text."""

    def primary_action(self, x: int, y: int) -> None:
        self.set_cell_value(x, y, DEBUG_PRIMARY_TILE)

    def secondary_action(self, x: int, y: int) -> None:
        self.set_cell_value(x, y, DEBUG_SECONDARY_TILE)

    def view(self, cursor_x: int = 0, cursor_y: int = 0) -> str:
        return join_vertical(Align.LEFT, "no loaded engine", self._help_view(cursor_x, cursor_y))

    def _help_view(self, cursor_x: int, cursor_y: int) -> str:
        if self.grid[cursor_y][cursor_x].state is not CellState.GIVEN:
            text = "\nz: primary, x: secondary, backspace: clear\n"
        else:
            text = "\n\n"
        text += "arrow keys or hjkl to move\n"
        text += "Press 'esc' to return to the menu.\n"
        if self.save.solved:
            text += "Congrats!\n"
        return text