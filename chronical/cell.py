"""Grid cells and the rules for changing their contents."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_BLANK_MARKS = frozenset({"", ".", " "})


class CellState(enum.IntEnum):
    """Lifecycle of a cell on the board."""

    GIVEN = 0
    EMPTY = 1
    FILLED = 2
    INVALID = 3


@dataclass
class Cell:
    """A single square of a puzzle grid."""

    x: int
    y: int
    state: CellState = CellState.EMPTY
    value: str = " "

    def enter_value(self, value: str) -> None:
        """Write a value into the cell unless it is part of the puzzle."""
        if self.state is CellState.GIVEN:
            logger.info(
                'event="enter_value_failed" reason="cell is given" x=%d y=%d',
                self.x,
                self.y,
            )
            return
        self.value = value
        self.state = CellState.FILLED
        logger.info(
            'event="enter_value_success" x=%d y=%d value=%s', self.x, self.y, self.value
        )

    def clear(self) -> None:
        """Empty the cell unless it is given or already empty."""
        if self.state is CellState.GIVEN:
            logger.info(
                'event="clear_failed" reason="cell is given" x=%d y=%d', self.x, self.y
            )
            return
        if self.state is CellState.EMPTY:
            return
        logger.info(
            'event="clear_success" x=%d y=%d value=%s', self.x, self.y, self.value
        )
        self.value = " "
        self.state = CellState.EMPTY

    def run_validation(self, result: bool) -> None:
        """Move a filled cell between the filled and invalid states."""
        if self.state is CellState.FILLED and not result:
            self.state = CellState.INVALID
            logger.info(
                'event="validation_failed" x=%d y=%d value=%s',
                self.x,
                self.y,
                self.value,
            )
        elif self.state is CellState.INVALID and result:
            self.state = CellState.FILLED
            logger.info(
                'event="validation_passed" x=%d y=%d value=%s',
                self.x,
                self.y,
                self.value,
            )

    def view(self) -> str:
        return self.value


def _is_mark(char: Optional[str]) -> bool:
    return char is not None and char not in _BLANK_MARKS


def new_cell(
    x: int, y: int, initial: Optional[str] = None, saved: Optional[str] = None
) -> Cell:
    """Build a cell from its puzzle character and its saved character."""
    cell = Cell(x=x, y=y)
    if _is_mark(initial):
        cell.value = initial
        cell.state = CellState.GIVEN
    elif _is_mark(saved):
        cell.value = saved
        cell.state = CellState.FILLED
    logger.info(
        'event="new_cell" x=%d y=%d value=%s state=%d',
        cell.x,
        cell.y,
        cell.value,
        cell.state,
    )
    return cell