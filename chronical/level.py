"""Levels, level packs and save records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


class LevelError(ValueError):
    """Raised when a level definition is unusable."""


@dataclass
class Save:
    """Progress stored for one level."""

    level_id: int
    state: str
    solved: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class LevelPack:
    """A named collection of levels."""

    id: int = 0
    name: str = ""
    author: str = ""
    version: int = 0
    description: str = ""


@dataclass
class Level:
    """A single puzzle: its starting grid, solution and engine."""

    id: int = 0
    name: str = ""
    author: str = ""
    initial: str = ""
    solution: str = ""
    engine: str = ""
    width: int = 0
    height: int = 0

    def validate(self) -> None:
        """Check the level and refresh its dimensions; raise LevelError if unusable."""
        if self.id < 0:
            raise LevelError("level id cannot be negative")
        if self.solution == "":
            raise LevelError("solution cannot be empty")
        self.set_dimensions()
        if self.width <= 0 or self.height <= 0:
            raise LevelError("level dimensions cannot be zero or negative")

    def create_save(self, state: str, solved: bool = False) -> Save:
        """Return a save of this level holding the given state."""
        try:
            self.validate()
        except LevelError as err:
            logger.info(
                'event="invalid_level_save" level_id=%d, err="%s"', self.id, err
            )
        else:
            logger.info(
                'event="valid_level_save" level_id=%d, state="%s"', self.id, state
            )
        if solved:
            logger.info('event="solved_level_saved" level_id=%d', self.id)
        return Save(level_id=self.id, state=state, solved=solved)

    def set_dimensions(self) -> None:
        """Derive width and height from the initial grid."""
        if self.initial == "":
            self.width = 0
            self.height = 0
            return
        lines = self.initial.strip().split("\n")
        self.height = len(lines)
        self.width = len(lines[0]) if lines else 0