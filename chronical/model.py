"""Application state for the terminal interface: menu, browser, game and export screens."""

from __future__ import annotations

import dataclasses
import enum
import logging
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional, Union

from .engine import DebugEngine, GameEngine
from .importer import export_level_pack
from .layout import (
    BLURRED_STYLE,
    FOCUSED_STYLE,
    SUBTLE_STYLE,
    TABLE_TITLE_STYLE,
    TITLE_STYLE,
    Align,
    Style,
    join_horizontal,
)
from .level import Level, LevelPack, Save
from .nonogram import NonogramEngine
from .store import NotFoundError, Store

logger = logging.getLogger(__name__)

_TITLE_ART = """
  ▌       ▘    ▜ 
▛▘▛▌▛▘▛▌▛▌▌▛▘▀▌▐ 
▙▖▌▌▌ ▙▌▌▌▌▙▖█▌▐▖
"""
_MENU_BUTTONS = ("Browse", "Export", "Quit")
_UP = frozenset({"up", "k"})
_DOWN = frozenset({"down", "j"})
_LEFT = frozenset({"left", "h"})
_RIGHT = frozenset({"right", "l"})


class ViewState(enum.Enum):
    """The screen the interface is showing."""

    MENU = "menu"
    BROWSE = "browse"
    GAME = "game"
    EXPORT = "export"


def create_engine(level: Level, save: Optional[Save] = None) -> GameEngine:
    """Build the engine a level asks for, falling back to the debug engine."""
    if level.engine == "nonogram":
        return NonogramEngine(level, save)
    logger.info('event="engine_not_found" level_engine="%s"', level.engine)
    return DebugEngine(dataclasses.replace(level, engine="fallback"), save)


class Model:
    """State of the interface and its response to key presses."""

    def __init__(
        self,
        store: Store,
        export_dir: Union[str, Path] = ".",
        state: ViewState = ViewState.MENU,
    ) -> None:
        self.store = store
        self.export_dir = Path(export_dir)
        self.state = state
        self.engine: Optional[GameEngine] = None
        self.cursor_x = 0
        self.cursor_y = 0
        self.level_packs: List[LevelPack] = store.get_all_level_packs()
        self.levels: Optional[List[Level]] = None
        self.level_pack_index = 0
        self.level_index = 0
        self.menu_index = 0
        self.loaded_packs = len(self.level_packs)
        self.save_indicators: Dict[int, str] = {}
        try:
            self.total_levels = store.count_levels()
        except sqlite3.Error as err:
            logger.info("could not count levels %s", err)
            self.total_levels = 0
        try:
            self.solved_levels = store.count_solved_levels()
        except sqlite3.Error as err:
            logger.info("could not count solved levels %s", err)
            self.solved_levels = 0

    # --- key handling ---

    def handle_key(self, key: str) -> bool:
        """Apply a key press; return True when the program should quit."""
        handler = {
            ViewState.MENU: self._menu_key,
            ViewState.BROWSE: self._browse_key,
            ViewState.GAME: self._game_key,
            ViewState.EXPORT: self._export_key,
        }[self.state]
        return handler(key)

    def _menu_key(self, key: str) -> bool:
        if key in ("q", "ctrl+c", "esc"):
            return True
        if key in _UP:
            self.menu_index = max(self.menu_index - 1, 0)
        elif key in _DOWN:
            self.menu_index = min(self.menu_index + 1, len(_MENU_BUTTONS) - 1)
        elif key == "enter":
            if self.menu_index == 0:
                self.state = ViewState.BROWSE
            elif self.menu_index == 1:
                self.state = ViewState.EXPORT
            else:
                return True
        return False

    def _browse_key(self, key: str) -> bool:
        if key == "ctrl+c":
            return True
        if key == "esc":
            if self.levels is not None:
                self.levels = None
                self.level_index = 0
            else:
                self.state = ViewState.MENU
        elif key in _UP:
            if self.levels is None:
                self.level_pack_index = max(self.level_pack_index - 1, 0)
            else:
                self.level_index = max(self.level_index - 1, 0)
        elif key in _DOWN:
            if self.levels is None:
                if self.level_pack_index < len(self.level_packs) - 1:
                    self.level_pack_index += 1
            elif self.level_index < len(self.levels) - 1:
                self.level_index += 1
        elif key == "enter":
            if self.levels is None:
                self._open_pack()
            else:
                self._open_level()
        return False

    def _open_pack(self) -> None:
        if not self.level_packs:
            return
        pack = self.level_packs[self.level_pack_index]
        levels = self.store.get_levels_by_pack(pack.id)
        self.levels = levels or None
        self.level_index = 0
        self.save_indicators = self.store.get_save_indicators(level.id for level in levels)

    def _open_level(self) -> None:
        level = self.levels[self.level_index]
        try:
            save: Optional[Save] = self.store.get_save(level.id)
        except NotFoundError:
            logger.info('event="no_save_file_found" level_id=%d', level.id)
            save = None
        engine = create_engine(level, save)
        logger.info('event="created_engine" engine_type="%s"', engine.game_name)
        self.engine = engine
        self.state = ViewState.GAME
        self.cursor_x = 0
        self.cursor_y = 0
        self.levels = None

    def _game_key(self, key: str) -> bool:
        engine = self.engine
        if key in ("q", "ctrl+c"):
            return True
        if key == "esc":
            self._leave_game()
        elif key in _UP:
            if engine.has_cell(self.cursor_x, self.cursor_y - 1):
                self.cursor_y -= 1
        elif key in _DOWN:
            if engine.has_cell(self.cursor_x, self.cursor_y + 1):
                self.cursor_y += 1
        elif key in _LEFT:
            if engine.has_cell(self.cursor_x - 1, self.cursor_y):
                self.cursor_x -= 1
        elif key in _RIGHT:
            if engine.has_cell(self.cursor_x + 1, self.cursor_y):
                self.cursor_x += 1
        elif key == "z":
            engine.primary_action(self.cursor_x, self.cursor_y)
        elif key == "x":
            engine.secondary_action(self.cursor_x, self.cursor_y)
        elif key == "backspace":
            engine.clear_cell(self.cursor_x, self.cursor_y)
        return False

    def _leave_game(self) -> None:
        save = self.engine.save
        level = self.engine.level
        if save.state != level.initial:
            try:
                self.store.upsert_save(save)
            except (sqlite3.Error, NotFoundError) as err:
                logger.info(
                    'event="save_progress_failed" level_id=%d err="%s"', level.id, err
                )
            else:
                logger.info(
                    'event="save_progress_success" level_id=%d solved="%s"',
                    level.id,
                    save.solved,
                )
        self.state = ViewState.MENU
        self.engine = None

    def _export_key(self, key: str) -> bool:
        if key in ("q", "ctrl+c", "esc"):
            self.state = ViewState.MENU
        elif key in _UP:
            self.level_pack_index = max(self.level_pack_index - 1, 0)
        elif key in _DOWN:
            if self.level_pack_index < len(self.level_packs) - 1:
                self.level_pack_index += 1
        elif key == "enter":
            if not self.level_packs:
                return False
            pack = self.level_packs[self.level_pack_index]
            export_level_pack(self.store, pack.id, self.export_dir / f"{pack.name}.yaml")
            return True
        return False

    # --- rendering ---

    def render(self) -> str:
        """Draw the current screen."""
        text = ""
        if self.state is not ViewState.MENU:
            if self.engine is not None:
                level = self.engine.level
                title = f"{self.engine.game_name} - {level.name} by {level.author}"
            else:
                title = "chronical"
            text = TITLE_STYLE.render(title) + "\n\n"

        if self.state is ViewState.MENU:
            text += self._menu_view()
        elif self.state is ViewState.BROWSE:
            text += self._browse_view()
        elif self.state is ViewState.GAME:
            text += self.engine.view(self.cursor_x, self.cursor_y)
        else:
            text += self._export_view()
        return text

    def _pack_list(self) -> str:
        text = ""
        for i, pack in enumerate(self.level_packs):
            if i == self.level_pack_index:
                text += FOCUSED_STYLE.render(f"> {pack.name} by {pack.author}") + "\n"
            else:
                text += BLURRED_STYLE.render(f"  {pack.name} by {pack.author}") + "\n"
        return text

    def _menu_view(self) -> str:
        text = Style(margin=1, foreground="130").render(_TITLE_ART)
        for i, button in enumerate(_MENU_BUTTONS):
            if i == self.menu_index:
                style = Style(padding=(1, 2), foreground="205", bold=True)
                text += style.render("> " + button)
            else:
                text += Style(padding=(1, 2)).render("  " + button)
            text += "\n"

        percentage = 0.0
        if self.total_levels > 0:
            percentage = self.solved_levels / self.total_levels * 100
        stats = Style(align=Align.RIGHT, padding=(1, 2)).render(
            f"Loaded: {self.loaded_packs} Pack(s) {self.total_levels} Levels\n"
            f"Solved: {self.solved_levels}/{self.total_levels} ({percentage:.2f}%)"
        )
        return join_horizontal(Align.BOTTOM, text, stats)

    def _browse_view(self) -> str:
        if self.levels is None:
            text = "Select a level pack:\n\n" + self._pack_list()
        else:
            pack = self.level_packs[self.level_pack_index]
            text = f"Select a level in {pack.name}:\n\n"
            header = f"  {'Level Name':<24}\t(Game Mode)\tSave"
            text += TABLE_TITLE_STYLE.render(header) + "\n"
            for i, level in enumerate(self.levels):
                indicator = self.save_indicators.get(level.id, "")
                line = f"  {level.name:<24}\t({level.engine})\t{indicator}"
                if i == self.level_index:
                    text += FOCUSED_STYLE.render(">" + line[1:]) + "\n"
                else:
                    text += BLURRED_STYLE.render(line) + "\n"
        text += "\n" + SUBTLE_STYLE.render("Press 'esc' to return to the menu.") + "\n"
        return text

    def _export_view(self) -> str:
        text = "Select a level pack to export:\n\n" + self._pack_list()
        text += "\n" + SUBTLE_STYLE.render("Press 'enter' to export the selected level pack.") + "\n"
        text += SUBTLE_STYLE.render("Press 'esc' to return to the menu.") + "\n"
        return text