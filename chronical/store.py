"""SQLite persistence for level packs, levels and saves."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .level import Level, LevelPack, Save

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS level_packs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        author TEXT,
        version INTEGER NOT NULL DEFAULT 1,
        description TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS levels (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        level_pack_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        author TEXT,
        initial_state TEXT NOT NULL,
        solution TEXT NOT NULL,
        engine TEXT NOT NULL,
        FOREIGN KEY (level_pack_id) REFERENCES level_packs(id),
        UNIQUE(level_pack_id, name)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS saves (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        level_id INTEGER NOT NULL UNIQUE,
        state TEXT NOT NULL,
        solved BOOLEAN NOT NULL DEFAULT 0,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (level_id) REFERENCES levels(id)
    );
    """,
)

_LEVEL_COLUMNS = "id, name, author, initial_state, solution, engine"
_PACK_COLUMNS = "id, name, author, version, description"


class NotFoundError(LookupError):
    """Raised when a requested row does not exist."""


def _sql_in(query: str, args: Sequence[int]) -> Tuple[str, List[int]]:
    """Expand the first placeholder of a query into one per argument."""
    if not args:
        raise ValueError("no arguments provided for IN clause")
    placeholders = ",".join("?" * len(args))
    return query.replace("?", placeholders, 1), list(args)


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value)).replace(tzinfo=timezone.utc)


def _level_from_row(row) -> Level:
    level_id, name, author, initial, solution, engine = row
    return Level(
        id=level_id,
        name=name,
        author=author or "",
        initial=initial,
        solution=solution,
        engine=engine,
    )


def _pack_from_row(row) -> LevelPack:
    pack_id, name, author, version, description = row
    return LevelPack(
        id=pack_id,
        name=name,
        author=author or "",
        version=version,
        description=description or "",
    )


class Store:
    """Database of level packs, levels and saved progress."""

    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path)
        try:
            self.migrate()
        except sqlite3.Error:
            self._conn.close()
            raise

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    def migrate(self) -> None:
        """Create the tables if they do not exist yet."""
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def upsert_level_pack(self, pack: LevelPack) -> None:
        """Insert or update a pack by name and store its id on the pack."""
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO level_packs (name, author, version, description)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    author = excluded.author,
                    version = excluded.version,
                    description = excluded.description;
                """,
                (pack.name, pack.author, pack.version, pack.description),
            )
            row = self._conn.execute(
                "SELECT id FROM level_packs WHERE name = ?;", (pack.name,)
            ).fetchone()
        pack.id = row[0]

    def get_level_pack(self, pack_id: int) -> LevelPack:
        logger.info('event="get_level_pack" id=%d', pack_id)
        row = self._conn.execute(
            f"SELECT {_PACK_COLUMNS} FROM level_packs WHERE id = ?;", (pack_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"level pack {pack_id} not found")
        pack = _pack_from_row(row)
        logger.info('event="found_level_pack" name="%s"', pack.name)
        return pack

    def get_all_level_packs(self) -> List[LevelPack]:
        logger.info('event="get_all_level_packs"')
        packs = [
            _pack_from_row(row)
            for row in self._conn.execute(f"SELECT {_PACK_COLUMNS} FROM level_packs;")
        ]
        logger.info('event="found_level_packs" count=%d', len(packs))
        return packs

    def upsert_level(self, level: Level, level_pack_id: int) -> None:
        """Insert or update a level keyed by pack and name."""
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO levels (level_pack_id, name, author, initial_state, solution, engine)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(level_pack_id, name) DO UPDATE SET
                    author = excluded.author,
                    initial_state = excluded.initial_state,
                    solution = excluded.solution,
                    engine = excluded.engine;
                """,
                (
                    level_pack_id,
                    level.name,
                    level.author,
                    level.initial,
                    level.solution,
                    level.engine,
                ),
            )

    def get_level(self, level_id: int) -> Level:
        logger.info('event="get_level" id=%d', level_id)
        row = self._conn.execute(
            f"SELECT {_LEVEL_COLUMNS} FROM levels WHERE id = ?;", (level_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"level {level_id} not found")
        level = _level_from_row(row)
        logger.info('event="found_level" name="%s"', level.name)
        return level

    def get_level_by_name(self, name: str, level_pack_id: int) -> Level:
        row = self._conn.execute(
            f"SELECT {_LEVEL_COLUMNS} FROM levels WHERE name = ? AND level_pack_id = ?;",
            (name, level_pack_id),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"level {name!r} not found in pack {level_pack_id}")
        return _level_from_row(row)

    def get_levels_by_pack(self, level_pack_id: int) -> List[Level]:
        logger.info('event="get_levels_by_pack" level_pack_id=%d', level_pack_id)
        levels = [
            _level_from_row(row)
            for row in self._conn.execute(
                f"SELECT {_LEVEL_COLUMNS} FROM levels WHERE level_pack_id = ?;",
                (level_pack_id,),
            )
        ]
        logger.info(
            'event="found_levels_for_pack" count=%d level_pack_id=%d',
            len(levels),
            level_pack_id,
        )
        return levels

    def upsert_save(self, save: Save) -> None:
        """Store a save; a save equal to the level's start is deleted instead."""
        level = self.get_level(save.level_id)
        if level.initial == save.state:
            logger.info('event="delete_save_on_upsert" level_id=%d', save.level_id)
            self.delete_save(save.level_id)
            return
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO saves (level_id, state, solved, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(level_id) DO UPDATE SET
                    state = excluded.state,
                    solved = excluded.solved,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (save.level_id, save.state, bool(save.solved)),
            )

    def get_save(self, level_id: int) -> Save:
        logger.info('event="get_save" level_id=%d', level_id)
        row = self._conn.execute(
            """
            SELECT level_id, state, solved, created_at, updated_at
            FROM saves
            WHERE level_id = ?;
            """,
            (level_id,),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"no save for level {level_id}")
        logger.info('event="found_save" level_id=%d', level_id)
        saved_id, state, solved, created_at, updated_at = row
        return Save(
            level_id=saved_id,
            state=state,
            solved=bool(solved),
            created_at=_parse_timestamp(created_at),
            updated_at=_parse_timestamp(updated_at),
        )

    def delete_save(self, level_id: int) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM saves WHERE level_id = ?;", (level_id,))

    def get_all_levels(self) -> List[Level]:
        logger.info('event="get_all_levels"')
        levels = [
            _level_from_row(row)
            for row in self._conn.execute(f"SELECT {_LEVEL_COLUMNS} FROM levels;")
        ]
        logger.info('event="found_levels" count=%d', len(levels))
        return levels

    def count_levels(self) -> int:
        logger.info('event="count_levels"')
        (count,) = self._conn.execute("SELECT COUNT(*) FROM levels;").fetchone()
        logger.info('event="counted_levels" count=%d', count)
        return count

    def count_solved_levels(self) -> int:
        logger.info('event="count_solved_levels"')
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM saves WHERE solved = 1;"
        ).fetchone()
        logger.info('event="counted_solved_levels" count=%d', count)
        return count

    def get_save_indicators(self, level_ids: Iterable[int]) -> Dict[int, str]:
        """Map each level id to '*' (solved), '-' (in progress) or ' ' (no save)."""
        ids = list(level_ids)
        indicators = {level_id: " " for level_id in ids}
        if not ids:
            return indicators
        query, args = _sql_in("SELECT level_id, solved FROM saves WHERE level_id IN (?)", ids)
        for level_id, solved in self._conn.execute(query, args):
            indicators[level_id] = "*" if solved else "-"
        return indicators