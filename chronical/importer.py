"""Reading and writing level packs as YAML documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Union

import yaml

from .level import Level, LevelPack
from .store import Store

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_LEVEL_FIELDS = ("id", "name", "author", "initial", "solution", "engine", "width", "height")
_INT_FIELDS = frozenset({"id", "width", "height"})


@dataclass
class LevelPackDocument:
    """A level pack with its levels, as stored in a pack file."""

    name: str = ""
    author: str = ""
    version: int = 0
    description: str = ""
    levels: List[Level] = field(default_factory=list)


class _Dumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str):
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_Dumper.add_representer(str, _represent_str)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _number(value: Any) -> int:
    return 0 if value is None else int(value)


def _level_from_mapping(data: Any) -> Level:
    if not isinstance(data, dict):
        raise ValueError("each level must be a mapping")
    values = {
        key: (_number if key in _INT_FIELDS else _text)(data.get(key))
        for key in _LEVEL_FIELDS
    }
    return Level(**values)


def parse_level_pack(text: str) -> LevelPackDocument:
    """Parse a YAML level pack document."""
    data = yaml.safe_load(text)
    if data is None:
        return LevelPackDocument()
    if not isinstance(data, dict):
        raise ValueError("level pack document must be a mapping")
    levels = data.get("levels") or []
    if not isinstance(levels, list):
        raise ValueError("levels must be a list")
    return LevelPackDocument(
        name=_text(data.get("name")),
        author=_text(data.get("author")),
        version=_number(data.get("version")),
        description=_text(data.get("description")),
        levels=[_level_from_mapping(item) for item in levels],
    )


def dump_level_pack(document: LevelPackDocument) -> str:
    """Serialise a level pack document to YAML."""
    data = {
        "name": document.name,
        "author": document.author,
        "version": document.version,
        "description": document.description,
        "levels": [
            {key: getattr(level, key) for key in _LEVEL_FIELDS} for level in document.levels
        ],
    }
    return yaml.dump(
        data,
        Dumper=_Dumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def export_level_pack(store: Store, level_pack_id: int, path: PathLike) -> None:
    """Write a stored level pack to a YAML file, with blanks written as dots."""
    pack = store.get_level_pack(level_pack_id)
    levels = store.get_levels_by_pack(level_pack_id)
    for level in levels:
        level.initial = level.initial.replace(" ", ".")
        level.solution = level.solution.replace(" ", ".")
    document = LevelPackDocument(
        name=pack.name,
        author=pack.author,
        version=pack.version,
        description=pack.description,
        levels=levels,
    )
    Path(path).write_text(dump_level_pack(document), encoding="utf-8")


def import_level_pack(store: Store, path: PathLike) -> LevelPack:
    """Load a YAML level pack into the store, updating any pack of the same name."""
    document = parse_level_pack(Path(path).read_text(encoding="utf-8"))
    pack = LevelPack(
        name=document.name,
        author=document.author,
        version=document.version,
        description=document.description,
    )
    store.upsert_level_pack(pack)

    for level in document.levels:
        level.initial = level.initial.replace(".", " ")
        level.solution = level.solution.replace(".", " ")
        level.set_dimensions()
        store.upsert_level(level, pack.id)

    logger.info("Successfully imported level pack:")
    logger.info("  Name: %s", pack.name)
    logger.info("  Author: %s", pack.author)
    logger.info("  Version: %d", pack.version)
    logger.info("  Description: %s", pack.description)
    logger.info("  Levels: %d", len(document.levels))
    return pack