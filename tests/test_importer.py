import logging

import pytest

from chronical.importer import (
    LevelPackDocument,
    dump_level_pack,
    export_level_pack,
    import_level_pack,
    parse_level_pack,
)
from chronical.level import Level
from chronical.store import NotFoundError, Store

STATIC_YAML = """
name: Test Pack
author: Crush
version: 1
description: A test level pack
levels:
  - id: 1
    name: Test Level 1
    author: Crush
    initial: |
      .1.
      1.1
      .1.
    solution: |
      111
      111
      111
    engine: nonogram
    width: 3
    height: 3
"""

UPDATED_YAML = """
name: Test Pack
author: Crush
version: 2
description: An updated test level pack
levels:
  - id: 1
    name: Test Level 1
    author: Crush
    initial: |
      .1.
      1.1
      .1.
    solution: |
      111
      111
      111
    engine: nonogram
    width: 3
    height: 3
  - id: 2
    name: Test Level 2
    author: Crush
    initial: |
      1.
      .1
    solution: |
      1.
      .1
    engine: nonogram
    width: 2
    height: 2
"""


@pytest.fixture
def store():
    with Store(":memory:") as db:
        yield db


@pytest.fixture
def pack_file(tmp_path):
    path = tmp_path / "test.yaml"
    path.write_text(STATIC_YAML, encoding="utf-8")
    return path


def test_parse_level_pack():
    document = parse_level_pack(STATIC_YAML)
    assert (document.name, document.author, document.version) == ("Test Pack", "Crush", 1)
    assert document.description == "A test level pack"
    assert document.levels == [
        Level(
            id=1,
            name="Test Level 1",
            author="Crush",
            initial=".1.\n1.1\n.1.\n",
            solution="111\n111\n111\n",
            engine="nonogram",
            width=3,
            height=3,
        )
    ]


def test_parse_empty_document():
    assert parse_level_pack("") == LevelPackDocument()


def test_parse_rejects_non_mapping():
    with pytest.raises(ValueError):
        parse_level_pack("- a\n- b\n")


def test_dump_round_trip():
    document = parse_level_pack(STATIC_YAML)
    text = dump_level_pack(document)
    assert text.startswith("name: Test Pack\n")
    assert "initial: |\n" in text
    assert parse_level_pack(text) == document


def test_import_and_export(store, pack_file, tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="chronical.importer")
    import_level_pack(store, pack_file)
    assert "Successfully imported level pack" in caplog.text

    packs = store.get_all_level_packs()
    assert len(packs) == 1
    pack = packs[0]
    assert pack.name == "Test Pack"

    levels = store.get_levels_by_pack(pack.id)
    assert len(levels) == 1
    assert levels[0].initial == " 1 \n1 1\n 1 \n"

    export_path = tmp_path / "test.yaml.exported"
    export_level_pack(store, pack.id, export_path)

    original = parse_level_pack(STATIC_YAML)
    exported = parse_level_pack(export_path.read_text(encoding="utf-8"))
    assert exported.name == original.name
    assert exported.author == original.author
    assert len(exported.levels) == len(original.levels)
    assert exported.levels[0].name == original.levels[0].name
    assert exported.levels[0].initial == original.levels[0].initial
    assert exported.levels[0].solution == original.levels[0].solution


def test_update_pack(store, pack_file):
    import_level_pack(store, pack_file)
    pack_file.write_text(UPDATED_YAML, encoding="utf-8")
    import_level_pack(store, pack_file)

    packs = store.get_all_level_packs()
    assert len(packs) == 1
    pack = packs[0]
    assert pack.version == 2
    assert pack.description == "An updated test level pack"
    assert len(store.get_levels_by_pack(pack.id)) == 2


def test_import_returns_pack_with_id(store, pack_file):
    pack = import_level_pack(store, pack_file)
    assert store.get_level_pack(pack.id).name == "Test Pack"


def test_export_missing_pack(store, tmp_path):
    with pytest.raises(NotFoundError):
        export_level_pack(store, 123, tmp_path / "out.yaml")


def test_import_missing_file(store, tmp_path):
    with pytest.raises(FileNotFoundError):
        import_level_pack(store, tmp_path / "absent.yaml")