"""Command line entry point: the interactive game plus pack import, export and test tools."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Optional, Sequence, Union

from blessed import Terminal

from .importer import dump_level_pack, export_level_pack, import_level_pack, parse_level_pack
from .level import Level, Save
from .model import Model, ViewState
from .nonogram import NonogramEngine
from .store import NotFoundError, Store

logger = logging.getLogger(__name__)

DATABASE_PATH = "chronical.db"
LOG_PATH = "chronical.log"

_NAMED_KEYS = {
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_ENTER": "enter",
    "KEY_ESCAPE": "esc",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "backspace",
}
_CONTROL_KEYS = {
    "\x03": "ctrl+c",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x1b": "esc",
}


class RoundTripError(ValueError):
    """Raised when an exported pack does not match the file it was loaded from."""


def render_level(engine_name: str, initial: str, save: str) -> str:
    """Draw a grid with the named engine, cursor at the top left.

    Literal ``\\n`` sequences in the arguments stand for line breaks.
    """
    initial = initial.replace("\\n", "\n").strip()
    save = save.replace("\\n", "\n").strip()
    level = Level(
        id=-1,
        name="Test Render",
        engine=engine_name,
        initial=initial,
        solution=save,
    )
    state = Save(level_id=0, state=initial)
    if engine_name != "nonogram":
        raise ValueError(f"unknown engine: {engine_name}")
    engine = NonogramEngine(level, state)
    return engine.view(0, 0)


def check_round_trip(store: Store, path: Union[str, Path]) -> None:
    """Import a pack file, export it again and raise RoundTripError if they differ."""
    import_level_pack(store, path)
    row = store.connection.execute(
        "SELECT id, name FROM level_packs ORDER BY id DESC LIMIT 1;"
    ).fetchone()
    if row is None:
        raise NotFoundError("no level pack found after import")
    pack_id, _name = row

    handle, exported_path = tempfile.mkstemp(prefix="exported-level-pack-", suffix=".yaml")
    os.close(handle)
    try:
        export_level_pack(store, pack_id, exported_path)
        source_text = Path(path).read_text(encoding="utf-8")
        exported = Path(exported_path).read_text(encoding="utf-8")
    finally:
        os.remove(exported_path)

    source_normalized = dump_level_pack(parse_level_pack(source_text))
    exported_normalized = dump_level_pack(parse_level_pack(exported))
    if source_normalized != exported_normalized:
        raise RoundTripError("exported file does not match original file")


def _key_name(keystroke) -> str:
    """Translate a terminal keystroke into the key names the model understands."""
    name = getattr(keystroke, "name", None)
    if name in _NAMED_KEYS:
        return _NAMED_KEYS[name]
    text = str(keystroke)
    return _CONTROL_KEYS.get(text, text)


def run_tui(model: Model) -> None:
    """Run the interactive interface until the model asks to quit."""
    term = Terminal()
    with term.fullscreen(), term.raw(), term.hidden_cursor():
        while True:
            screen = model.render().replace("\n", "\r\n")
            print(term.home + term.clear + screen, end="", flush=True)
            keystroke = term.inkey()
            try:
                if model.handle_key(_key_name(keystroke)):
                    return
            except (sqlite3.Error, OSError, LookupError, ValueError) as err:
                logger.info("error: %s", err)
                return


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chronical",
        description=(
            "A cli-based puzzle engine supporting a variety of modes and plain text levelpacks."
        ),
    )
    commands = parser.add_subparsers(dest="command")

    commands.add_parser(
        "export",
        help="Export a level pack to a YAML file. This is useful for sharing level packs with others.",
    )
    import_parser = commands.add_parser(
        "import",
        help="Import a level pack from a YAML file. This is useful for playing level packs created by others.",
    )
    import_parser.add_argument("path")

    test_parser = commands.add_parser("test", help=argparse.SUPPRESS)
    test_parser.add_argument(
        "--log-stdout",
        action="store_true",
        help="Write logs to stdout instead of a file.",
    )
    test_commands = test_parser.add_subparsers(dest="test_command", required=True)

    render_parser = test_commands.add_parser(
        "render",
        help="Render a game state for debugging. This is useful for testing new game engines.",
    )
    render_parser.add_argument("--engine", default="nonogram", help="The engine to use for rendering.")
    render_parser.add_argument("--initial", default="", help="The initial state of the grid.")
    render_parser.add_argument("--save", default="", help="The save state of the grid.")

    round_trip_parser = test_commands.add_parser(
        "import",
        help="Test importing and exporting a level pack to ensure that the process is working correctly.",
    )
    round_trip_parser.add_argument("path")
    return parser


def _fail(message: str) -> int:
    logger.error("%s", message)
    print(message, file=sys.stderr)
    return 1


def _run_command(args: argparse.Namespace) -> int:
    if args.command == "test" and args.test_command == "render":
        try:
            print(render_level(args.engine, args.initial, args.save))
        except (ValueError, IndexError) as err:
            return _fail(f"failed to render: {err}")
        return 0

    try:
        store = Store(DATABASE_PATH)
    except sqlite3.Error as err:
        return _fail(f"unable to init store: {err}")

    with store:
        if args.command == "import":
            try:
                import_level_pack(store, args.path)
            except (OSError, ValueError, sqlite3.Error) as err:
                return _fail(f"unable to import level pack: {err}")
            print("Level pack imported", "from", args.path)
            return 0

        if args.command == "test":
            try:
                check_round_trip(store, args.path)
            except (OSError, ValueError, LookupError, sqlite3.Error) as err:
                return _fail(str(err))
            print("import/export test passed")
            return 0

        state = ViewState.EXPORT if args.command == "export" else ViewState.MENU
        try:
            model = Model(store, state=state)
            run_tui(model)
        except (OSError, sqlite3.Error) as err:
            return _fail(f'event="tui_failed" err="{err}"')
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the command line and run the chosen command; return the exit status."""
    args = _build_parser().parse_args(argv)

    if args.command == "test" and args.log_stdout:
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    else:
        try:
            handler = logging.FileHandler(LOG_PATH, mode="a", encoding="utf-8")
        except OSError as err:
            print(f"unable to open log file: {err}", file=sys.stderr)
            return 1
    handler.setFormatter(logging.Formatter("%(asctime)s %(message)s"))

    root = logging.getLogger()
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    try:
        return _run_command(args)
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)
        handler.close()


if __name__ == "__main__":
    sys.exit(main())