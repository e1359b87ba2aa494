# chronical

A terminal puzzle game. Puzzles are grouped in level packs, which are shared
as plain YAML files and kept in a local SQLite database (`chronical.db` in the
current directory). Logs are appended to `chronical.log` in the current
directory.

The supported puzzle type is the nonogram: fill cells so that the runs of
filled cells in every row and column match the clues at the grid's edges.

## Installing

```
pip install .
```

## Playing

```
chronical
```

The menu offers **Browse**, **Export** and **Quit**. Use the arrow keys or
`hjkl` to move, `enter` to choose, and `q` or `esc` to quit from the menu.

**Browse** lists the installed level packs; `enter` opens a pack and lists its
levels, `enter` again starts the selected level, and `esc` steps back. In the
level list, `*` marks a solved level and `-` one in progress.

In a puzzle:

- `z` fills the cell under the cursor
- `x` marks it as known empty
- `backspace` clears it
- `esc` saves your progress (if the grid differs from its starting state) and
  returns to the menu
- `q` or `ctrl+c` quits without saving

Cells that are part of the puzzle's starting grid cannot be changed.
"Congrats!" appears once the grid's row and column runs match the solution's.

## Level packs

Import a pack from a YAML file:

```
chronical import pack.yaml
```

Export an installed pack (opens the pack list; `enter` writes
`<pack name>.yaml` in the current directory and exits):

```
chronical export
```

A pack looks like this; `.` stands for an empty cell:

```yaml
name: Starter Pack
author: Someone
version: 1
description: A few small puzzles
levels:
  - id: 1
    name: Diamond
    author: Someone
    initial: |
      ...
      ...
      ...
    solution: |
      .1.
      111
      .1.
    engine: nonogram
    width: 3
    height: 3
```

Packs are matched by name. Importing a pack whose name already exists updates
its author, version and description; levels are matched by name within the
pack, so existing ones are updated and new ones are added. Levels already in
the database but missing from the file are kept.

On import, `id`, `width` and `height` are not taken from the file: ids come
from the database and dimensions are worked out from `initial`. On export,
`id` is the database id and `width` and `height` are written as `0`.

## Tools for pack authors

Render a grid without playing it (use `\n` between rows; `--save` is taken as
the solution the clues are drawn from):

```
chronical test render --engine nonogram --initial "...\n...\n..." --save ".1.\n111\n.1."
```

Check that a pack survives an import followed by an export unchanged (the pack
is imported into `chronical.db`):

```
chronical test import pack.yaml
```

Put `--log-stdout` after `test` to see the log on the terminal instead of in
the log file, e.g. `chronical test --log-stdout import pack.yaml`.

## Using it as a library

- `chronical.store.Store` wraps the SQLite database (packs, levels, saves);
  it can be used as a context manager.
- `chronical.importer.import_level_pack(store, path)` and
  `export_level_pack(store, level_pack_id, path)` move packs between YAML files
  and a store; `parse_level_pack` and `dump_level_pack` work on YAML text.
- `chronical.nonogram.generate_tomography(state)` returns the row and column
  runs of a grid; `NonogramEngine(level, save)` plays a level.
- `chronical.model.Model` holds the interface state; feed it key names with
  `handle_key` and draw it with `render`.

## Limitations

- Nonogram is the only puzzle type. A level naming any other engine opens in a
  placeholder engine that shows "no loaded engine" instead of a grid, and
  `chronical test render` only accepts `--engine nonogram`.
- The database and log file locations are fixed to the current directory.
- There is no way to delete packs or levels from the interface or the command
  line.

## Development

```
pip install -e ".[test]"
pytest
```