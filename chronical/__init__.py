"""A terminal nonogram puzzle game with YAML level packs stored in SQLite."""

__version__ = "0.1.0"