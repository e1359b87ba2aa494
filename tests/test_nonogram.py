import re

import pytest

from chronical.engine import CoordinatesOutOfBounds
from chronical.level import Level, Save
from chronical.nonogram import NonogramEngine, generate_tomography

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def _plain(text):
    return _ANSI.sub("", text)


@pytest.mark.parametrize(
    "state,rows,cols",
    [
        ("", [[0]], []),
        ("1", [[1]], [[1]]),
        (" ", [[0]], [[0]]),
        ("1 \n 1", [[1], [1]], [[1], [1]]),
        ("11 1\n1 11", [[2, 1], [1, 2]], [[2], [1], [1], [2]]),
        ("11\n11", [[2], [2]], [[2], [2]]),
        ("  \n  ", [[0], [0]], [[0], [0]]),
        ("1 \n1 \n1 ", [[1], [1], [1]], [[3], [0]]),
        (" 1\n 1\n 1", [[1], [1], [1]], [[0], [3]]),
        ("11\n  ", [[2], [0]], [[1], [1]]),
        ("  \n11", [[0], [2]], [[1], [1]]),
        ("111\n11\n1", [[3], [2], [1]], [[3], [2], [1]]),
    ],
)
def test_generate_tomography(state, rows, cols):
    assert generate_tomography(state) == (rows, cols)


def test_known_empty_marks_do_not_count_as_filled():
    assert generate_tomography("1X1") == ([[1, 1]], [[1], [0], [1]])


def _level(initial="  \n  ", solution="1 \n 1"):
    return Level(id=1, name="Diag", author="Tester", initial=initial,
                 solution=solution, engine="nonogram")


def test_hint_dimensions():
    engine = NonogramEngine(_level(initial="    \n    ", solution="11 1\n1 11"))
    assert engine.row_hints == [[2, 1], [1, 2]]
    assert engine.col_hints == [[2], [1], [1], [2]]
    assert engine.hint_row_width == 6
    assert engine.hint_col_height == 1


def test_solving_with_primary_actions():
    engine = NonogramEngine(_level())
    assert engine.evaluate() is False
    engine.primary_action(0, 0)
    assert engine.save.solved is False
    engine.primary_action(1, 1)
    assert engine.save.state == "1 \n 1"
    assert engine.save.solved is True
    assert engine.evaluate() is True


def test_known_empty_marks_still_solve():
    engine = NonogramEngine(_level())
    engine.primary_action(0, 0)
    engine.primary_action(1, 1)
    engine.secondary_action(1, 0)
    engine.secondary_action(0, 1)
    assert engine.save.state == "1X\nX1"
    assert engine.save.solved is True


def test_clear_unsolves():
    engine = NonogramEngine(_level(), Save(level_id=1, state="1 \n 1"))
    assert engine.evaluate() is True
    engine.clear_cell(0, 0)
    assert engine.save.state == "  \n 1"
    assert engine.save.solved is False


def test_action_out_of_bounds():
    engine = NonogramEngine(_level())
    with pytest.raises(CoordinatesOutOfBounds):
        engine.primary_action(2, 0)
    with pytest.raises(CoordinatesOutOfBounds):
        engine.secondary_action(0, -1)


def test_view_shows_tiles_and_congrats():
    engine = NonogramEngine(_level())
    engine.primary_action(0, 0)
    engine.secondary_action(1, 0)
    text = _plain(engine.view(0, 0))
    assert "⬤" in text
    assert "⊗" in text
    assert "◯" in text
    assert "z: Toggle" in text
    assert "Congrats!" not in text
    engine.primary_action(1, 1)
    engine.clear_cell(1, 0)
    assert "Congrats!" in _plain(engine.view(0, 0))


def test_view_shows_hint_numbers():
    engine = NonogramEngine(_level(initial="    \n    ", solution="11 1\n1 11"))
    lines = _plain(engine.view()).split("\n")
    assert lines[0].split() == ["2", "1", "1", "2"]
    assert lines[1].split()[:2] == ["2", "1"]
    assert lines[2].split()[:2] == ["1", "2"]


def test_help_on_given_cell_hides_actions():
    engine = NonogramEngine(_level(initial="1 \n  ", solution="1 \n 1"))
    assert "z: Toggle" not in _plain(engine.view(0, 0))
    assert "z: Toggle" in _plain(engine.view(1, 0))