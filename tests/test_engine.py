import pytest

from chronical.cell import CellState
from chronical.engine import (
    DEBUG_PRIMARY_TILE,
    DEBUG_SECONDARY_TILE,
    CoordinatesOutOfBounds,
    DebugEngine,
    GameEngine,
)
from chronical.level import Level, Save


def make_level(initial="  \n  ", solution="PP\n  "):
    return Level(
        id=7,
        name="Sample",
        author="Tester",
        initial=initial,
        solution=solution,
        engine="debug",
    )


def test_new_engine_without_save_starts_from_initial():
    level = make_level()
    engine = DebugEngine(level)
    assert engine.save.state == level.initial
    assert engine.save.level_id == level.id
    assert engine.save.solved is False
    assert engine.game_name == level.engine


def test_dimensions_follow_grid():
    level = make_level()
    engine = DebugEngine(level)
    rows = level.initial.split("\n")
    assert engine.width == len(rows[0])
    assert engine.height == len(rows)


def test_primary_actions_reach_solution():
    level = make_level()
    engine = DebugEngine(level)
    engine.primary_action(0, 0)
    engine.primary_action(1, 0)
    assert engine.save.state == level.solution
    assert engine.save.solved is True
    assert engine.evaluate() is True


def test_secondary_action_writes_marker():
    engine = DebugEngine(make_level())
    engine.secondary_action(1, 1)
    assert engine.grid[1][1].value == DEBUG_SECONDARY_TILE
    assert engine.save.state.split("\n")[1].endswith(DEBUG_SECONDARY_TILE)
    assert engine.save.solved is False


def test_clear_cell_restores_initial_state():
    level = make_level()
    engine = DebugEngine(level)
    engine.primary_action(0, 1)
    engine.clear_cell(0, 1)
    assert engine.save.state == level.initial
    assert engine.grid[1][0].state is CellState.EMPTY


def test_given_cells_cannot_change():
    level = make_level(initial="P \n  ")
    engine = DebugEngine(level)
    engine.secondary_action(0, 0)
    engine.clear_cell(0, 0)
    assert engine.grid[0][0].value == DEBUG_PRIMARY_TILE
    assert engine.grid[0][0].state is CellState.GIVEN
    assert engine.save.state.startswith(DEBUG_PRIMARY_TILE)


@pytest.mark.parametrize("x, y", [(-1, 0), (2, 0), (0, 2), (0, -1)])
def test_out_of_bounds_actions_raise(x, y):
    engine = DebugEngine(make_level())
    with pytest.raises(CoordinatesOutOfBounds, match="out of bounds"):
        engine.primary_action(x, y)
    with pytest.raises(CoordinatesOutOfBounds):
        engine.clear_cell(x, y)
    assert engine.has_cell(x, y) is False


def test_has_cell_covers_exactly_the_grid():
    engine = DebugEngine(make_level())
    inside = {(x, y) for y in range(-1, 4) for x in range(-1, 4) if engine.has_cell(x, y)}
    assert inside == {(0, 0), (1, 0), (0, 1), (1, 1)}


def test_saved_state_is_restored_as_copy():
    level = make_level()
    save = Save(level_id=level.id, state="P \n S")
    engine = DebugEngine(level, save)
    assert engine.grid[0][0].value == DEBUG_PRIMARY_TILE
    assert engine.grid[0][0].state is CellState.FILLED
    assert engine.grid[1][1].value == DEBUG_SECONDARY_TILE
    engine.clear_cell(0, 0)
    assert save.state == "P \n S"
    assert engine.save.state != save.state


def test_base_engine_evaluate_and_view():
    level = make_level()
    engine = GameEngine(level)
    engine.set_cell_value(0, 0, "P")
    engine.set_cell_value(1, 0, "P")
    assert engine.evaluate() is True
    assert engine.view(0, 0) == ""


def test_debug_view_shows_help_for_open_cell():
    engine = DebugEngine(make_level())
    rendered = engine.view(0, 0)
    assert "no loaded engine" in rendered
    assert "z: primary, x: secondary, backspace: clear" in rendered
    assert "Congrats!" not in rendered


def test_debug_view_hides_actions_on_given_cell():
    engine = DebugEngine(make_level(initial="P \n  "))
    assert "z: primary" not in engine.view(0, 0)
    assert "z: primary" in engine.view(1, 0)


def test_debug_view_congratulates_when_solved():
    engine = DebugEngine(make_level())
    engine.primary_action(0, 0)
    engine.primary_action(1, 0)
    assert "Congrats!" in engine.view(0, 0)