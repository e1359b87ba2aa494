import logging

import pytest

from chronical.cell import Cell, CellState, new_cell


@pytest.fixture
def logs(caplog):
    caplog.set_level(logging.INFO, logger="chronical")
    return caplog


def test_new_cell_empty_logs(logs):
    cell = new_cell(0, 0, None, None)
    assert 'event="new_cell" x=0 y=0 value=  state=1' in logs.text
    assert cell.state is CellState.EMPTY


def test_new_cell_given_logs(logs):
    cell = new_cell(1, 1, "5", None)
    assert 'event="new_cell" x=1 y=1 value=5 state=0' in logs.text
    assert cell.state is CellState.GIVEN
    assert cell.value == "5"


def test_enter_value(logs):
    cell = new_cell(0, 0, None, None)
    logs.clear()
    cell.enter_value("7")
    assert 'event="enter_value_success" x=0 y=0 value=7' in logs.text
    assert cell.state is CellState.FILLED
    assert cell.view() == "7"


def test_enter_value_on_given_cell(logs):
    cell = new_cell(0, 0, "3", None)
    logs.clear()
    cell.enter_value("7")
    assert 'event="enter_value_failed" reason="cell is given"' in logs.text
    assert cell.value == "3"
    assert cell.state is CellState.GIVEN


def test_clear(logs):
    cell = new_cell(0, 0, None, None)
    cell.enter_value("9")
    logs.clear()
    cell.clear()
    assert 'event="clear_success" x=0 y=0 value=9' in logs.text
    assert cell.value == " "
    assert cell.state is CellState.EMPTY


def test_clear_on_given_cell(logs):
    cell = new_cell(0, 0, "3", None)
    logs.clear()
    cell.clear()
    assert 'event="clear_failed" reason="cell is given"' in logs.text
    assert cell.value == "3"


def test_clear_on_empty_cell_is_silent(logs):
    cell = new_cell(0, 0, None, None)
    logs.clear()
    cell.clear()
    assert logs.text == ""
    assert cell.state is CellState.EMPTY


def test_validation_fails(logs):
    cell = new_cell(0, 0, None, None)
    cell.enter_value("4")
    logs.clear()
    cell.run_validation(False)
    assert 'event="validation_failed" x=0 y=0 value=4' in logs.text
    assert cell.state is CellState.INVALID


def test_validation_passes(logs):
    cell = new_cell(0, 0, None, None)
    cell.enter_value("4")
    cell.run_validation(False)
    logs.clear()
    cell.run_validation(True)
    assert 'event="validation_passed" x=0 y=0 value=4' in logs.text
    assert cell.state is CellState.FILLED


def test_validation_ignores_empty_cell():
    cell = Cell(x=0, y=0)
    cell.run_validation(False)
    assert cell.state is CellState.EMPTY


def test_saved_value_fills_cell():
    cell = new_cell(2, 3, " ", "X")
    assert cell.state is CellState.FILLED
    assert cell.value == "X"


@pytest.mark.parametrize("initial", [".", " ", None])
def test_blank_initial_marks_are_not_given(initial):
    cell = new_cell(0, 0, initial, ".")
    assert cell.state is CellState.EMPTY
    assert cell.value == " "