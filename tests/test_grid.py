import pytest

from undercroft.dungeon import NO_ROOM, Cell, CellType, Grid
from undercroft.dungeon.cells import CORRIDOR, room_cell


def test_new_grid_is_empty():
    g = Grid(5, 3)
    assert (g.width, g.height) == (5, 3)
    assert g.count(CellType.EMPTY) == 15
    assert g.get(4, 2) == Cell(CellType.EMPTY, NO_ROOM)


@pytest.mark.parametrize("w,h", [(0, 5), (5, 0), (-1, 3)])
def test_non_positive_size_rejected(w, h):
    with pytest.raises(ValueError):
        Grid(w, h)


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (5, 0), (0, 3), (100, 100)])
def test_out_of_bounds_queries_do_not_raise(x, y):
    g = Grid(5, 3)
    assert g.in_bounds(x, y) is False
    assert g.is_floor(x, y) is False
    assert g.get(x, y) is None
    assert g.cell_type(x, y) is None
    assert g.room_id(x, y) == NO_ROOM
    assert g.set(x, y, CORRIDOR) is False


def test_set_and_query_cells():
    g = Grid(4, 4)
    assert g.set(1, 2, room_cell(7))
    assert g.set(2, 2, CORRIDOR)
    assert g.is_room(1, 2) and g.room_id(1, 2) == 7
    assert g.is_corridor(2, 2) and g.room_id(2, 2) == NO_ROOM
    assert g.is_floor(1, 2) and g.is_floor(2, 2)
    assert not g.is_floor(0, 0)
    assert g.count_neighbors(2, 2, CellType.ROOM) == 1


def test_neighbors4_clips_at_border():
    g = Grid(3, 3)
    assert sorted(g.neighbors4(0, 0)) == [(0, 1), (1, 0)]
    assert len(list(g.neighbors4(1, 1))) == 4


def test_to_rows_is_row_major():
    g = Grid(3, 2)
    g.set(2, 0, CORRIDOR)
    rows = g.to_rows()
    assert len(rows) == 2 and len(rows[0]) == 3
    assert rows[0][2] == "corridor"
    assert rows[1][2] == "empty"


def test_copy_is_independent():
    g = Grid(3, 3)
    clone = g.copy()
    clone.set(1, 1, CORRIDOR)
    assert g != clone
    assert not g.is_floor(1, 1)


def test_cell_is_plain_value():
    # Grids serialise through to_rows; a cell carries only its type and room.
    assert Cell._fields == ("type", "room_id")
    assert not hasattr(Cell, "to_dict")
    assert Cell().is_floor is False
    assert room_cell(3).is_floor and CORRIDOR.is_floor
