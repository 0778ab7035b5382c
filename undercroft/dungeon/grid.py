"""Dense 2D cell grid shared by every generation stage.

Indexed ``cells[x][y]`` (column-major, like the rest of the dungeon code).
All coordinate-taking methods bounds-check and degrade to False/None/no-op
for out-of-range input: neighbour lookups near the border are routine.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .cells import EMPTY, NO_ROOM, Cell, CellType, Coord

DIRS4: Tuple[Coord, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
DIRS8: Tuple[Coord, ...] = DIRS4 + ((1, 1), (-1, 1), (1, -1), (-1, -1))


class Grid:
    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError("Grid width and height must be positive")
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [[EMPTY for _ in range(height)] for _ in range(width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Cell]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[x][y]

    def set(self, x: int, y: int, cell: Cell) -> bool:
        if not self.in_bounds(x, y):
            return False
        self.cells[x][y] = cell
        return True

    def cell_type(self, x: int, y: int) -> Optional[CellType]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[x][y].type

    def is_floor(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.cells[x][y].type is not CellType.EMPTY

    def is_room(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.cells[x][y].type is CellType.ROOM

    def is_corridor(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.cells[x][y].type is CellType.CORRIDOR

    def room_id(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return NO_ROOM
        cell = self.cells[x][y]
        return cell.room_id if cell.type is CellType.ROOM else NO_ROOM

    def neighbors4(self, x: int, y: int) -> Iterator[Coord]:
        for dx, dy in DIRS4:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def count_neighbors(self, x: int, y: int, cell_type: CellType) -> int:
        return sum(1 for nx, ny in self.neighbors4(x, y) if self.cells[nx][ny].type is cell_type)

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for x in range(self.width):
            column = self.cells[x]
            for y in range(self.height):
                yield x, y, column[y]

    def count(self, cell_type: CellType) -> int:
        return sum(1 for column in self.cells for c in column if c.type is cell_type)

    def copy(self) -> "Grid":
        clone = Grid(self.width, self.height)
        clone.cells = [list(column) for column in self.cells]
        return clone

    def to_rows(self) -> List[List[str]]:
        # Row-major (y first) so clients can index rows[y][x].
        return [[self.cells[x][y].type.value for x in range(self.width)] for y in range(self.height)]

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.cells == other.cells

    def __repr__(self):
        return f"Grid({self.width}x{self.height})"


__all__ = ["Grid", "DIRS4", "DIRS8"]
