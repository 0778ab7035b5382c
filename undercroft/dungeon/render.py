"""Read-only views of a finished grid for renderers.

Wall edges are reported as ``(x, y, direction)`` where ``direction`` is one of
``north``/``east``/``south``/``west``: the side of floor cell (x, y) that
faces a non-floor cell or the grid border. Nothing here mutates the grid.
"""
from __future__ import annotations

from typing import Iterator, List, Tuple

from .cells import CellType, Coord
from .grid import Grid

# y grows northwards, matching DIRS4 ordering in grid.py.
EDGE_DIRECTIONS = (
    ("north", 0, 1),
    ("east", 1, 0),
    ("south", 0, -1),
    ("west", -1, 0),
)

ASCII_CHARS = {
    CellType.EMPTY: ' ',
    CellType.ROOM: '.',
    CellType.CORRIDOR: '#',
}

WallEdge = Tuple[int, int, str]


def floor_cells(grid: Grid) -> Iterator[Coord]:
    for x, y, cell in grid.iter_cells():
        if cell.is_floor:
            yield (x, y)


def wall_edges(grid: Grid) -> List[WallEdge]:
    edges: List[WallEdge] = []
    for x, y in floor_cells(grid):
        for name, dx, dy in EDGE_DIRECTIONS:
            if not grid.is_floor(x + dx, y + dy):
                edges.append((x, y, name))
    return edges


def to_ascii(grid: Grid, chars=None) -> str:
    """Top row is the highest y, so the map reads the way it is drawn."""
    table = chars or ASCII_CHARS
    lines = []
    for y in range(grid.height - 1, -1, -1):
        row = ''.join(table[grid.cells[x][y].type] for x in range(grid.width))
        lines.append(row.rstrip())
    return '\n'.join(lines)


__all__ = ["floor_cells", "wall_edges", "to_ascii", "ASCII_CHARS", "EDGE_DIRECTIONS"]
