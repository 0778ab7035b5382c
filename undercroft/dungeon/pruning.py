"""Dead-end corridor pruning.

A corridor cell is a dead end when it has at most one corridor neighbour and
touches no room. Removing one can expose its neighbour as a new dead end, so
neighbours are re-queued until nothing removable remains. Cells with two or
more corridor neighbours (loops, through-corridors) and cells next to a room
(doorways) are never removed.
"""
from __future__ import annotations

from collections import deque

from ..logging_utils import get_logger
from .cells import EMPTY, CellType
from .grid import Grid

log = get_logger("dungeon.pruning")


def is_dead_end(grid: Grid, x: int, y: int) -> bool:
    if not grid.is_corridor(x, y):
        return False
    corridor = 0
    for nx, ny in grid.neighbors4(x, y):
        t = grid.cells[nx][ny].type
        if t is CellType.ROOM:
            return False
        if t is CellType.CORRIDOR:
            corridor += 1
    return corridor <= 1


def prune_dead_ends(grid: Grid, max_removals: int | None = None) -> int:
    """Erase dead-end corridor cells until a fixed point. Returns the number removed."""
    if max_removals is None:
        max_removals = grid.width * grid.height
    queue = deque((x, y) for x, y, cell in grid.iter_cells() if cell.type is CellType.CORRIDOR)
    removed = 0
    while queue and removed < max_removals:
        x, y = queue.popleft()
        if not is_dead_end(grid, x, y):
            continue
        grid.set(x, y, EMPTY)
        removed += 1
        for nx, ny in grid.neighbors4(x, y):
            if grid.cells[nx][ny].type is CellType.CORRIDOR:
                queue.append((nx, ny))
    if removed:
        log.debug(event="dead_ends_pruned", removed=removed)
    return removed


__all__ = ["is_dead_end", "prune_dead_ends"]
