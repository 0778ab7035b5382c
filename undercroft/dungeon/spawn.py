"""Spawn-point lookup over a finished grid.

Read-only: nothing here mutates the grid. A cell is "safe" when it is floor
and all four orthogonal neighbours are in bounds and non-empty, so an
avatar dropped there is never flush against the void.
"""
from __future__ import annotations

import random
from typing import Optional, Sequence, Tuple

from .cells import CellType, Coord
from .grid import DIRS4, Grid
from .rooms import Room


def is_safe_cell(grid: Grid, x: int, y: int) -> bool:
    if not grid.is_floor(x, y):
        return False
    for dx, dy in DIRS4:
        cell = grid.get(x + dx, y + dy)
        if cell is None or cell.type is CellType.EMPTY:
            return False
    return True


def find_safe_spot(grid: Grid, room: Room) -> Coord:
    """Room center if safe, else the first safe cell on growing square rings
    inside the room; falls back to the center."""
    cx, cy = room.center
    if is_safe_cell(grid, cx, cy):
        return (cx, cy)
    for radius in range(1, max(room.w, room.h)):
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                if max(abs(dx), abs(dy)) != radius:
                    continue
                x, y = cx + dx, cy + dy
                if room.contains(x, y) and is_safe_cell(grid, x, y):
                    return (x, y)
    return (cx, cy)


def choose_spawn_point(
    grid: Grid,
    rooms: Sequence[Room],
    rng=None,
    first_room: bool = True,
) -> Optional[Tuple[Coord, Room]]:
    """Pick a spawn cell and its room; ``None`` when there are no rooms."""
    if not rooms:
        return None
    if first_room:
        room = rooms[0]
    else:
        room = (rng or random.Random()).choice(list(rooms))
    return find_safe_spot(grid, room), room


__all__ = ["is_safe_cell", "find_safe_spot", "choose_spawn_point"]
