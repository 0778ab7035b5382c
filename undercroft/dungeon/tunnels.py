"""Corridor carving between graph-connected rooms.

Each edge is carved with the cost-shaped search from ``pathfinding``. When
the search fails the entry points are nudged and the search retried; if that
fails too a zigzag walk (which cannot fail) connects the two entry points.
"""
from __future__ import annotations

import math
import random
from typing import Dict, Iterable, List, Optional, Sequence

from ..logging_utils import get_logger
from .cells import CORRIDOR, CellType, Coord
from .graph import Edge
from .grid import Grid
from .pathfinding import NaturalPathfinder, PathCosts, make_noise_map
from .rooms import Room

log = get_logger("dungeon.tunnels")


def init_carve_stats() -> Dict[str, int]:
    return {
        "edges_carved": 0,
        "edges_skipped": 0,
        "search_successes": 0,
        "search_retries": 0,
        "fallback_paths": 0,
    }


def straight_path(start: Coord, goal: Coord, x_first: bool = True) -> List[Coord]:
    """L-shaped Manhattan walk: one axis fully, then the other."""
    x, y = start
    path = [start]
    legs = ("x", "y") if x_first else ("y", "x")
    for axis in legs:
        if axis == "x":
            while x != goal[0]:
                x += 1 if goal[0] > x else -1
                path.append((x, y))
        else:
            while y != goal[1]:
                y += 1 if goal[1] > y else -1
                path.append((x, y))
    return path


def zigzag_path(start: Coord, goal: Coord, rng=None) -> List[Coord]:
    """Manhattan walk with short randomised legs and frequent sideways jogs.

    Every step moves strictly toward the goal, so the walk always ends on it.
    """
    if rng is None:
        rng = random.Random()
    cur = list(start)
    path = [start]
    primary = 0 if rng.random() < 0.5 else 1
    secondary = 1 - primary

    def advance(axis: int, count: int):
        step = 1 if goal[axis] > cur[axis] else -1
        for _ in range(count):
            cur[axis] += step
            path.append((cur[0], cur[1]))
            if cur[axis] == goal[axis]:
                break

    while cur[primary] != goal[primary]:
        advance(primary, rng.randint(1, min(3, abs(goal[primary] - cur[primary]))))
        if cur[primary] != goal[primary] and cur[secondary] != goal[secondary] and rng.random() < 0.7:
            advance(secondary, rng.randint(1, min(2, abs(goal[secondary] - cur[secondary]))))
    if cur[secondary] != goal[secondary]:
        advance(secondary, abs(goal[secondary] - cur[secondary]))
    return path


def stitch_diagonals(grid: Grid, path: Sequence[Coord]) -> List[Coord]:
    """Insert an orthogonal corner cell between diagonal steps so floor stays 4-connected."""
    if not path:
        return []
    out = [path[0]]
    for prev, cur in zip(path, path[1:]):
        if prev[0] != cur[0] and prev[1] != cur[1]:
            corner = (cur[0], prev[1])
            if grid.is_room(*corner):
                corner = (prev[0], cur[1])
            out.append(corner)
        out.append(cur)
    return out


def paint_cell(grid: Grid, x: int, y: int, width: int = 1) -> int:
    """Carve a square of radius ``width // 2`` around (x, y). Room cells are never touched."""
    painted = 0
    r = width // 2
    for dx in range(-r, r + 1):
        for dy in range(-r, r + 1):
            cell = grid.get(x + dx, y + dy)
            if cell is None or cell.type is not CellType.EMPTY:
                continue
            grid.set(x + dx, y + dy, CORRIDOR)
            painted += 1
    return painted


def paint_path(grid: Grid, path: Sequence[Coord], width: int = 1) -> int:
    return sum(paint_cell(grid, x, y, width) for x, y in stitch_diagonals(grid, path))


class CorridorCarver:
    """Carves one corridor per graph edge into the grid, in place."""

    def __init__(
        self,
        grid: Grid,
        rooms: Sequence[Room],
        rng=None,
        corridor_width: int = 1,
        allow_diagonal: bool = True,
        search_retries: int = 3,
        costs: Optional[PathCosts] = None,
    ):
        self.grid = grid
        self.rooms = rooms
        self.rng = rng if rng is not None else random.Random()
        self.corridor_width = corridor_width
        self.search_retries = search_retries
        # Noise is drawn once per carver so every edge sees the same terrain.
        self.noise = make_noise_map(grid.width, grid.height, self.rng)
        self.pathfinder = NaturalPathfinder(grid, self.noise, self.rng, costs, allow_diagonal)
        self.stats = init_carve_stats()

    def entry_point(self, room: Room, target: Coord, variant: int = 0) -> Coord:
        """Boundary cell of ``room`` facing ``target``; ``variant`` > 0 slides it along the wall."""
        cx, cy = room.center_f
        dx, dy = target[0] + 0.5 - cx, target[1] + 0.5 - cy
        norm = math.hypot(dx, dy)
        if norm < 1e-9:
            dx, dy = 1.0, 0.0
        else:
            dx, dy = dx / norm, dy / norm
        half_w, half_h = room.w / 2.0, room.h / 2.0
        off_x = off_y = 0.0
        if variant > 0:
            off_x = half_w * 0.5 if variant % 2 == 1 else -half_w * 0.5
            off_y = half_h * 0.5 if variant > 1 else -half_h * 0.5
        if abs(dx) * half_h >= abs(dy) * half_w:
            t = half_w / abs(dx)
            x = room.x + room.w - 1 if dx > 0 else room.x
            y = int(math.floor(cy + dy * t + off_y))
        else:
            t = half_h / abs(dy)
            y = room.y + room.h - 1 if dy > 0 else room.y
            x = int(math.floor(cx + dx * t + off_x))
        x = min(max(x, room.x), room.x + room.w - 1)
        y = min(max(y, room.y), room.y + room.h - 1)
        return (x, y)

    def find_route(self, a: int, b: int) -> List[Coord]:
        """Search (with retries) and fall back to a zigzag walk; never returns an empty path."""
        room_a, room_b = self.rooms[a], self.rooms[b]
        start = self.entry_point(room_a, room_b.center)
        goal = self.entry_point(room_b, room_a.center)
        path = self.pathfinder.find_path(start, goal, a, b)
        variant = 0
        while not path and variant < self.search_retries:
            variant += 1
            self.stats["search_retries"] += 1
            start = self.entry_point(room_a, room_b.center, variant)
            goal = self.entry_point(room_b, room_a.center, variant)
            path = self.pathfinder.find_path(start, goal, a, b)
        if path:
            self.stats["search_successes"] += 1
            return path
        log.warn(event="corridor_search_failed", a=a, b=b, retries=variant, fallback="zigzag")
        self.stats["fallback_paths"] += 1
        return zigzag_path(start, goal, self.rng)

    def carve_edge(self, a: int, b: int) -> List[Coord]:
        ca, cb = self.rooms[a].center, self.rooms[b].center
        if self.grid.room_id(*ca) == self.grid.room_id(*cb):
            self.stats["edges_skipped"] += 1
            return []
        path = self.find_route(a, b)
        paint_path(self.grid, path, self.corridor_width)
        self.stats["edges_carved"] += 1
        return path

    def carve(self, edges: Iterable[Edge]) -> Dict[str, int]:
        for edge in edges:
            self.carve_edge(edge.a, edge.b)
        total = self.stats["edges_carved"] + self.stats["edges_skipped"]
        log.info(
            event="corridors_carved",
            edges=total,
            searched=self.stats["search_successes"],
            fallbacks=self.stats["fallback_paths"],
        )
        return self.stats


__all__ = [
    "CorridorCarver",
    "init_carve_stats",
    "paint_cell",
    "paint_path",
    "stitch_diagonals",
    "straight_path",
    "zigzag_path",
]
