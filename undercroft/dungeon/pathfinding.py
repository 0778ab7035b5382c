"""Cost-shaped A* used to carve natural looking corridors.

The step cost deliberately distorts shortest paths: per-cell noise, a turn
bonus and a superlinear penalty on long straight runs bend the route, while a
bonus for stepping onto existing corridor encourages branching off earlier
carvings. Priorities get a random jitter at enqueue time, so two searches
between the same points only agree when they share an identically seeded
generator.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..logging_utils import get_logger
from .cells import NO_ROOM, CellType, Coord
from .grid import DIRS4, DIRS8, Grid
from .heap import PriorityQueue

log = get_logger("dungeon.pathfinding")


@dataclass(frozen=True)
class PathCosts:
    orthogonal_cost: int = 1
    diagonal_cost: int = 2
    room_cost: int = 10
    noise_factor: int = 5
    turn_bonus: int = -1
    max_straight_run: int = 2
    straight_penalty: int = 2
    corridor_bonus: int = -4
    random_turn_chance: float = 0.5
    random_turn_bonus: int = -10
    jitter: int = 19
    max_iterations: int = 5000
    max_path_length: int = 1000
    search_margin: int = 20


def make_noise_map(width: int, height: int, rng) -> List[List[int]]:
    return [[rng.randint(1, 4) for _ in range(height)] for _ in range(width)]


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct_path(came_from: Dict[Coord, Coord], node: Coord, max_length: int = 1000) -> List[Coord]:
    """Walk predecessors back from ``node``.

    Stops early (with a warning) on a predecessor cycle or once ``max_length``
    cells have been collected; the caller can tell by checking ``path[0]``.
    """
    path = [node]
    seen = {node}
    while node in came_from:
        if len(path) >= max_length:
            log.warn(event="path_truncated", length=len(path), limit=max_length)
            break
        prev = came_from[node]
        if prev in seen:
            log.warn(event="path_cycle_detected", at=prev, length=len(path))
            break
        seen.add(prev)
        path.append(prev)
        node = prev
    path.reverse()
    return path


class NaturalPathfinder:
    def __init__(
        self,
        grid: Grid,
        noise: Sequence[Sequence[int]],
        rng=None,
        costs: Optional[PathCosts] = None,
        allow_diagonal: bool = True,
    ):
        self.grid = grid
        self.noise = noise
        self.rng = rng if rng is not None else random.Random()
        self.costs = costs or PathCosts()
        self.directions = DIRS8 if allow_diagonal else DIRS4
        self.last_iterations = 0

    def _can_enter(self, cur: Coord, d: Coord, allowed_rooms) -> bool:
        grid = self.grid
        nx, ny = cur[0] + d[0], cur[1] + d[1]
        cell = grid.cells[nx][ny]
        if cell.type is CellType.ROOM and cell.room_id not in allowed_rooms:
            return False
        if d[0] and d[1]:
            # no squeezing between room corners
            if grid.is_room(cur[0] + d[0], cur[1]) or grid.is_room(cur[0], cur[1] + d[1]):
                return False
        return True

    def find_path(
        self,
        start: Coord,
        goal: Coord,
        source_room: Optional[int] = None,
        target_room: Optional[int] = None,
    ) -> List[Coord]:
        """Return a start..goal path, or [] when the search gives up.

        Room cells are only enterable when they belong to the source or the
        target room, so corridors never cut through unrelated rooms.
        """
        grid, c, rng = self.grid, self.costs, self.rng
        if not (grid.in_bounds(*start) and grid.in_bounds(*goal)):
            return []
        if source_room is None:
            source_room = grid.room_id(*start)
        if target_room is None:
            target_room = grid.room_id(*goal)
        allowed_rooms = {r for r in (source_room, target_room) if r != NO_ROOM}

        min_x = max(0, min(start[0], goal[0]) - c.search_margin)
        max_x = min(grid.width - 1, max(start[0], goal[0]) + c.search_margin)
        min_y = max(0, min(start[1], goal[1]) - c.search_margin)
        max_y = min(grid.height - 1, max(start[1], goal[1]) + c.search_margin)

        open_set: PriorityQueue[Coord] = PriorityQueue()
        open_set.enqueue(start, 0)
        came_from: Dict[Coord, Coord] = {}
        g_score: Dict[Coord, int] = {start: 0}
        heading: Dict[Coord, Coord] = {start: (0, 0)}
        run: Dict[Coord, int] = {start: 0}
        closed = set()
        iterations = 0

        while open_set and iterations < c.max_iterations:
            iterations += 1
            cur = open_set.dequeue()
            if cur in closed:
                continue
            if cur == goal:
                self.last_iterations = iterations
                path = reconstruct_path(came_from, cur, c.max_path_length)
                return path if path[0] == start else []
            closed.add(cur)
            g_cur = g_score[cur]
            directions = list(self.directions)
            rng.shuffle(directions)
            for d in directions:
                nx, ny = cur[0] + d[0], cur[1] + d[1]
                if not (min_x <= nx <= max_x and min_y <= ny <= max_y):
                    continue
                nxt = (nx, ny)
                if nxt in closed or not self._can_enter(cur, d, allowed_rooms):
                    continue
                cell_type = grid.cells[nx][ny].type
                diagonal = d[0] != 0 and d[1] != 0
                if cell_type is CellType.ROOM:
                    base = c.room_cost
                else:
                    base = c.diagonal_cost if diagonal else c.orthogonal_cost
                prev_dir = heading[cur]
                turned = prev_dir != (0, 0) and prev_dir != d
                run_length = 1 if turned else run[cur] + 1
                shape = 0
                if turned:
                    shape = c.turn_bonus
                    if rng.random() < c.random_turn_chance:
                        shape += c.random_turn_bonus
                elif run_length > c.max_straight_run:
                    excess = run_length - c.max_straight_run
                    shape = c.straight_penalty * excess * excess
                reuse = c.corridor_bonus if cell_type is CellType.CORRIDOR else 0
                step = max(1, base + self.noise[nx][ny] * c.noise_factor + shape + reuse)
                tentative = g_cur + step
                if tentative < g_score.get(nxt, tentative + 1):
                    came_from[nxt] = cur
                    g_score[nxt] = tentative
                    heading[nxt] = d
                    run[nxt] = run_length
                    open_set.enqueue(nxt, tentative + manhattan(nxt, goal) + rng.randint(0, c.jitter))

        self.last_iterations = iterations
        if iterations >= c.max_iterations:
            log.debug(event="astar_iteration_cap", start=start, goal=goal, iterations=iterations)
        return []


__all__ = ["PathCosts", "NaturalPathfinder", "make_noise_map", "manhattan", "reconstruct_path"]
