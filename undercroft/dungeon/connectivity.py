"""Post-carve connectivity audit and repair.

Greedy per-edge carving does not guarantee a single connected dungeon (an
edge can be skipped, or a fallback walk can end inside a room that is itself
cut off). The audit flood-fills floor cells from each room and unions every
room it reaches; repair then bridges every stray component to the main one.
"""
from __future__ import annotations

import math
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..logging_utils import get_logger
from .cells import CellType, Coord
from .disjoint_set import DisjointSet
from .grid import Grid
from .rooms import Room
from .tunnels import paint_path, straight_path, zigzag_path

log = get_logger("dungeon.connectivity")


@dataclass
class ConnectivityReport:
    components: List[List[int]] = field(default_factory=list)
    sets: Optional[DisjointSet] = None

    @property
    def connected(self) -> bool:
        return len(self.components) <= 1

    @property
    def main(self) -> List[int]:
        return self.components[0] if self.components else []

    def reachable(self, a: int, b: int) -> bool:
        return self.sets is not None and self.sets.connected(a, b)


def flood_floor(grid: Grid, start: Coord) -> Set[Coord]:
    """All floor cells 4-connected to ``start`` (empty set if start is not floor)."""
    if not grid.is_floor(*start):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for nx, ny in grid.neighbors4(cx, cy):
            if (nx, ny) not in seen and grid.cells[nx][ny].type is not CellType.EMPTY:
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen


def rooms_reached(grid: Grid, start: Coord) -> Set[int]:
    return {
        grid.cells[x][y].room_id
        for x, y in flood_floor(grid, start)
        if grid.cells[x][y].type is CellType.ROOM
    }


def audit_connectivity(grid: Grid, rooms: Sequence[Room]) -> ConnectivityReport:
    """Group rooms that are mutually reachable over floor cells.

    One flood fill covers a whole component, so rooms already reached by an
    earlier fill are not flooded again.
    """
    sets = DisjointSet(len(rooms))
    covered: Set[int] = set()
    for room in rooms:
        if room.id in covered:
            continue
        reached = rooms_reached(grid, room.center)
        reached.add(room.id)
        for other in reached:
            if 0 <= other < len(rooms):
                sets.union(room.id, other)
        covered |= reached
    components = sorted(sets.groups(), key=lambda g: (-len(g), g[0]))
    return ConnectivityReport(components=components, sets=sets)


def _center_distance(a: Room, b: Room) -> float:
    (ax, ay), (bx, by) = a.center_f, b.center_f
    return math.hypot(ax - bx, ay - by)


def closest_pairs(rooms: Sequence[Room], component: Sequence[int], main: Sequence[int]) -> List[Tuple[float, int, int]]:
    """All (distance, room_in_component, room_in_main) pairs, closest first."""
    return sorted(
        (_center_distance(rooms[a], rooms[b]), a, b) for a in component for b in main
    )


def force_connection(grid: Grid, rooms: Sequence[Room], a: int, b: int, width: int, rng) -> List[Coord]:
    path = zigzag_path(rooms[a].center, rooms[b].center, rng)
    paint_path(grid, path, width)
    return path


def emergency_connect(grid: Grid, rooms: Sequence[Room], width: int = 1) -> int:
    """Straight-line every room that cannot reach room 0 directly to room 0."""
    if len(rooms) <= 1:
        return 0
    hub = rooms[0]
    reachable = rooms_reached(grid, hub.center)
    links = 0
    for room in rooms[1:]:
        if room.id in reachable:
            continue
        path = straight_path(room.center, hub.center, x_first=(room.id % 2 == 0))
        paint_path(grid, path, width)
        links += 1
        reachable = rooms_reached(grid, hub.center)
        log.warn(event="emergency_link", room=room.id, hub=hub.id)
    return links


def repair_connectivity(
    grid: Grid,
    rooms: Sequence[Room],
    rng=None,
    corridor_width: int = 1,
    redundant_bridges: bool = True,
) -> Dict[str, int]:
    """Audit, bridge stray components into the main one, re-audit, last-resort emergency pass."""
    if rng is None:
        rng = random.Random()
    stats = {"components_initial": 0, "forced_bridges": 0, "emergency_links": 0, "components_final": 0}
    report = audit_connectivity(grid, rooms)
    stats["components_initial"] = len(report.components)
    if report.connected:
        stats["components_final"] = len(report.components)
        return stats

    log.warn(event="dungeon_disconnected", components=len(report.components), rooms=len(rooms))
    width = max(1, corridor_width)
    main = list(report.main)
    for component in report.components[1:]:
        pairs = closest_pairs(rooms, component, main)
        _, a, b = pairs[0]
        force_connection(grid, rooms, a, b, width, rng)
        stats["forced_bridges"] += 1
        log.warn(event="forced_bridge", a=a, b=b, component_size=len(component))
        if redundant_bridges:
            spare = next(((d, x, y) for d, x, y in pairs[1:] if x != a and y != b), None)
            if spare is not None:
                force_connection(grid, rooms, spare[1], spare[2], width, rng)
                stats["forced_bridges"] += 1
        main.extend(component)

    report = audit_connectivity(grid, rooms)
    if not report.connected:
        log.warn(event="bridging_incomplete", components=len(report.components))
        stats["emergency_links"] = emergency_connect(grid, rooms, width)
        report = audit_connectivity(grid, rooms)
    stats["components_final"] = len(report.components)
    if not report.connected:
        log.error(event="dungeon_still_disconnected", components=len(report.components))
    return stats


__all__ = [
    "ConnectivityReport",
    "flood_floor",
    "rooms_reached",
    "audit_connectivity",
    "closest_pairs",
    "force_connection",
    "emergency_connect",
    "repair_connectivity",
]
