"""Room connectivity graph: candidate edges, minimum spanning tree, loop edges."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .rooms import Room
from .triangulation import DegenerateTriangulationError, triangle_edges, triangulate

log = get_logger("dungeon.graph")


@dataclass(frozen=True)
class Edge:
    """Undirected room-to-room connection; (a, b) and (b, a) are the same edge."""

    a: int
    b: int
    length: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if self.a == self.b:
            raise ValueError(f"self-loop edge on room {self.a}")
        if self.a > self.b:
            a, b = self.b, self.a
            object.__setattr__(self, "a", a)
            object.__setattr__(self, "b", b)

    @property
    def key(self) -> Tuple[int, int]:
        return (self.a, self.b)

    def other(self, room_id: int) -> int:
        return self.b if room_id == self.a else self.a

    def to_dict(self):
        return {"a": self.a, "b": self.b, "length": round(self.length, 3)}


@dataclass
class RoomGraph:
    candidates: List[Edge] = field(default_factory=list)
    tree: List[Edge] = field(default_factory=list)
    extra: List[Edge] = field(default_factory=list)
    candidate_source: str = "none"

    @property
    def edges(self) -> List[Edge]:
        return self.tree + self.extra

    def __len__(self):
        return len(self.tree) + len(self.extra)


def _distance(p, q) -> float:
    return math.hypot(p[0] - q[0], p[1] - q[1])


def full_graph_edges(rooms: Sequence[Room]) -> List[Edge]:
    centers = [r.center_f for r in rooms]
    return [
        Edge(i, j, _distance(centers[i], centers[j]))
        for i in range(len(centers))
        for j in range(i + 1, len(centers))
    ]


def triangulation_edges(rooms: Sequence[Room]) -> List[Edge]:
    centers = [r.center_f for r in rooms]
    return [Edge(a, b, _distance(centers[a], centers[b])) for a, b in triangle_edges(triangulate(centers))]


def candidate_edges(rooms: Sequence[Room], policy: str = "triangulation") -> Tuple[List[Edge], str]:
    """Return (edges, source). Triangulation is preferred; the full graph is the fallback."""
    if len(rooms) <= 1:
        return [], "none"
    if policy == "triangulation":
        try:
            return triangulation_edges(rooms), "triangulation"
        except DegenerateTriangulationError as exc:
            log.info(event="triangulation_fallback", reason=str(exc), rooms=len(rooms))
    return full_graph_edges(rooms), "full"


def prim_mst(edges: Iterable[Edge], rooms: Sequence[Room]) -> List[Edge]:
    """Prim's algorithm from room 0 over the candidate edges.

    Rooms the candidates cannot reach are still attached: to the nearest
    visited room by candidate edge length when such an edge exists, otherwise
    by straight center distance. The result always has ``len(rooms) - 1`` edges.
    """
    n = len(rooms)
    if n <= 1:
        return []
    edge_list = list(edges)
    adjacency: Dict[int, List[Edge]] = {i: [] for i in range(n)}
    for e in edge_list:
        if e.a < n and e.b < n:
            adjacency[e.a].append(e)
            adjacency[e.b].append(e)
    visited: Set[int] = {0}
    tree: List[Edge] = []
    while len(visited) < n:
        best: Optional[Edge] = None
        for e in edge_list:
            if (e.a in visited) == (e.b in visited):
                continue
            if best is None or e.length < best.length:
                best = e
        if best is None:
            best = _attach_orphan(rooms, visited, adjacency)
            log.warn(event="mst_orphan_attached", a=best.a, b=best.b, length=round(best.length, 2))
        tree.append(best)
        visited.add(best.a)
        visited.add(best.b)
    return tree


def _attach_orphan(rooms: Sequence[Room], visited: Set[int], adjacency: Dict[int, List[Edge]]) -> Edge:
    orphan = min(i for i in range(len(rooms)) if i not in visited)
    linked = [e for e in adjacency[orphan] if e.other(orphan) in visited]
    if linked:
        return min(linked, key=lambda e: e.length)
    center = rooms[orphan].center_f
    nearest = min(sorted(visited), key=lambda v: _distance(center, rooms[v].center_f))
    return Edge(orphan, nearest, _distance(center, rooms[nearest].center_f))


def extra_edge_cap(tree_size: int, config: DungeonConfig) -> int:
    return int(math.floor(tree_size * config.max_extra_edge_ratio))


def add_extra_edges(candidates: Iterable[Edge], tree: Sequence[Edge], config: DungeonConfig, rng=None) -> List[Edge]:
    """Pick non-tree candidate edges to reintroduce loops, never exceeding the cap."""
    if rng is None:
        rng = random.Random()
    taken = {e.key for e in tree}
    pool: List[Edge] = []
    for e in sorted(candidates, key=lambda e: e.key):
        if e.key not in taken:
            taken.add(e.key)
            pool.append(e)
    cap = extra_edge_cap(len(tree), config)
    if not pool or cap <= 0:
        return []

    if config.extra_policy == "probability":
        chosen = [e for e in pool if rng.random() < config.extra_edge_probability]
        return chosen[:cap]

    target = min(cap, int(math.floor(len(tree) * config.extra_edge_ratio)), len(pool))
    if target <= 0:
        return []
    if config.extra_policy == "ratio":
        return rng.sample(pool, target)

    # long_random: a share of the longest shortcuts, the rest random.
    by_length = sorted(pool, key=lambda e: (-e.length, e.key))
    long_count = max(2, int(math.floor(len(pool) * config.long_edge_fraction)))
    long_count = min(long_count, target // 2)
    chosen = by_length[:long_count]
    rest = by_length[long_count:]
    rng.shuffle(rest)
    chosen.extend(rest[: target - long_count])
    return chosen


def build_room_graph(rooms: Sequence[Room], config: DungeonConfig, rng=None) -> RoomGraph:
    if rng is None:
        rng = random.Random()
    if len(rooms) <= 1:
        return RoomGraph()
    candidates, source = candidate_edges(rooms, config.candidate_policy)
    tree = prim_mst(candidates, rooms)
    extra = add_extra_edges(candidates, tree, config, rng)
    log.info(
        event="graph_built",
        source=source,
        candidates=len(candidates),
        tree=len(tree),
        extra=len(extra),
    )
    return RoomGraph(candidates=candidates, tree=tree, extra=extra, candidate_source=source)


__all__ = [
    "Edge",
    "RoomGraph",
    "full_graph_edges",
    "triangulation_edges",
    "candidate_edges",
    "prim_mst",
    "extra_edge_cap",
    "add_extra_edges",
    "build_room_graph",
]
