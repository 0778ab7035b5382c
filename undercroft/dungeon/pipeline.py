"""Pipeline orchestration for dungeon generation.

``Dungeon`` owns one run: it resolves the seed, threads a single
``random.Random`` through every stage and records per-phase timings in
``metrics['phase_ms']`` when metrics are enabled. Stage order:

    place_rooms -> build_graph -> carve -> prune -> repair -> prune_final

The second prune only runs when repair painted new corridor cells.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import CellType
from .config import DungeonConfig
from .connectivity import audit_connectivity, repair_connectivity
from .graph import RoomGraph, build_room_graph
from .grid import Grid
from .metrics import init_metrics
from .pruning import prune_dead_ends
from .rooms import Room, place_rooms
from .tunnels import CorridorCarver

log = get_logger("dungeon.pipeline")

SEED_MAX = 2**31 - 1


def resolve_seed(seed: Optional[int]) -> int:
    """``None``/``0`` draw a fresh non-deterministic seed; anything else is used as-is."""
    if not seed:
        return random.SystemRandom().randint(1, SEED_MAX)
    return int(seed)


@dataclass
class Dungeon:
    config: DungeonConfig = field(default_factory=DungeonConfig)
    enable_metrics: bool = True

    def __post_init__(self):
        self.seed: int = resolve_seed(self.config.seed)
        self.rng = random.Random(self.seed)
        self.grid = Grid(self.config.width, self.config.height)
        self.rooms: List[Room] = []
        self.graph = RoomGraph()
        self.components: List[List[int]] = []
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self._run_pipeline()

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def _run_pipeline(self):
        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        cfg = self.config
        placement = _phase('place_rooms', place_rooms, self.grid, cfg, self.rng)
        self.rooms = placement.rooms
        self.graph = _phase('build_graph', build_room_graph, self.rooms, cfg, self.rng)
        carver = CorridorCarver(
            self.grid,
            self.rooms,
            self.rng,
            corridor_width=cfg.corridor_width,
            allow_diagonal=cfg.allow_diagonal,
            search_retries=cfg.search_retries,
        )
        carve_stats = _phase('carve', carver.carve, self.graph.edges)
        pruned = _phase('prune', prune_dead_ends, self.grid)
        repair = _phase(
            'repair',
            repair_connectivity,
            self.grid,
            self.rooms,
            self.rng,
            corridor_width=cfg.corridor_width,
            redundant_bridges=cfg.redundant_bridges,
        )
        if repair['forced_bridges'] or repair['emergency_links']:
            pruned += _phase('prune_final', prune_dead_ends, self.grid)
        self.components = audit_connectivity(self.grid, self.rooms).components

        runtime_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            event="dungeon_generated",
            seed=self.seed,
            rooms=len(self.rooms),
            edges=len(self.graph),
            components=len(self.components),
            runtime_ms=runtime_ms,
        )
        if not self.enable_metrics:
            return
        m = self.metrics
        m['rooms_target'] = placement.target
        m['rooms_placed'] = len(self.rooms)
        m['placement_attempts'] = placement.attempts
        m['candidate_source'] = self.graph.candidate_source
        m['candidate_edges'] = len(self.graph.candidates)
        m['tree_edges'] = len(self.graph.tree)
        m['extra_edges'] = len(self.graph.extra)
        for key, value in carve_stats.items():
            m[key] = value
        searched = carve_stats['search_successes'] + carve_stats['fallback_paths']
        m['connection_success_ratio'] = (
            round(carve_stats['search_successes'] / searched, 3) if searched else 1.0
        )
        m['dead_ends_pruned'] = pruned
        for key, value in repair.items():
            m[key] = value
        m['floor_cells'] = self.grid.count(CellType.ROOM) + self.grid.count(CellType.CORRIDOR)
        m['runtime_ms'] = runtime_ms
        m['phase_ms'] = phase_times

    @property
    def connected(self) -> bool:
        return len(self.components) <= 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'seed': self.seed,
            'width': self.width,
            'height': self.height,
            'rooms': [r.to_dict() for r in self.rooms],
            'grid': self.grid.to_rows(),
            'edges': [e.to_dict() for e in self.graph.edges],
            'metrics': self.metrics,
        }


def generate_dungeon(config: Optional[DungeonConfig] = None, **overrides) -> Dungeon:
    """Convenience wrapper: ``generate_dungeon(seed=42, width=48)``."""
    if config is None:
        config = DungeonConfig(**overrides)
    elif overrides:
        config = DungeonConfig(**{**config.to_dict(), **overrides})
    return Dungeon(config)


__all__ = ["Dungeon", "generate_dungeon", "resolve_seed"]
