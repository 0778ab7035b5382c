import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional

CANDIDATE_POLICIES = ("triangulation", "full")
EXTRA_EDGE_POLICIES = ("probability", "ratio", "long_random")
ENV_PREFIX = "UNDERCROFT_DUNGEON_"


@dataclass
class DungeonConfig:
    width: int = 64
    height: int = 64
    # 0 means "no target": keep sampling until placement_attempts is spent.
    room_count: int = 30
    min_room_width: int = 4
    max_room_width: int = 10
    min_room_height: int = 4
    max_room_height: int = 10
    placement_attempts: int = 200
    max_consecutive_failures: int = 50
    # Empty cells kept between room rectangles.
    room_gap: int = 1
    corridor_width: int = 1
    candidate_policy: str = "triangulation"
    extra_policy: str = "long_random"
    extra_edge_probability: float = 0.15
    extra_edge_ratio: float = 0.5
    long_edge_fraction: float = 0.2
    # Hard cap on extra edges as a multiple of the spanning tree size.
    max_extra_edge_ratio: float = 1.0
    allow_diagonal: bool = True
    search_retries: int = 3
    redundant_bridges: bool = True
    # None or 0 => a fresh non-deterministic seed is drawn per run.
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("DungeonConfig width and height must be positive")
        if self.room_count < 0:
            raise ValueError("DungeonConfig room_count cannot be negative")
        if self.min_room_width <= 0 or self.min_room_height <= 0:
            raise ValueError("DungeonConfig minimum room sizes must be positive")
        if self.min_room_width > self.max_room_width:
            raise ValueError("DungeonConfig min_room_width must be <= max_room_width")
        if self.min_room_height > self.max_room_height:
            raise ValueError("DungeonConfig min_room_height must be <= max_room_height")
        if self.placement_attempts < 0:
            raise ValueError("DungeonConfig placement_attempts cannot be negative")
        if self.max_consecutive_failures <= 0:
            raise ValueError("DungeonConfig max_consecutive_failures must be positive")
        if self.room_gap < 0:
            raise ValueError("DungeonConfig room_gap cannot be negative")
        if self.corridor_width < 1:
            raise ValueError("DungeonConfig corridor_width must be at least 1")
        if self.candidate_policy not in CANDIDATE_POLICIES:
            raise ValueError(f"DungeonConfig candidate_policy must be one of {CANDIDATE_POLICIES}")
        if self.extra_policy not in EXTRA_EDGE_POLICIES:
            raise ValueError(f"DungeonConfig extra_policy must be one of {EXTRA_EDGE_POLICIES}")
        if not 0.0 <= self.extra_edge_probability <= 1.0:
            raise ValueError("DungeonConfig extra_edge_probability must lie within [0, 1]")
        if not 0.0 <= self.long_edge_fraction <= 1.0:
            raise ValueError("DungeonConfig long_edge_fraction must lie within [0, 1]")
        if self.extra_edge_ratio < 0 or self.max_extra_edge_ratio < 0:
            raise ValueError("DungeonConfig extra edge ratios cannot be negative")
        if self.search_retries < 0:
            raise ValueError("DungeonConfig search_retries cannot be negative")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides) -> "DungeonConfig":
        """Build a config from loosely typed values (env vars, query strings, JSON)."""
        merged = dict(data)
        merged.update(overrides)
        kwargs = {}
        for f in fields(cls):
            if f.name not in merged or merged[f.name] is None:
                continue
            kwargs[f.name] = _coerce(f.name, f.default, merged[f.name])
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "DungeonConfig":
        env = os.environ if environ is None else environ
        data = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key in env and env[key] != "":
                data[f.name] = env[key]
        return cls.from_mapping(data, **overrides)

    def to_dict(self):
        return asdict(self)


def _coerce(name: str, default, value):
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() not in {"0", "false", "no", "off", ""}
        return bool(value)
    if isinstance(default, int) or name == "seed":
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"DungeonConfig {name} must be an integer, got {value!r}") from None
    if isinstance(default, float):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"DungeonConfig {name} must be a number, got {value!r}") from None
    return str(value)


__all__ = ["DungeonConfig", "CANDIDATE_POLICIES", "EXTRA_EDGE_POLICIES", "ENV_PREFIX"]
