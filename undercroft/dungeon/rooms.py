import random
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from ..logging_utils import get_logger
from .cells import room_cell
from .config import DungeonConfig
from .grid import Grid

log = get_logger("dungeon.rooms")


@dataclass(frozen=True)
class Room:
    id: int
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def center_f(self) -> Tuple[float, float]:
        return (self.x + self.w / 2.0, self.y + self.h / 2.0)

    def intersects(self, other: "Room", gap: int = 0) -> bool:
        return (
            self.x - gap < other.x + other.w
            and self.x + self.w + gap > other.x
            and self.y - gap < other.y + other.h
            and self.y + self.h + gap > other.y
        )

    def to_dict(self):
        return {"id": self.id, "x": self.x, "y": self.y, "width": self.w, "height": self.h}


class PlacementResult(NamedTuple):
    rooms: List[Room]
    attempts: int
    target: int


def place_rooms(grid: Grid, config: DungeonConfig, rng=None) -> PlacementResult:
    """Scatter non-overlapping rooms onto the grid by rejection sampling.

    Without a target (``room_count == 0``) every one of ``placement_attempts``
    samples is tried. With a target, sampling stops once it is reached, after
    twice the attempt budget, or when ``max_consecutive_failures`` samples in a
    row were rejected (the grid is most likely full).
    """
    if rng is None:
        rng = random.Random()
    target = config.room_count
    budget = config.placement_attempts
    rooms: List[Room] = []
    attempts = 0
    consecutive_failures = 0

    def keep_going():
        if target <= 0:
            return attempts < budget
        return (
            len(rooms) < target
            and attempts < budget * 2
            and consecutive_failures < config.max_consecutive_failures
        )

    while keep_going():
        attempts += 1
        w = rng.randint(config.min_room_width, config.max_room_width)
        h = rng.randint(config.min_room_height, config.max_room_height)
        max_x = grid.width - w - 2
        max_y = grid.height - h - 2
        if max_x < 1 or max_y < 1:
            consecutive_failures += 1
            continue
        candidate = Room(len(rooms), rng.randint(1, max_x), rng.randint(1, max_y), w, h)
        if _room_overlaps(candidate, rooms, config.room_gap):
            consecutive_failures += 1
            continue
        for ix, iy in candidate.cells():
            grid.set(ix, iy, room_cell(candidate.id))
        rooms.append(candidate)
        consecutive_failures = 0

    if target > 0 and len(rooms) < target:
        log.warn(event="room_target_missed", target=target, placed=len(rooms), attempts=attempts)
    log.info(event="rooms_placed", placed=len(rooms), attempts=attempts)
    return PlacementResult(rooms, attempts, target)


def _room_overlaps(room: Room, existing: List[Room], gap: int) -> bool:
    return any(room.intersects(r, gap) for r in existing)


__all__ = ["Room", "PlacementResult", "place_rooms"]
