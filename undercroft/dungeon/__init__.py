"""Public dungeon package interface.

Generation entry points plus the grid/room/graph types callers inspect.
"""

from .cells import NO_ROOM, Cell, CellType
from .config import DungeonConfig
from .connectivity import ConnectivityReport, audit_connectivity, repair_connectivity
from .disjoint_set import DisjointSet
from .graph import Edge, RoomGraph, build_room_graph
from .grid import Grid
from .heap import PriorityQueue
from .pipeline import Dungeon, generate_dungeon
from .pruning import prune_dead_ends
from .render import to_ascii, wall_edges
from .rooms import Room, place_rooms
from .spawn import choose_spawn_point, find_safe_spot
from .triangulation import DegenerateTriangulationError, triangulate
from .tunnels import CorridorCarver

__all__ = [
    "NO_ROOM",
    "Cell",
    "CellType",
    "DungeonConfig",
    "ConnectivityReport",
    "audit_connectivity",
    "repair_connectivity",
    "DisjointSet",
    "Edge",
    "RoomGraph",
    "build_room_graph",
    "Grid",
    "PriorityQueue",
    "Dungeon",
    "generate_dungeon",
    "prune_dead_ends",
    "to_ascii",
    "wall_edges",
    "Room",
    "place_rooms",
    "choose_spawn_point",
    "find_safe_spot",
    "DegenerateTriangulationError",
    "triangulate",
    "CorridorCarver",
]
