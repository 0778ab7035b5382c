from enum import Enum
from typing import NamedTuple, Tuple

NO_ROOM = -1


class CellType(str, Enum):
    EMPTY = "empty"
    ROOM = "room"
    CORRIDOR = "corridor"


class Cell(NamedTuple):
    """One grid unit. ``room_id`` is only meaningful for ROOM cells."""

    type: CellType = CellType.EMPTY
    room_id: int = NO_ROOM

    @property
    def is_floor(self) -> bool:
        return self.type is not CellType.EMPTY


EMPTY = Cell(CellType.EMPTY, NO_ROOM)
CORRIDOR = Cell(CellType.CORRIDOR, NO_ROOM)


def room_cell(room_id: int) -> Cell:
    return Cell(CellType.ROOM, room_id)


Coord = Tuple[int, int]

__all__ = ["NO_ROOM", "CellType", "Cell", "EMPTY", "CORRIDOR", "room_cell", "Coord"]
