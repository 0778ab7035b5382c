from collections import deque

from undercroft.dungeon import Grid, Room
from undercroft.dungeon.cells import CellType, room_cell


def make_grid(width, height, rooms=()):
    """Grid with the given (x, y, w, h) rectangles stamped as rooms 0..n-1."""
    grid = Grid(width, height)
    placed = []
    for i, (x, y, w, h) in enumerate(rooms):
        room = Room(i, x, y, w, h)
        for cx, cy in room.cells():
            grid.set(cx, cy, room_cell(i))
        placed.append(room)
    return grid, placed


def bfs_reachable(grid, start):
    """Return set of (x,y) floor cells reachable from start (4-connected)."""
    if start is None or not grid.is_floor(*start):
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if (nx, ny) not in vis and grid.is_floor(nx, ny):
                vis.add((nx, ny))
                q.append((nx, ny))
    return vis


def unreachable_rooms(grid, rooms):
    if not rooms:
        return []
    reach = bfs_reachable(grid, rooms[0].center)
    return [r.id for r in rooms if r.center not in reach]


def room_cell_mismatches(grid, rooms):
    """Cells whose grid contents disagree with the room list."""
    bad = []
    owned = {}
    for r in rooms:
        for x, y in r.cells():
            owned[(x, y)] = r.id
    for x, y, cell in grid.iter_cells():
        if (x, y) in owned:
            if cell.type is not CellType.ROOM or cell.room_id != owned[(x, y)]:
                bad.append((x, y))
        elif cell.type is CellType.ROOM:
            bad.append((x, y))
    return bad
