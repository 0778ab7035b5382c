import pytest

from undercroft.dungeon import CellType, Dungeon, DungeonConfig, generate_dungeon


@pytest.mark.parametrize("size", [(1, 1), (5, 5), (6, 40)])
def test_grid_too_small_for_rooms(size):
    w, h = size
    d = generate_dungeon(seed=3, width=w, height=h)
    assert d.rooms == []
    assert len(d.graph) == 0
    assert d.grid.count(CellType.EMPTY) == w * h
    assert d.connected
    assert d.metrics["rooms_placed"] == 0


def test_single_room_has_no_corridors():
    d = generate_dungeon(seed=8, room_count=1)
    assert len(d.rooms) == 1
    assert len(d.graph) == 0
    assert d.grid.count(CellType.CORRIDOR) == 0
    assert d.components == [[0]]


def test_two_rooms_one_corridor_edge():
    d = generate_dungeon(seed=21, room_count=2, width=32, height=32)
    assert len(d.rooms) == 2
    assert [e.key for e in d.graph.tree] == [(0, 1)]
    assert d.connected


def test_metrics_can_be_disabled():
    d = Dungeon(DungeonConfig(seed=4, width=32, height=32), enable_metrics=False)
    assert d.metrics == {}
    assert d.rooms


def test_metrics_content():
    d = generate_dungeon(seed=99)
    m = d.metrics
    assert m["rooms_placed"] == len(d.rooms)
    assert m["tree_edges"] == len(d.rooms) - 1
    assert m["edges_carved"] + m["edges_skipped"] == len(d.graph)
    assert 0.0 <= m["connection_success_ratio"] <= 1.0
    assert set(m["phase_ms"]) >= {"place_rooms", "build_graph", "carve", "prune", "repair"}
    assert m["floor_cells"] == d.grid.count(CellType.ROOM) + d.grid.count(CellType.CORRIDOR)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -4},
        {"room_count": -1},
        {"min_room_width": 8, "max_room_width": 4},
        {"min_room_height": 0},
        {"corridor_width": 0},
        {"extra_policy": "everything"},
        {"candidate_policy": "voronoi"},
        {"extra_edge_probability": 1.5},
        {"max_extra_edge_ratio": -0.1},
        {"placement_attempts": -5},
    ],
)
def test_invalid_config_fails_fast(kwargs):
    with pytest.raises(ValueError):
        DungeonConfig(**kwargs)


def test_to_dict_shape():
    d = generate_dungeon(seed=6, width=30, height=20)
    out = d.to_dict()
    assert out["seed"] == 6
    assert (out["width"], out["height"]) == (30, 20)
    assert len(out["grid"]) == 20 and len(out["grid"][0]) == 30
    assert all(set(r) == {"id", "x", "y", "width", "height"} for r in out["rooms"])
    assert all(e["a"] < e["b"] for e in out["edges"])
