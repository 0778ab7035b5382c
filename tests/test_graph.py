import random

import pytest

from undercroft.dungeon import DisjointSet, DungeonConfig, Edge, Grid, Room, build_room_graph, place_rooms
from undercroft.dungeon.graph import add_extra_edges, candidate_edges, extra_edge_cap, full_graph_edges, prim_mst


def _rooms(seed, **cfg):
    config = DungeonConfig(seed=seed, **cfg)
    return place_rooms(Grid(config.width, config.height), config, random.Random(seed)).rooms, config


def test_edge_is_undirected():
    assert Edge(3, 1, 2.0) == Edge(1, 3, 9.0)
    assert hash(Edge(3, 1)) == hash(Edge(1, 3))
    assert Edge(5, 2).key == (2, 5)
    assert Edge(5, 2).other(5) == 2


def test_self_loop_rejected():
    with pytest.raises(ValueError):
        Edge(4, 4)


@pytest.mark.parametrize("seed", [2, 19, 123, 999])
def test_mst_spans_every_room(seed):
    rooms, config = _rooms(seed)
    graph = build_room_graph(rooms, config, random.Random(seed))
    assert graph.candidate_source == "triangulation"
    assert len(graph.tree) == len(rooms) - 1
    ds = DisjointSet(len(rooms))
    for e in graph.tree:
        assert ds.union(e.a, e.b), "tree edge closed a cycle"
    assert ds.count() == 1


@pytest.mark.parametrize("policy", ["probability", "ratio", "long_random"])
@pytest.mark.parametrize("seed", [4, 77])
def test_extra_edges_are_new_unique_and_capped(policy, seed):
    rooms, config = _rooms(seed, extra_policy=policy, max_extra_edge_ratio=0.3)
    graph = build_room_graph(rooms, config, random.Random(seed))
    tree_keys = {e.key for e in graph.tree}
    extra_keys = [e.key for e in graph.extra]
    assert len(extra_keys) == len(set(extra_keys))
    assert not tree_keys & set(extra_keys)
    assert len(graph.extra) <= extra_edge_cap(len(graph.tree), config)
    candidate_keys = {e.key for e in graph.candidates}
    assert set(extra_keys) <= candidate_keys


def test_zero_cap_means_no_extra_edges():
    rooms, config = _rooms(8, max_extra_edge_ratio=0.0)
    graph = build_room_graph(rooms, config, random.Random(8))
    assert graph.extra == []


def test_long_random_includes_longest_candidates():
    rooms, config = _rooms(31, extra_policy="long_random", extra_edge_ratio=1.0)
    graph = build_room_graph(rooms, config, random.Random(31))
    tree_keys = {e.key for e in graph.tree}
    pool = sorted((e for e in graph.candidates if e.key not in tree_keys), key=lambda e: (-e.length, e.key))
    if len(graph.extra) >= 4:
        assert pool[0].key in {e.key for e in graph.extra}


def test_collinear_rooms_fall_back_to_full_graph():
    rooms = [Room(i, 2 + i * 8, 10, 4, 4) for i in range(4)]
    edges, source = candidate_edges(rooms)
    assert source == "full"
    assert len(edges) == 6
    tree = prim_mst(edges, rooms)
    assert sorted(e.key for e in tree) == [(0, 1), (1, 2), (2, 3)]


def test_prim_attaches_rooms_missing_from_candidates():
    rooms = [Room(0, 1, 1, 4, 4), Room(1, 20, 1, 4, 4), Room(2, 40, 1, 4, 4)]
    tree = prim_mst([Edge(0, 1, 19.0)], rooms)
    assert len(tree) == 2
    assert {e.key for e in tree} == {(0, 1), (1, 2)}


@pytest.mark.parametrize("count", [0, 1])
def test_trivial_room_counts_give_empty_graph(count):
    rooms = [Room(i, 1 + i * 10, 1, 4, 4) for i in range(count)]
    graph = build_room_graph(rooms, DungeonConfig(), random.Random(1))
    assert len(graph) == 0 and graph.candidates == []


def test_two_rooms_connect_with_single_edge():
    rooms = [Room(0, 1, 1, 4, 4), Room(1, 20, 20, 4, 4)]
    graph = build_room_graph(rooms, DungeonConfig(), random.Random(1))
    assert graph.candidate_source == "full"
    assert [e.key for e in graph.tree] == [(0, 1)]
    assert graph.extra == []


def test_add_extra_edges_never_exceeds_cap_with_full_graph():
    rooms = [Room(i, 1 + (i % 4) * 12, 1 + (i // 4) * 12, 4, 4) for i in range(12)]
    edges = full_graph_edges(rooms)
    tree = prim_mst(edges, rooms)
    config = DungeonConfig(extra_policy="probability", extra_edge_probability=1.0, max_extra_edge_ratio=0.5)
    extra = add_extra_edges(edges, tree, config, random.Random(0))
    assert len(extra) == extra_edge_cap(len(tree), config) == 5
