import random

import pytest

from undercroft.dungeon import DegenerateTriangulationError, triangulate
from undercroft.dungeon.triangulation import in_circumcircle, triangle_edges


def test_single_triangle():
    tris = triangulate([(0.0, 0.0), (4.0, 0.0), (1.0, 3.0)])
    assert len(tris) == 1
    assert sorted(tris[0]) == [0, 1, 2]


def test_convex_quad_gives_two_triangles_five_edges():
    pts = [(0.0, 0.0), (4.0, 0.0), (5.0, 4.0), (1.0, 3.0)]
    tris = triangulate(pts)
    assert len(tris) == 2
    assert len(triangle_edges(tris)) == 5


def test_random_points_satisfy_empty_circumcircle():
    rng = random.Random(3)
    pts = [(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(25)]
    tris = triangulate(pts)
    assert {v for t in tris for v in t} == set(range(len(pts)))
    for a, b, c in tris:
        for i, p in enumerate(pts):
            if i in (a, b, c):
                continue
            assert not in_circumcircle(p, pts[a], pts[b], pts[c])


@pytest.mark.parametrize(
    "pts",
    [
        [(0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (5.0, 5.0)],
        [(0.0, 0.0), (3.0, 1.0), (3.0, 1.0)],
    ],
)
def test_degenerate_inputs_raise(pts):
    with pytest.raises(DegenerateTriangulationError):
        triangulate(pts)


def test_degenerate_error_is_value_error():
    assert issubclass(DegenerateTriangulationError, ValueError)


def test_circumcircle_test_ignores_winding():
    a, b, c = (0.0, 0.0), (2.0, 0.0), (0.0, 2.0)
    inside, outside = (0.5, 0.5), (5.0, 5.0)
    assert in_circumcircle(inside, a, b, c) and in_circumcircle(inside, a, c, b)
    assert not in_circumcircle(outside, a, b, c) and not in_circumcircle(outside, a, c, b)
