"""Bowyer-Watson Delaunay triangulation over room centers.

Points are inserted one at a time into a large bounding super-triangle;
every triangle whose circumcircle contains the new point is removed and the
resulting polygonal hole is re-fanned from the new point. Triangles that
still touch a super-triangle vertex are dropped at the end.
"""
from __future__ import annotations

from typing import List, Sequence, Set, Tuple

Point = Tuple[float, float]
Triangle = Tuple[int, int, int]

EPSILON = 1e-9


class DegenerateTriangulationError(ValueError):
    """Raised when the point set cannot produce a usable triangulation."""


def _orientation(a: Point, b: Point, c: Point) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def in_circumcircle(p: Point, a: Point, b: Point, c: Point) -> bool:
    ax, ay = a[0] - p[0], a[1] - p[1]
    bx, by = b[0] - p[0], b[1] - p[1]
    cx, cy = c[0] - p[0], c[1] - p[1]
    det = (
        (ax * ax + ay * ay) * (bx * cy - by * cx)
        - (bx * bx + by * by) * (ax * cy - ay * cx)
        + (cx * cx + cy * cy) * (ax * by - ay * bx)
    )
    # The determinant sign flips with triangle winding.
    if _orientation(a, b, c) < 0:
        det = -det
    return det > EPSILON


def _all_collinear(points: Sequence[Point]) -> bool:
    a = points[0]
    far = max(points, key=lambda p: (p[0] - a[0]) ** 2 + (p[1] - a[1]) ** 2)
    if far == a:
        return True
    return all(abs(_orientation(a, far, p)) <= EPSILON for p in points)


def triangulate(points: Sequence[Point]) -> List[Triangle]:
    """Return triangles as index triples into ``points``.

    Raises DegenerateTriangulationError for fewer than three points, duplicate
    points, collinear input, or when some point ends up in no triangle.
    """
    n = len(points)
    if n < 3:
        raise DegenerateTriangulationError(f"need at least 3 points, got {n}")
    if len(set(points)) != n:
        raise DegenerateTriangulationError("duplicate points")
    if _all_collinear(points):
        raise DegenerateTriangulationError("all points are collinear")

    min_x = min(p[0] for p in points)
    max_x = max(p[0] for p in points)
    min_y = min(p[1] for p in points)
    max_y = max(p[1] for p in points)
    d = max(max_x - min_x, max_y - min_y, 1.0) * 20.0
    pts: List[Point] = list(points) + [
        (min_x - d, min_y - 1.0),
        (max_x + d, min_y - 1.0),
        ((min_x + max_x) / 2.0, max_y + d),
    ]
    s1, s2, s3 = n, n + 1, n + 2
    triangles: List[Triangle] = [(s1, s2, s3)]

    for i in range(n):
        p = pts[i]
        bad = [t for t in triangles if in_circumcircle(p, pts[t[0]], pts[t[1]], pts[t[2]])]
        if not bad:
            continue
        # Boundary of the hole = edges belonging to exactly one bad triangle.
        edge_count = {}
        for t in bad:
            for e in ((t[0], t[1]), (t[1], t[2]), (t[2], t[0])):
                key = (min(e), max(e))
                edge_count[key] = edge_count.get(key, 0) + 1
        bad_set = set(bad)
        triangles = [t for t in triangles if t not in bad_set]
        for (a, b), count in sorted(edge_count.items()):
            if count == 1:
                triangles.append((a, b, i))

    result = [t for t in triangles if t[0] < n and t[1] < n and t[2] < n]
    covered: Set[int] = {v for t in result for v in t}
    if len(covered) != n:
        raise DegenerateTriangulationError(f"{n - len(covered)} point(s) missing from triangulation")
    return result


def triangle_edges(triangles: Sequence[Triangle]) -> List[Tuple[int, int]]:
    """Unique undirected edges (min, max) of the triangles, sorted."""
    edges = set()
    for a, b, c in triangles:
        for u, v in ((a, b), (b, c), (c, a)):
            edges.add((min(u, v), max(u, v)))
    return sorted(edges)


__all__ = ["DegenerateTriangulationError", "in_circumcircle", "triangulate", "triangle_edges"]
