from __future__ import annotations

from typing import Dict, List


class DisjointSet:
    """Union-find over ``0..size-1`` with path compression and union by rank."""

    __slots__ = ("parent", "rank")

    def __init__(self, size: int):
        if size < 0:
            raise ValueError("DisjointSet size cannot be negative")
        self.parent: List[int] = list(range(size))
        self.rank: List[int] = [0] * size

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, a: int) -> int:
        root = a
        while self.parent[root] != root:
            root = self.parent[root]
        # second pass: point every node on the walk straight at the root
        while self.parent[a] != root:
            self.parent[a], a = root, self.parent[a]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> List[List[int]]:
        """Return members grouped by root, each group sorted, groups ordered by smallest member."""
        by_root: Dict[int, List[int]] = {}
        for i in range(len(self.parent)):
            by_root.setdefault(self.find(i), []).append(i)
        return sorted(by_root.values(), key=lambda g: g[0])

    def count(self) -> int:
        return sum(1 for i in range(len(self.parent)) if self.find(i) == i)


__all__ = ["DisjointSet"]
