"""Disjoint sets for collapsing duplicate edges into groups."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List


class UnionFind:
    """Union by size with path halving; keys are image source labels."""

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._parent: Dict[str, str] = {}
        self._size: Dict[str, int] = {}
        for item in items:
            self.find(item)

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, item: str) -> str:
        """Return the representative of the set holding *item*, adding it if new."""
        if item not in self._parent:
            self._parent[item] = item
            self._size[item] = 1
            return item
        parent = self._parent[item]
        while parent != item:
            grandparent = self._parent[parent]
            self._parent[item] = grandparent
            item, parent = grandparent, self._parent[grandparent]
        return item

    def union(self, a: str, b: str) -> str:
        """Merge the sets of *a* and *b* and return the surviving root."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size.pop(root_b)
        return root_a

    def groups(self) -> Dict[str, List[str]]:
        """Return a mapping of each root to the sorted members of its set."""
        buckets: Dict[str, List[str]] = defaultdict(list)
        for item in list(self._parent):
            buckets[self.find(item)].append(item)
        return {root: sorted(members) for root, members in buckets.items()}
