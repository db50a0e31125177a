"""Connected components of (sub)networks."""

from collections import defaultdict
from collections.abc import Iterable

from .models import Edge, NodeId


class UnionFind:
    """Union-Find data structure for computing connected components.

    Works on any hashable, orderable node keys; components are reported
    ordered by their smallest member so that numbering is reproducible.
    """

    def __init__(self) -> None:
        self.parent: dict[NodeId, NodeId] = {}
        self.rank: dict[NodeId, int] = {}

    def add(self, x: NodeId) -> None:
        """Register ``x`` as a singleton set if unseen."""
        self.parent.setdefault(x, x)
        self.rank.setdefault(x, 0)

    def find(self, x: NodeId) -> NodeId:
        """Find the root of the set containing x (with path compression)."""
        if self.parent.get(x, x) != x:
            self.parent[x] = self.find(self.parent[x])
        else:
            self.add(x)
        return self.parent[x]

    def union(self, a: NodeId, b: NodeId) -> None:
        """Merge the sets containing a and b (with union by rank)."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1

    def get_components(self) -> list[set[NodeId]]:
        """Return all components, ordered by their smallest member."""
        by_root: dict[NodeId, set[NodeId]] = defaultdict(set)
        for node in self.parent:
            by_root[self.find(node)].add(node)
        return sorted(by_root.values(), key=min)


def connected_components(nodes: Iterable[NodeId], edges: Iterable[Edge]) -> list[set[NodeId]]:
    """Undirected connected components of the graph given by ``nodes`` and ``edges``.

    Edge endpoints that are not listed in ``nodes`` are added as well.
    """
    uf = UnionFind()
    for node in nodes:
        uf.add(node)
    for source, target in edges:
        uf.union(source, target)
    return uf.get_components()
