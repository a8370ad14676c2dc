"""
Disjoint sets for the percolation grid.

Elements are the flattened site indices 0 .. n*n-1 plus one virtual anchor
at n*n; the grid only ever merges components, never splits them.
"""


class WeightedQuickUnionUF:
    """
    Union by size with path halving.

    Every root keeps the number of elements hanging under it, and the
    smaller tree is always attached below the larger root, so no tree grows
    deeper than log2(n). find() points each node it visits at its
    grandparent, which keeps later lookups on the same cluster short.
    """

    def __init__(self, n: int):
        if n <= 0:
            raise ValueError(f"number of elements must be > 0, got {n}")

        self.parent = list(range(n))
        # only read at roots
        self.size = [1] * n
        self.count = n

    def __len__(self):
        return len(self.parent)

    def get_count(self) -> int:
        """Number of components, the anchor's included."""
        return self.count

    def _validate(self, p: int):
        if not 0 <= p < len(self.parent):
            raise IndexError(f"index {p} is not between 0 and {len(self.parent) - 1}")

    def find(self, p: int) -> int:
        self._validate(p)
        parent = self.parent
        while parent[p] != p:
            parent[p] = parent[parent[p]]
            p = parent[p]
        return p

    def connected(self, p: int, q: int) -> bool:
        return self.find(p) == self.find(q)

    def union(self, p: int, q: int):
        """
        Merges the clusters holding p and q; a no-op when they already
        share a root.
        """
        big, small = self.find(p), self.find(q)
        if big == small:
            return
        if self.size[big] < self.size[small]:
            big, small = small, big
        self.parent[small] = big
        self.size[big] += self.size[small]
        self.count -= 1
