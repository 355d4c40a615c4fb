"""
Data structures for matching.
"""

from __future__ import annotations


class VersionedUnionFind:
    """Union-find data structure over a fixed range of elements,
    which can be cleared in constant time.

    Elements are indexed by integers in range 0 .. n-1.

    Every element carries a stamp which records the generation in which
    the element was last added to the data structure. Only elements that
    carry the current generation are part of the data structure.
    An element with a stale stamp is treated as a singleton set that
    does not belong to the data structure.

    Starting a new generation therefore removes all elements from
    the data structure in time O(1), without touching the per-element
    arrays.

    Each set is identified by its representative element, which is
    the root of a tree of parent pointers. Path compression is applied
    during "find()", which makes lookups amortized near-O(1).
    """

    def __init__(self, num_element: int) -> None:
        """Initialize an empty union-find structure.

        This function takes time O(n).
        """

        # "generation" is the number of the current generation.
        # Generations start at 1 and only increase. Stamp 0 is therefore
        # never current, so all elements start out stale.
        self.generation: int = 1

        # "stamp[x]" is the generation in which element "x" was last added.
        self.stamp: list[int] = num_element * [0]

        # "rep[x]" is the parent of element "x" in its tree.
        # If "rep[x] == x", element "x" is the representative of its set.
        # These values are only meaningful for elements of the
        # current generation.
        self.rep: list[int] = list(range(num_element))

    def new_generation(self) -> None:
        """Remove all elements from the data structure.

        This function takes time O(1).
        """
        self.generation += 1

    def add(self, x: int) -> None:
        """Add element "x" as a singleton set in the current generation."""
        self.stamp[x] = self.generation
        self.rep[x] = x

    def contains(self, x: int) -> bool:
        """Return True if element "x" is part of the current generation."""
        return self.stamp[x] == self.generation

    def find(self, x: int) -> int:
        """Return the representative of the set that contains element "x".

        Elements that are not part of the current generation are
        their own representative.

        This function takes amortized time O(log(n)).
        """

        if self.stamp[x] != self.generation:
            return x

        # Walk up to the root of the tree.
        root = x
        while self.rep[root] != root:
            root = self.rep[root]

        # Path compression: point every element on the path to the root.
        while x != root:
            parent = self.rep[x]
            self.rep[x] = root
            x = parent

        return root

    def union(self, x: int, y: int) -> None:
        """Merge the set that contains "x" into the set that contains "y".

        The representative of the set that contains "y" becomes
        the representative of the merged set.

        Both elements must be part of the current generation.
        """
        assert self.contains(x)
        assert self.contains(y)
        xroot = self.find(x)
        self.rep[xroot] = self.find(y)

    def make_representative(self, x: int) -> None:
        """Make element "x" the representative of its own set."""
        assert self.contains(x)
        xroot = self.find(x)
        self.rep[xroot] = x
        self.rep[x] = x
