"""
Algorithm for finding a maximum cardinality matching in general graphs.
"""

from __future__ import annotations

import collections
import logging
from collections.abc import Sequence
from typing import Optional

from .datastruct import VersionedUnionFind
from .graph import Graph


_logger = logging.getLogger(__name__)


def maximum_cardinality_matching(
        edges: Sequence[tuple[int, int]],
        num_vertex: Optional[int] = None
        ) -> list[tuple[int, int]]:
    """Compute a maximum-cardinality matching in the general undirected
    graph given by "edges".

    The graph is specified as a list of edges, each edge specified as a tuple
    of its two vertices.
    There may be at most one edge between any pair of vertices.
    No vertex may have an edge to itself.
    The graph may be non-connected (i.e. contain multiple components).

    Vertices are indexed by consecutive, non-negative integers, such that
    the first vertex has index 0 and the last vertex has index (n-1).

    This function takes time O(n * m * alpha(n)), where "n" is the number
    of vertices and "m" is the number of edges.
    This function uses O(n + m) memory.

    Parameters:
        edges: List of edges, each edge specified as a tuple "(x, y)"
            where "x" and "y" are vertex indices.
        num_vertex: Optional number of vertices, to include isolated
            vertices beyond the highest vertex index in "edges".

    Returns:
        List of pairs of matched vertex indices.
        This is a subset of the edges in the graph.
        It contains a tuple "(x, y)" if vertex "x" is matched to vertex "y".

    Raises:
        InvalidGraphError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
        MatchingError: If the matching algorithm fails.
            This can only happen if there is a bug in the algorithm.
    """

    graph = Graph.from_edges(edges, num_vertex)
    matching = Matching(graph)

    # Extract the final solution in the order of the edge list.
    return [(x, y) for (x, y) in edges if matching.matched_partner(x) == y]


class MatchingError(Exception):
    """Raised when the matching algorithm detects an internal inconsistency.

    This can only happen if there is a bug in the algorithm.
    """


class Matching:
    """Maximum-cardinality matching in a general undirected graph.

    The matching is computed when the object is constructed.
    Afterwards the object only answers queries; it does not change.
    """

    def __init__(self, graph: Graph) -> None:
        """Compute a maximum-cardinality matching of the specified graph.

        Raises:
            MatchingError: If the matching algorithm fails.
                This can only happen if there is a bug in the algorithm.
        """

        self.graph = graph

        ctx = MatchingContext(graph)
        ctx.run()

        # Verification is a redundant step; if the matching algorithm is
        # correct, verification will always pass.
        verify_matching(ctx)

        self._vertex_mate: list[int] = ctx.vertex_mate
        self._num_matched_edge = (
            sum(1 for y in self._vertex_mate if y != -1) // 2)

        _logger.debug("Maximum matching has %d edges on %d vertices",
                      self._num_matched_edge,
                      graph.num_vertex)

    def __len__(self) -> int:
        """Return the number of matched edges."""
        return self._num_matched_edge

    @property
    def vertex_mate(self) -> tuple[int, ...]:
        """Tuple containing the partner of each vertex, or -1 if
        the vertex is unmatched."""
        return tuple(self._vertex_mate)

    def _check_vertex(self, x: int) -> None:
        if (not isinstance(x, int)) or isinstance(x, bool):
            raise TypeError("Vertex index must be an integer")
        if (x < 0) or (x >= self.graph.num_vertex):
            raise ValueError(f"Vertex {x} is not part of the graph")

    def matched_partner(self, x: int) -> Optional[int]:
        """Return the vertex matched to vertex "x", or None if "x"
        is unmatched."""
        self._check_vertex(x)
        y = self._vertex_mate[x]
        return y if y != -1 else None

    def is_matched(self, x: int) -> bool:
        """Return True if vertex "x" is matched."""
        self._check_vertex(x)
        return self._vertex_mate[x] != -1

    def pairs(self) -> list[tuple[int, int]]:
        """Return a sorted list of matched pairs.

        Each matched edge appears once as a tuple "(x, y)" with "x < y".
        """
        return [(x, y) for (x, y) in enumerate(self._vertex_mate) if x < y]

    def exposed_vertices(self) -> list[int]:
        """Return a sorted list of unmatched vertices."""
        return [x for (x, y) in enumerate(self._vertex_mate) if y == -1]


class SearchContext:
    """Holds the state of a single augmenting path search.

    The search grows an alternating tree from one unmatched root vertex.
    Vertices at even depth in the tree are outer vertices; vertices at
    odd depth are inner vertices, reached via an unmatched edge and
    left via their matched edge.

    Odd cycles found during the search are contracted into blossoms.
    A union-find structure maps each vertex in the tree to the base
    vertex of the largest blossom that contains it.

    The per-vertex arrays are allocated once and reused for every search.
    Starting a new search advances the generation of the union-find
    structure, which implicitly clears all per-vertex data. Data of
    vertices that are not part of the current generation are stale.
    """

    def __init__(self, num_vertex: int) -> None:
        """Allocate per-vertex arrays.

        This function takes time O(n).
        """

        # "blossoms" tracks which vertices belong to the current tree,
        # and which vertices have been merged into the same blossom.
        self.blossoms = VersionedUnionFind(num_vertex)

        # "depth[x]" is the depth of vertex "x" in the alternating tree.
        self.depth: list[int] = num_vertex * [0]

        # "parent[x]" is the parent of vertex "x" in the alternating tree,
        # or -1 if "x" is the root of the tree.
        self.parent: list[int] = num_vertex * [-1]

        # When an odd vertex "x" is absorbed into a blossom,
        # "bridge[x] = (v, w)" is the edge that closed the blossom,
        # with "v" on the same side of the blossom as "x".
        self.bridge: list[tuple[int, int]] = num_vertex * [(-1, -1)]

        # "queue" is a FIFO list of outer vertices that must be scanned.
        self.queue: collections.deque[int] = collections.deque()

    def start(self, root: int) -> None:
        """Clear the search state and plant a new tree at "root".

        This function takes time O(1).
        """

        self.blossoms.new_generation()

        # Discard any vertices left over from a previous search.
        self.queue = collections.deque()

        self.depth[root] = 0
        self.parent[root] = -1
        self.blossoms.add(root)
        self.queue.append(root)

    def in_tree(self, x: int) -> bool:
        """Return True if vertex "x" is part of the current tree."""
        return self.blossoms.contains(x)


class MatchingContext:
    """Holds all data used by the matching algorithm.

    It contains a partial solution of the matching problem and the state
    of the augmenting path search.
    """

    def __init__(self, graph: Graph) -> None:
        """Set up the initial state of the matching algorithm."""

        # Reference to the input graph.
        # The graph does not change while the algorithm runs.
        self.graph = graph

        # Each vertex is either single (unmatched) or matched to
        # another vertex.
        #
        # If vertex "x" is matched to vertex "y",
        # "vertex_mate[x] == y" and "vertex_mate[y] == x".
        #
        # If vertex "x" is unmatched, "vertex_mate[x] == -1".
        #
        # Initially all vertices are unmatched.
        self.vertex_mate: list[int] = graph.num_vertex * [-1]

        # State of the augmenting path search.
        self.search = SearchContext(graph.num_vertex)

    def match(self, x: int, y: int) -> None:
        """Match vertex "x" to vertex "y"."""
        self.vertex_mate[x] = y
        self.vertex_mate[y] = x

    def greedy_matching(self) -> list[int]:
        """Construct a maximal (not maximum) matching by matching each
        unmatched vertex to its first unmatched neighbour.

        This reduces the number of augmenting path searches.

        This function takes time O(n + m).

        Returns:
            List of vertices which are still unmatched, in index order.
        """

        adjacency = self.graph.adjacency
        unmatched: list[int] = []

        for x in range(self.graph.num_vertex):
            if self.vertex_mate[x] != -1:
                continue
            for y in adjacency[x]:
                if self.vertex_mate[y] == -1:
                    self.match(x, y)
                    break
            else:
                unmatched.append(x)

        return unmatched

    def augment_matching(self, path: list[int]) -> None:
        """Augment the matching through the specified augmenting path.

        The path is a list of vertices that starts and ends in
        an unmatched vertex. Its edges alternate between unmatched and
        matched edges, starting with an unmatched edge.

        Matching every pair "(path[0], path[1])", "(path[2], path[3])", etc.
        flips the status of every edge on the path.

        This function takes time O(n).
        """

        # Check that the path starts and ends in an unmatched vertex.
        assert len(path) % 2 == 0
        assert self.vertex_mate[path[0]] == -1
        assert self.vertex_mate[path[-1]] == -1

        for p in range(0, len(path), 2):
            self.match(path[p], path[p+1])

    #
    # Augmenting path search:
    #

    def extend_tree(self, v: int, w: int) -> None:
        """Attach matched vertex "w" and its mate to the alternating tree
        via the edge (v, w).

        Vertex "w" becomes an odd vertex below "v".
        The mate of "w" becomes an even vertex below "w" and is added to
        the queue.

        Preconditions:
         - "v" is part of an outer blossom.
         - "w" is matched and not part of the tree.
        """

        search = self.search
        u = self.vertex_mate[w]
        assert u != -1

        # The depth of "w" must be odd. Vertex "v" is normally even, but
        # it can be an odd vertex that was absorbed into a blossom.
        search.depth[w] = search.depth[v] + 1 + (search.depth[v] & 1)
        search.parent[w] = v
        search.blossoms.add(w)

        search.depth[u] = search.depth[w] + 1
        search.parent[u] = w
        search.blossoms.add(u)

        search.queue.append(u)

    def find_common_ancestor(self, v: int, w: int) -> int:
        """Find the base of the blossom that contains the lowest common
        ancestor of vertices "v" and "w" in the alternating tree.

        This function takes time O(n).
        """

        depth = self.search.depth
        parent = self.search.parent

        while v != w:
            if (v == -1) or (w == -1):
                raise MatchingError(
                    "Vertices in the same tree have no common ancestor")
            if depth[v] > depth[w]:
                v = parent[v]
            else:
                w = parent[w]

        return self.search.blossoms.find(v)

    def shrink_path(self, b: int, v: int, w: int) -> None:
        """Merge the blossoms on the tree path from vertex "v" to
        the blossom base "b" into the blossom of "b".

        Odd vertices on this path become part of an outer blossom.
        They are added to the queue so that their edges will be scanned.
        Their bridge is set to the edge (v, w) which closed the blossom.
        """

        search = self.search
        blossoms = search.blossoms

        u = blossoms.find(v)
        while u != b:
            blossoms.union(b, u)

            # Step to the odd vertex matched to the base of this blossom.
            x = self.vertex_mate[u]
            if x == -1:
                raise MatchingError(
                    f"Base {u} of sub-blossom of {b} is unmatched")
            u = x

            blossoms.union(b, u)
            blossoms.make_representative(b)
            search.queue.append(u)
            search.bridge[u] = (v, w)

            u = blossoms.find(search.parent[u])

    def shrink_blossom(self, v: int, w: int) -> None:
        """Contract the odd cycle closed by edge (v, w) into one blossom.

        Preconditions:
         - "v" and "w" are in different outer blossoms of the same tree.
        """
        b = self.find_common_ancestor(v, w)
        self.shrink_path(b, v, w)
        self.shrink_path(b, w, v)

    def trace_tree_path(self, s: int, t: int) -> list[int]:
        """Trace an alternating path from vertex "s" up to its ancestor "t".

        Vertex "s" must be an outer vertex or an odd vertex that has been
        absorbed into a blossom. Vertex "t" must be an even vertex on the
        alternating path from "s" towards the root of the tree.

        The path starts with the matched edge of "s". Paths through
        contracted blossoms are unrolled via the bridges that closed them.

        This function takes time O(n).

        Returns:
            List of vertices from "s" to "t".
        """

        depth = self.search.depth
        parent = self.search.parent
        bridge = self.search.bridge
        vertex_mate = self.vertex_mate

        path: list[int] = []

        # Use an explicit stack to avoid deep recursion.
        # Each entry "(s, t)" is a request to append the path from "s"
        # to "t". An entry "(-1, p)" is a request to reverse the tail of
        # the path, starting at position "p".
        stack: list[tuple[int, int]] = [(s, t)]

        while stack:
            (s, t) = stack.pop()

            if s == -1:
                path[t:] = path[t:][::-1]

            elif s == t:
                path.append(s)

            elif depth[s] % 2 == 0:
                # Even vertex: continue via the matched edge to the parent.
                y = vertex_mate[s]
                if y == -1:
                    raise MatchingError(
                        f"Even vertex {s} on alternating path is unmatched")
                path.append(s)
                path.append(y)
                stack.append((parent[y], t))

            else:
                # Odd vertex inside a blossom: go around the blossom.
                #
                # Follow the path from "s" down to "x", which is the start
                # of the bridge (x, y). Then cross the bridge and continue
                # from "y" up to "t".
                #
                # The path from "x" up to the mate of "s" must be reversed
                # to fit into the path.
                (x, y) = bridge[s]
                path.append(s)
                stack.append((y, t))
                stack.append((-1, len(path)))
                stack.append((x, vertex_mate[s]))

        return path

    def examine_edge(
            self,
            root: int,
            v: int,
            w: int
            ) -> Optional[list[int]]:
        """Consider the edge between outer vertex "v" and vertex "w".

        Depending on the position of "w", the edge extends the tree,
        closes a blossom or completes an augmenting path.

        Returns:
            Augmenting path if found; otherwise None.
        """

        search = self.search
        bv = search.blossoms.find(v)
        bw = search.blossoms.find(w)

        # Ignore edges that are internal to a blossom.
        if bv == bw:
            return None

        if not search.in_tree(bw):
            if self.vertex_mate[w] == -1:
                # Found an augmenting path from "w" via "v" to the root.
                return [w] + self.trace_tree_path(v, root)
            self.extend_tree(v, w)

        elif search.depth[bw] % 2 == 0:
            # Edge between two outer blossoms of the same tree.
            self.shrink_blossom(v, w)

        # Edges to odd vertices need not be considered. The odd vertex
        # is already attached to the tree via a different edge.
        return None

    def find_augmenting_path(self, root: int) -> Optional[list[int]]:
        """Search an augmenting path that starts in unmatched vertex "root".

        Grow an alternating tree from "root" in breadth-first order,
        contracting blossoms as they are discovered.

        This function takes time O(m * alpha(n)) plus O(n) per blossom.

        Returns:
            Augmenting path as a list of vertices if found; otherwise None.
        """

        assert self.vertex_mate[root] == -1

        search = self.search
        search.start(root)

        adjacency = self.graph.adjacency

        while search.queue:
            v = search.queue.popleft()
            for w in adjacency[v]:
                path = self.examine_edge(root, v, w)
                if path is not None:
                    return path

        # The tree can not be extended any further.
        return None

    #
    # Main loop:
    #

    def run(self) -> None:
        """Compute a maximum-cardinality matching.

        Start from a greedy matching, then search an augmenting path
        from each vertex that is still unmatched.

        If no augmenting path exists from an unmatched vertex, no
        augmenting path from that vertex will appear after augmenting
        elsewhere. Each vertex therefore needs only one search.
        """

        unmatched = self.greedy_matching()

        _logger.debug(
            "Greedy matching leaves %d of %d vertices unmatched",
            len(unmatched),
            self.graph.num_vertex)

        for root in unmatched:

            # The vertex may have been matched by an earlier augmentation.
            if self.vertex_mate[root] != -1:
                continue

            path = self.find_augmenting_path(root)
            if path is not None:
                _logger.debug(
                    "Augmenting path of length %d from vertex %d",
                    len(path) - 1,
                    root)
                self.augment_matching(path)


def verify_matching(ctx: MatchingContext) -> None:
    """Verify that the matching is a valid matching in the graph.

    This function takes time O(n + m).

    Raises:
        MatchingError: If the matching is not valid.
    """

    num_vertex = ctx.graph.num_vertex
    adjacency = ctx.graph.adjacency

    for x in range(num_vertex):
        y = ctx.vertex_mate[x]
        if y == -1:
            continue

        # Check that the matching is symmetric.
        if (y < 0) or (y >= num_vertex) or (ctx.vertex_mate[y] != x):
            raise MatchingError(
                "Verification failed:"
                f" asymmetric match of vertex {x} and {y}")

        # Check that each matched edge actually exists in the graph.
        if y not in adjacency[x]:
            raise MatchingError(
                "Verification failed:"
                f" matched edge ({x}, {y}) is not in the graph")
