"""
Representation of undirected graphs for the matching algorithm.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional


class InvalidGraphError(ValueError):
    """Raised when the input does not describe a valid simple
    undirected graph."""


class Graph:
    """Undirected graph represented as adjacency lists.

    Vertices are indexed by consecutive, non-negative integers, such that
    the first vertex has index 0 and the last vertex has index (n-1).

    These data remain unchanged after construction.
    """

    def __init__(self, adjacency: Sequence[Sequence[int]]) -> None:
        """Initialize the graph from adjacency lists.

        "adjacency[x]" is the list of neighbours of vertex "x".
        The adjacency lists must be symmetric: vertex "y" appears in
        the list of vertex "x" if and only if vertex "x" appears in
        the list of vertex "y".
        No vertex may be adjacent to itself.
        No vertex may appear more than once in the same list.

        The order of each adjacency list is preserved. The matching
        algorithm scans neighbours in this order.

        This function takes time O(n + m * log(m)).

        Raises:
            InvalidGraphError: If the input does not satisfy the constraints.
            TypeError: If the input contains invalid data types.
        """

        _check_adjacency_types(adjacency)

        # num_vertex = the number of vertices.
        self.num_vertex: int = len(adjacency)

        # "adjacency[x]" is a tuple of the vertex indices of the
        # neighbours of vertex "x".
        self.adjacency: tuple[tuple[int, ...], ...] = tuple(
            tuple(neighbors) for neighbors in adjacency)

        _check_adjacency_graph(self.adjacency)

    @classmethod
    def from_edges(
            cls,
            edges: Sequence[tuple[int, int]],
            num_vertex: Optional[int] = None
            ) -> Graph:
        """Construct a graph from a list of edges.

        Each edge is specified as a tuple "(x, y)" of its two vertices.
        There may be at most one edge between any pair of vertices.
        No vertex may have an edge to itself.

        Neighbours are added to the adjacency lists in the order of
        the edge list.

        Parameters:
            edges: List of edges, each edge specified as a tuple "(x, y)"
                where "x" and "y" are vertex indices.
            num_vertex: Optional number of vertices. If not specified,
                the number of vertices is one more than the highest vertex
                index in the edge list. Specify a larger number to add
                isolated vertices.

        Raises:
            InvalidGraphError: If the input does not satisfy the constraints.
            TypeError: If the input contains invalid data types.
        """

        _check_edge_types(edges)

        if edges:
            min_num_vertex = 1 + max(max(x, y) for (x, y) in edges)
        else:
            min_num_vertex = 0

        if num_vertex is None:
            num_vertex = min_num_vertex
        elif (not isinstance(num_vertex, int)) or isinstance(num_vertex, bool):
            raise TypeError('"num_vertex" must be an integer')
        elif num_vertex < min_num_vertex:
            raise InvalidGraphError(
                f"Edge list refers to vertex {min_num_vertex - 1}"
                f" but graph has only {num_vertex} vertices")

        adjacency: list[list[int]] = [[] for _x in range(num_vertex)]
        for (x, y) in edges:
            adjacency[x].append(y)
            adjacency[y].append(x)

        return cls(adjacency)

    def neighbors(self, x: int) -> tuple[int, ...]:
        """Return the neighbours of vertex "x" in adjacency list order."""
        return self.adjacency[x]

    def edges(self) -> list[tuple[int, int]]:
        """Return a list of all edges.

        Each edge appears once as a tuple "(x, y)" with "x < y".
        """
        return [(x, y)
                for x in range(self.num_vertex)
                for y in self.adjacency[x]
                if x < y]


def _is_vertex_index(x: object) -> bool:
    """Return True if "x" has a valid data type for a vertex index."""
    return isinstance(x, int) and not isinstance(x, bool)


def _check_adjacency_types(adjacency: Sequence[Sequence[int]]) -> None:
    """Check that the adjacency lists consist of valid data types.

    This function takes time O(n + m).

    Raises:
        TypeError: If the input contains invalid data types.
    """

    if not isinstance(adjacency, (list, tuple)):
        raise TypeError('"adjacency" must be a list')

    for neighbors in adjacency:
        if not isinstance(neighbors, (list, tuple)):
            raise TypeError("Each adjacency list must be a list")
        for y in neighbors:
            if not _is_vertex_index(y):
                raise TypeError("Vertex indices must be integers")


def _check_adjacency_graph(adjacency: Sequence[Sequence[int]]) -> None:
    """Check that the adjacency lists describe a valid graph,
    without self-edges, without multi-edges and with symmetric
    adjacency.

    This function takes time O(n + m * log(m)).

    Raises:
        InvalidGraphError: If the input does not satisfy the constraints.
    """

    num_vertex = len(adjacency)

    # Check that all neighbours are valid vertices other than the vertex
    # itself.
    for (x, neighbors) in enumerate(adjacency):
        for y in neighbors:
            if (y < 0) or (y >= num_vertex):
                raise InvalidGraphError(
                    f"Vertex {x} has neighbor {y} outside the range"
                    f" of {num_vertex} vertices")
            if y == x:
                raise InvalidGraphError(
                    f"Self-edge on vertex {x} is not supported")

    # Sorting provides guaranteed O(m * log(m)) run time.
    arcs = [(x, y)
            for (x, neighbors) in enumerate(adjacency)
            for y in neighbors]
    arcs.sort()

    # Check that no vertex is listed twice as neighbour of the same vertex.
    for i in range(len(arcs) - 1):
        if arcs[i] == arcs[i+1]:
            (x, y) = arcs[i]
            raise InvalidGraphError(f"Duplicate edge {(min(x, y), max(x, y))}")

    # Check that the adjacency is symmetric.
    # The list of reversed arcs must be identical to the list of arcs.
    reverse_arcs = [(y, x) for (x, y) in arcs]
    reverse_arcs.sort()

    for (a, b) in zip(arcs, reverse_arcs):
        if a != b:
            # The smaller of the two arcs is the one without a reverse.
            (x, y) = a if a < b else (b[1], b[0])
            raise InvalidGraphError(
                f"Vertex {y} is a neighbor of vertex {x}"
                f" but not vice versa")


def _check_edge_types(edges: Sequence[tuple[int, int]]) -> None:
    """Check that the edge list consists of valid data types and
    valid numerical ranges.

    This function takes time O(m).

    Raises:
        InvalidGraphError: If an edge has a negative vertex index.
        TypeError: If the input contains invalid data types.
    """

    if not isinstance(edges, (list, tuple)):
        raise TypeError('"edges" must be a list')

    for e in edges:
        if (not isinstance(e, tuple)) or (len(e) != 2):
            raise TypeError("Each edge must be specified as a 2-tuple")

        (x, y) = e

        if (not _is_vertex_index(x)) or (not _is_vertex_index(y)):
            raise TypeError("Edge endpoints must be integers")

        if (x < 0) or (y < 0):
            raise InvalidGraphError(
                "Edge endpoints must be non-negative integers")
