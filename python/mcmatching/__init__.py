"""
Algorithm for finding a maximum cardinality matching in general graphs.
"""

__all__ = ["Graph",
           "Matching",
           "maximum_cardinality_matching",
           "InvalidGraphError",
           "MatchingError"]

from .algorithm import (Matching,
                        maximum_cardinality_matching,
                        MatchingError)
from .graph import Graph, InvalidGraphError
