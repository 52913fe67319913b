"""
Graph module for DAG layout.

Builds the adjacency and in-degree views of a caller-supplied node/edge list.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

import networkx as nx

from .models import InputEdge, InputNode

logger = logging.getLogger(__name__)


class LayoutError(Exception):
    """Base class for errors raised while computing a layout."""


class UnknownNodeError(LayoutError, KeyError):
    """Raised when a node id does not belong to the node list."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Unknown node id: {node_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class GraphIndex:
    """
    Read-only adjacency view of a directed graph.

    Successors are kept in edge input order for each source, and an edge
    contributes one entry per occurrence, so parallel edges are preserved.
    """

    def __init__(self, nodes: Sequence[InputNode], edges: Sequence[InputEdge]):
        self.nodes: List[InputNode] = list(nodes)
        self.edges: List[InputEdge] = list(edges)
        self._id_to_node: Dict[str, InputNode] = {}
        self._successors: Dict[str, List[str]] = defaultdict(list)

        for node in self.nodes:
            self._id_to_node[node.id] = node

        for edge in self.edges:
            # Both endpoints must resolve before the edge is indexed
            self.node_by_id(edge.source_id)
            self.node_by_id(edge.target_id)
            self._successors[edge.source_id].append(edge.target_id)

        logger.debug(
            "Indexed %d nodes and %d edges", len(self.nodes), len(self.edges)
        )

    @classmethod
    def build(
        cls, nodes: Sequence[InputNode], edges: Sequence[InputEdge]
    ) -> "GraphIndex":
        """Build an index from node and edge lists."""
        return cls(nodes, edges)

    def successors_of(self, node_id: str) -> List[str]:
        """Direct successors of a node; empty if it has no outgoing edges."""
        return list(self._successors.get(node_id, []))

    def node_by_id(self, node_id: str) -> InputNode:
        """Look up a node, raising UnknownNodeError if it was never registered."""
        try:
            return self._id_to_node[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def in_degrees(self) -> Dict[str, int]:
        """
        In-degree of every node, in node input order.

        Every node is seeded at 0; each edge adds one to its target.
        """
        degrees = {node.id: 0 for node in self.nodes}
        for targets in self._successors.values():
            for target_id in targets:
                degrees[target_id] += 1
        return degrees

    def to_networkx(self) -> nx.MultiDiGraph:
        """Return the graph as a networkx MultiDiGraph (parallel edges kept)."""
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, display_name=node.display_name)
        graph.add_edges_from((e.source_id, e.target_id) for e in self.edges)
        return graph

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._id_to_node

    def __len__(self) -> int:
        return len(self.nodes)


def build_index(
    nodes: Sequence[InputNode], edges: Sequence[InputEdge]
) -> GraphIndex:
    """
    Create a GraphIndex from node and edge lists.

    Args:
        nodes: Nodes with unique ids
        edges: Edges whose endpoints reference those ids

    Returns:
        GraphIndex object

    Raises:
        UnknownNodeError: If an edge references an id not in ``nodes``
    """
    return GraphIndex.build(nodes, edges)
