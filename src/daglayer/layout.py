"""
Layer assignment for DAG layout.

Nodes are layered Kahn-style, in batches: every round takes all nodes whose
in-degree is currently zero, places them in the next layer, and then
decrements the in-degree of their successors (once per edge). A node's
layer is the round in which its in-degree first reached zero, i.e. the
earliest layer its predecessors allow. Sinks are not pulled towards the
last layer.

Within a layer, nodes keep the order in which they appear in the input node
list. That order determines the row order of the final picture.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

import networkx as nx

from .graph import GraphIndex, LayoutError
from .models import InputNode

logger = logging.getLogger(__name__)

# In-degree marker for nodes that already have a layer
ASSIGNED = -1

LayerAssignment = Dict[int, List[InputNode]]


class CyclicGraphError(LayoutError):
    """
    Raised when layering leaves nodes without a layer.

    Such nodes never reach in-degree zero: they lie on a cycle or are only
    reachable through one.

    Attributes:
        unassigned: Ids of the nodes that got no layer, in input order.
        cycle: One offending cycle as (source, target) pairs.
        partial: The layers that were assigned before layering stalled.
    """

    def __init__(
        self,
        unassigned: List[str],
        cycle: List[Tuple[str, str]],
        partial: LayerAssignment,
    ):
        self.unassigned = unassigned
        self.cycle = cycle
        self.partial = partial
        message = (
            f"Graph is not acyclic; {len(unassigned)} node(s) unplaced: "
            + ", ".join(unassigned)
        )
        if cycle:
            path = " -> ".join([cycle[0][0]] + [target for _, target in cycle])
            message += f" (cycle: {path})"
        super().__init__(message)


@dataclass(frozen=True)
class InDegreeState:
    """
    Remaining in-degree of every node between two layering rounds.

    A state is never modified; ``advance`` returns the state for the next
    round. Degrees are kept in node input order.
    """

    degrees: Mapping[str, int]

    @classmethod
    def initial(
        cls, nodes: Sequence[InputNode], graph: GraphIndex
    ) -> "InDegreeState":
        """
        Seed every node of ``nodes`` at 0, in that order, then add one per
        edge between two of them.
        """
        degrees = {node.id: 0 for node in nodes}
        for node in nodes:
            for successor_id in graph.successors_of(node.id):
                if successor_id in degrees:
                    degrees[successor_id] += 1
        return cls(degrees)

    def ready(self) -> List[str]:
        """Unassigned nodes with no remaining dependencies, in input order."""
        return [node_id for node_id, degree in self.degrees.items() if degree == 0]

    def unassigned(self) -> List[str]:
        return [
            node_id for node_id, degree in self.degrees.items() if degree != ASSIGNED
        ]

    def advance(self, selected: Sequence[str], graph: GraphIndex) -> "InDegreeState":
        """
        Mark ``selected`` as placed and release their successors.

        Each outgoing edge decrements its target once, so parallel edges
        decrement several times.
        """
        degrees = dict(self.degrees)
        for node_id in selected:
            degrees[node_id] = ASSIGNED
        for node_id in selected:
            for successor_id in graph.successors_of(node_id):
                if successor_id in degrees:
                    degrees[successor_id] -= 1
        return InDegreeState(degrees)


def compute_layers(
    nodes: Sequence[InputNode], graph: GraphIndex, strict: bool = True
) -> LayerAssignment:
    """
    Assign every node to a layer.

    Args:
        nodes: The nodes to layer; their order fixes the order within a
            layer. Edges leading outside this list are ignored.
        graph: Adjacency containing these nodes and their edges.
        strict: If True, raise when some nodes cannot be placed. If False,
            return the layers that could be assigned and log a warning.

    Returns:
        Mapping from layer index (0 = sources) to the nodes in that layer.

    Raises:
        CyclicGraphError: If ``strict`` and any node was left unassigned.
    """
    state = InDegreeState.initial(nodes, graph)
    layers: LayerAssignment = {}

    for layer in range(len(nodes)):
        selected = state.ready()
        if not selected:
            break
        logger.debug("layer %d: %s", layer, selected)
        layers[layer] = [graph.node_by_id(node_id) for node_id in selected]
        state = state.advance(selected, graph)

    unassigned = state.unassigned()
    if unassigned:
        cycle = _find_cycle(graph, unassigned)
        if strict:
            raise CyclicGraphError(unassigned, cycle, layers)
        logger.warning(
            "Dropping %d node(s) that never reached in-degree zero: %s",
            len(unassigned),
            ", ".join(unassigned),
        )

    return layers


def layer_of(layers: LayerAssignment) -> Dict[str, int]:
    """Invert a layer assignment into a node id -> layer index mapping."""
    return {node.id: index for index, members in layers.items() for node in members}


def _find_cycle(graph: GraphIndex, unassigned: List[str]) -> List[Tuple[str, str]]:
    """
    Find one cycle among the unassigned nodes.

    Every unassigned node still has a predecessor that is itself unassigned,
    so their induced sub-graph always contains a cycle.
    """
    subgraph = nx.DiGraph(graph.to_networkx().subgraph(unassigned))
    try:
        return [(source, target) for source, target in nx.find_cycle(subgraph)]
    except nx.NetworkXNoCycle:
        return []
