"""
Position calculation for DAG layout.

This module turns a layer assignment into canvas coordinates. Layers run
left to right and nodes within a layer run top to bottom:

- Layer ``i`` of ``L`` gets x = ``canvas_width / (L + 1) * (i + 1)``, which
  leaves equal margins on both canvas edges.
- Row ``j`` of a layer holding ``k`` nodes gets
  y = ``canvas_height / (k + 1) * (j + 1)``.

Each node receives an incoming anchor at (x, y) and an outgoing anchor at
(x + node_width, y).
"""

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

from .graph import UnknownNodeError
from .layout import LayerAssignment
from .models import InputEdge, Point, PositionedEdge, PositionedNode

logger = logging.getLogger(__name__)


class PositionCalculator:
    """
    Calculates canvas positions for laid-out nodes.

    Attributes:
        canvas_height: Height of the drawing area.
        canvas_width: Width of the drawing area.
        node_width: Rendered width of a node box; the distance between its
            incoming and outgoing anchors.
    """

    def __init__(self, canvas_height: float, canvas_width: float, node_width: float):
        """
        Initialize the position calculator.

        Raises:
            ValueError: If any dimension is not positive.
        """
        for name, value in (
            ("canvas_height", canvas_height),
            ("canvas_width", canvas_width),
            ("node_width", node_width),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        self.canvas_height = canvas_height
        self.canvas_width = canvas_width
        self.node_width = node_width

    def assign_positions(
        self, layers: LayerAssignment
    ) -> Tuple[List[PositionedNode], Dict[str, PositionedNode]]:
        """
        Place every node of ``layers`` on the canvas.

        Args:
            layers: Layer index -> ordered nodes, as produced by layering.

        Returns:
            The positioned nodes ordered by layer then row, and a lookup
            from node id to positioned node.
        """
        layer_distance = self.canvas_width / (len(layers) + 1)
        positioned: List[PositionedNode] = []

        for layer, nodes in sorted(layers.items()):
            x = layer_distance * (layer + 1)
            row_distance = self.canvas_height / (len(nodes) + 1)
            for row, node in enumerate(nodes):
                y = row_distance * (row + 1)
                positioned.append(
                    PositionedNode(
                        id=node.id,
                        display_name=node.display_name,
                        layer_number=layer,
                        incoming_anchor=Point(x, y),
                        outgoing_anchor=Point(x + self.node_width, y),
                    )
                )

        node_index = {node.id: node for node in positioned}
        logger.debug("Positioned %d nodes in %d layers", len(positioned), len(layers))
        return positioned, node_index

    def get_edges_as_positioned_pairs(
        self,
        edges: Sequence[InputEdge],
        node_index: Mapping[str, PositionedNode],
    ) -> List[PositionedEdge]:
        """
        Join each edge against positioned nodes.

        Args:
            edges: Edges to join.
            node_index: Id -> positioned node lookup returned by
                ``assign_positions``.

        Raises:
            UnknownNodeError: If an edge endpoint has no position.
        """
        return [
            PositionedEdge(
                source_node=_lookup(node_index, edge.source_id),
                target_node=_lookup(node_index, edge.target_id),
            )
            for edge in edges
        ]


def _lookup(node_index: Mapping[str, PositionedNode], node_id: str) -> PositionedNode:
    try:
        return node_index[node_id]
    except KeyError:
        raise UnknownNodeError(node_id) from None


def assign_positions(
    layers: LayerAssignment,
    canvas_height: float,
    canvas_width: float,
    node_width: float,
) -> Tuple[List[PositionedNode], Dict[str, PositionedNode]]:
    """Place the nodes of ``layers`` on a ``canvas_width`` x ``canvas_height`` canvas."""
    calculator = PositionCalculator(canvas_height, canvas_width, node_width)
    return calculator.assign_positions(layers)
