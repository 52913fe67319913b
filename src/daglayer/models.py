"""
Data models for DAG layout.

This module contains the dataclasses passed between the layout stages. Each
stage produces its own structures and hands them to the next one; none of
them is shared as mutable state across stages.

Classes:
    InputNode: A node as supplied by the caller.
    InputEdge: A directed edge between two caller-supplied nodes.
    PositionedNode: A node placed on the canvas with its two anchors.
    PositionedEdge: An edge joined against its positioned endpoints.
    DagLayout: The complete result of one layout computation.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .geometry import DEFAULT_CLEARANCE, LabelBox, Point, trimmed_endpoint

__all__ = [
    "DagLayout",
    "InputEdge",
    "InputNode",
    "LabelBox",
    "Point",
    "PositionedEdge",
    "PositionedNode",
]


@dataclass(frozen=True)
class InputNode:
    """
    A node supplied by the caller.

    Attributes:
        id: Identity of the node, unique across the input set.
        display_name: Label drawn inside the node's box.
    """

    id: str
    display_name: str


@dataclass(frozen=True)
class InputEdge:
    """
    A directed edge. Multiple edges between the same pair are distinct.

    Attributes:
        source_id: Id of the node the edge leaves.
        target_id: Id of the node the edge enters.
    """

    source_id: str
    target_id: str


@dataclass
class PositionedNode:
    """
    A node placed on the canvas.

    The node is modelled as a horizontal rectangle: inbound edges terminate
    at its left edge (``incoming_anchor``) and outbound edges leave from its
    right edge (``outgoing_anchor``).

    Attributes:
        id: Node id.
        display_name: Node label.
        layer_number: Layer the node was assigned to.
        incoming_anchor: Where inbound edges terminate.
        outgoing_anchor: Where outbound edges originate.
        scale: Optional label scale factor, attached after text measurement.
    """

    id: str
    display_name: str
    layer_number: int
    incoming_anchor: Point
    outgoing_anchor: Point
    scale: Optional[float] = None


@dataclass
class PositionedEdge:
    """
    An edge joined against its positioned source and target nodes.

    ``end_point`` is filled in by the edge geometry stage; until then it is
    ``None``.
    """

    source_node: PositionedNode
    target_node: PositionedNode
    end_point: Optional[Point] = None

    @property
    def edge_id(self) -> str:
        """Stable rendering key for this edge."""
        return f"edge_{self.source_node.id}_{self.target_node.id}"

    @property
    def start_point(self) -> Point:
        return self.source_node.outgoing_anchor

    def end_coordinates(self, clearance: float = DEFAULT_CLEARANCE) -> Point:
        """Trimmed target-side endpoint, ``clearance`` short of the target."""
        return trimmed_endpoint(
            self.source_node.outgoing_anchor,
            self.target_node.incoming_anchor,
            clearance,
        )


@dataclass
class DagLayout:
    """Result of a complete layout computation."""

    layers: Dict[int, List[InputNode]] = field(default_factory=dict)
    nodes: List[PositionedNode] = field(default_factory=list)
    node_index: Dict[str, PositionedNode] = field(default_factory=dict)
    edges: List[PositionedEdge] = field(default_factory=list)
    canvas_width: float = 0
    canvas_height: float = 0
    node_width: float = 0
    node_height: float = 0
    clearance: float = DEFAULT_CLEARANCE

    def get_node(self, node_id: str) -> PositionedNode:
        return self.node_index[node_id]
