"""
Interfaces between the layout core and its rendering collaborators.

The core hands a ``DagLayout`` to a renderer and, optionally, receives back
measured label sizes from a text measurer. Click-selection state belongs to
the caller: it is held as a set of node ids and passed into each render
call, never stored on the layout.
"""

from typing import AbstractSet, Any, FrozenSet, Protocol, Tuple

from .geometry import distance
from .models import DagLayout, LabelBox, Point, PositionedEdge, PositionedNode

BASE_FONT_SIZE = 13


class LabelMeasurer(Protocol):
    """Reports the rendered bounding box of a label."""

    def measure(self, text: str, font_size: float) -> LabelBox:
        ...


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(
        self, layout: DagLayout, selected: AbstractSet[str] = frozenset()
    ) -> Any:
        ...


def toggle_selection(selected: AbstractSet[str], node_id: str) -> FrozenSet[str]:
    """Return a new selection with ``node_id`` added, or removed if present."""
    if node_id in selected:
        return frozenset(selected - {node_id})
    return frozenset(selected | {node_id})


def font_size_for(node: PositionedNode, base: float = BASE_FONT_SIZE) -> float:
    """Label font size, shrunk or grown by the node's measured scale."""
    if node.scale:
        return node.scale * base
    return base


def node_box(
    node: PositionedNode, node_width: float, node_height: float
) -> Tuple[float, float, float, float]:
    """
    Return (x, y, width, height) of a node's box.

    The box starts at the incoming anchor and is centred on it vertically.
    """
    x, y = node.incoming_anchor
    return (x, y - node_height / 2, node_width, node_height)


def label_origin(node: PositionedNode, node_height: float) -> Point:
    """Baseline start of a node's label, two thirds down its box."""
    x, y = node.incoming_anchor
    return Point(x, y - node_height / 2 + node_height / 1.5)


def edge_end(edge: PositionedEdge, clearance: float) -> Point:
    """Where the drawn line of ``edge`` stops."""
    if edge.end_point is None:
        return edge.end_coordinates(clearance)
    return edge.end_point


def has_arrowhead_room(edge: PositionedEdge, clearance: float) -> bool:
    """
    Whether the line stops short enough of its target to fit an arrowhead.

    When the anchors are closer than ``clearance`` the line runs all the way
    to the target anchor and there is no gap left to draw a head into.
    """
    if clearance <= 0:
        return False
    gap = distance(edge_end(edge, clearance), edge.target_node.incoming_anchor)
    return gap >= clearance / 2
