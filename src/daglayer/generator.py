"""
Main DAG layout generator module.

Combines indexing, layering, positioning and edge geometry to produce
everything a renderer needs to draw a DAG.
"""

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from .geometry import DEFAULT_CLEARANCE, label_scale
from .graph import GraphIndex, UnknownNodeError
from .layout import compute_layers
from .models import DagLayout, InputEdge, InputNode, LabelBox
from .positioning import PositionCalculator
from .rendering import BASE_FONT_SIZE, LabelMeasurer
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)


class DagLayoutGenerator:
    """
    Compute a layered left-to-right layout for a DAG.

    Example:
        >>> generator = DagLayoutGenerator(canvas_width=500, canvas_height=500)
        >>> layout = generator.layout(
        ...     [{"id": "10", "displayName": "ten"}, {"id": "20", "displayName": "twenty"}],
        ...     [{"sourceId": "10", "targetId": "20"}],
        ... )
        >>> layout.get_node("20").layer_number
        1
    """

    def __init__(
        self,
        canvas_width: float = 500,
        canvas_height: float = 500,
        node_width: float = 40,
        node_height: float = 20,
        clearance: float = DEFAULT_CLEARANCE,
        strict: bool = True,
    ):
        """
        Initialize the layout generator.

        Args:
            canvas_width: Width of the drawing area
            canvas_height: Height of the drawing area
            node_width: Rendered width of a node box
            node_height: Rendered height of a node box
            clearance: Gap left before each target node for the arrowhead
            strict: Raise CyclicGraphError when nodes cannot be layered,
                instead of dropping them
        """
        if node_height <= 0:
            raise ValueError(f"node_height must be positive, got {node_height}")
        if clearance < 0:
            raise ValueError(f"clearance must be non-negative, got {clearance}")

        self.position_calculator = PositionCalculator(
            canvas_height=canvas_height,
            canvas_width=canvas_width,
            node_width=node_width,
        )
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.node_width = node_width
        self.node_height = node_height
        self.clearance = clearance
        self.strict = strict
        self._trace: Optional[LayoutTrace] = None

    def layout(
        self, nodes: Iterable[Any], edges: Iterable[Any], debug: bool = False
    ) -> DagLayout:
        """
        Lay out a DAG.

        Args:
            nodes: InputNode objects, ``{"id", "displayName"}`` mappings or
                ``(id, display_name)`` pairs
            edges: InputEdge objects, ``{"sourceId", "targetId"}`` mappings
                or ``(source_id, target_id)`` pairs
            debug: Record a LayoutTrace, retrievable with get_trace()

        Returns:
            DagLayout with layers, positioned nodes and trimmed edges

        Raises:
            UnknownNodeError: If an edge references an unknown node
            CyclicGraphError: If ``strict`` and some nodes cannot be layered
        """
        input_nodes = [to_input_node(node) for node in nodes]
        input_edges = [to_input_edge(edge) for edge in edges]

        trace = LayoutTrace(node_count=len(input_nodes), edge_count=len(input_edges))
        self._trace = trace if debug else None

        graph = GraphIndex.build(input_nodes, input_edges)
        if debug:
            trace.add_stage(
                "index",
                {node.id: graph.successors_of(node.id) for node in input_nodes},
            )

        layers = compute_layers(input_nodes, graph, strict=self.strict)
        if debug:
            trace.add_stage(
                "layers",
                {layer: [n.id for n in members] for layer, members in layers.items()},
            )

        positioned, node_index = self.position_calculator.assign_positions(layers)
        if debug:
            trace.add_stage(
                "positions",
                {
                    n.id: (tuple(n.incoming_anchor), tuple(n.outgoing_anchor))
                    for n in positioned
                },
            )

        if len(node_index) < len(input_nodes):
            # Only reachable when not strict: edges of dropped nodes go too
            input_edges = [
                e
                for e in input_edges
                if e.source_id in node_index and e.target_id in node_index
            ]

        pairs = self.position_calculator.get_edges_as_positioned_pairs(
            input_edges, node_index
        )
        edges_out = [
            replace(edge, end_point=edge.end_coordinates(self.clearance))
            for edge in pairs
        ]
        if debug:
            trace.add_stage(
                "edges",
                {
                    e.edge_id: (tuple(e.start_point), tuple(e.end_point))
                    for e in edges_out
                },
            )

        logger.debug(
            "Laid out %d nodes in %d layers with %d edges",
            len(positioned),
            len(layers),
            len(edges_out),
        )

        return DagLayout(
            layers=layers,
            nodes=list(positioned),
            node_index=dict(node_index),
            edges=edges_out,
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            node_width=self.node_width,
            node_height=self.node_height,
            clearance=self.clearance,
        )

    def apply_label_measurements(
        self, layout: DagLayout, measurements: Mapping[str, LabelBox]
    ) -> DagLayout:
        """
        Attach label scale factors to positioned nodes.

        Only ``PositionedNode.scale`` is touched; layers and positions are
        left as they are.

        Raises:
            UnknownNodeError: If a measurement names a node not in the layout
        """
        for node_id, box in measurements.items():
            node = layout.node_index.get(node_id)
            if node is None:
                raise UnknownNodeError(node_id)
            node.scale = label_scale(layout.node_width, layout.node_height, box)
        return layout

    def measure_labels(
        self,
        layout: DagLayout,
        measurer: LabelMeasurer,
        font_size: float = BASE_FONT_SIZE,
    ) -> DagLayout:
        """Measure every node label with ``measurer`` and apply the scales."""
        measurements = {
            node.id: measurer.measure(node.display_name, font_size)
            for node in layout.nodes
        }
        return self.apply_label_measurements(layout, measurements)

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last ``layout(..., debug=True)`` call, else None."""
        return self._trace


def to_input_node(item: Any) -> InputNode:
    """Accept an InputNode, an ``{"id", "displayName"}`` mapping or a pair."""
    if isinstance(item, InputNode):
        return item
    if isinstance(item, Mapping):
        node_id = str(item["id"])
        name = item.get("displayName", item.get("display_name", node_id))
        return InputNode(node_id, str(name))
    if isinstance(item, (tuple, list)) and len(item) == 2:
        return InputNode(str(item[0]), str(item[1]))
    raise TypeError(f"Cannot interpret {item!r} as a node")


def to_input_edge(item: Any) -> InputEdge:
    """Accept an InputEdge, a ``{"sourceId", "targetId"}`` mapping or a pair."""
    if isinstance(item, InputEdge):
        return item
    if isinstance(item, Mapping):
        source = item.get("sourceId", item.get("source_id"))
        target = item.get("targetId", item.get("target_id"))
        if source is None or target is None:
            raise TypeError(f"Edge mapping needs sourceId and targetId: {item!r}")
        return InputEdge(str(source), str(target))
    if isinstance(item, (tuple, list)) and len(item) == 2:
        return InputEdge(str(item[0]), str(item[1]))
    raise TypeError(f"Cannot interpret {item!r} as an edge")


def layout_dag(
    nodes: Iterable[Any], edges: Iterable[Any], **kwargs: Any
) -> DagLayout:
    """Lay out a DAG with a one-off DagLayoutGenerator built from ``kwargs``."""
    return DagLayoutGenerator(**kwargs).layout(nodes, edges)
