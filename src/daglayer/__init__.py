"""
daglayer - Layered layouts for directed acyclic graphs

Computes where to draw each node of a DAG and where each edge should stop so
that an arrowhead fits in front of its target.

Example:
    >>> from daglayer import DagLayoutGenerator
    >>> generator = DagLayoutGenerator(canvas_width=500, canvas_height=500)
    >>> layout = generator.layout(
    ...     [("10", "ten"), ("20", "twenty"), ("30", "thirty")],
    ...     [("10", "20"), ("10", "30")],
    ... )
    >>> [n.id for n in layout.layers[1]]
    ['20', '30']

Debug Mode Example:
    >>> layout = generator.layout(nodes, edges, debug=True)
    >>> print(generator.get_trace().summary())
"""

import logging

from .generator import DagLayoutGenerator, layout_dag
from .geometry import arrowhead_polygon, label_scale, trimmed_endpoint
from .graph import GraphIndex, LayoutError, UnknownNodeError, build_index
from .layout import CyclicGraphError, InDegreeState, compute_layers, layer_of
from .models import (
    DagLayout,
    InputEdge,
    InputNode,
    LabelBox,
    Point,
    PositionedEdge,
    PositionedNode,
)
from .png_renderer import PillowTextMeasurer, PNGRenderer, render_to_png
from .positioning import PositionCalculator, assign_positions
from .rendering import LabelMeasurer, Renderer, toggle_selection
from .svg_renderer import SVGRenderer
from .tracer import LayoutTrace, PipelineStage

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Main API
    "DagLayoutGenerator",
    "layout_dag",
    # Models
    "InputNode",
    "InputEdge",
    "Point",
    "LabelBox",
    "PositionedNode",
    "PositionedEdge",
    "DagLayout",
    # Graph index
    "GraphIndex",
    "build_index",
    # Layering
    "compute_layers",
    "layer_of",
    "InDegreeState",
    # Positioning
    "PositionCalculator",
    "assign_positions",
    # Edge geometry
    "trimmed_endpoint",
    "arrowhead_polygon",
    "label_scale",
    # Errors
    "LayoutError",
    "UnknownNodeError",
    "CyclicGraphError",
    # Rendering
    "LabelMeasurer",
    "Renderer",
    "toggle_selection",
    "SVGRenderer",
    "PNGRenderer",
    "PillowTextMeasurer",
    "render_to_png",
    # Debug/Tracing
    "LayoutTrace",
    "PipelineStage",
]
