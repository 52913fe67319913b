"""SVG renderer: renders a DagLayout to an SVG document string."""

from pathlib import Path
from typing import AbstractSet, List

from .models import DagLayout, PositionedEdge, PositionedNode
from .rendering import (
    edge_end,
    font_size_for,
    has_arrowhead_room,
    label_origin,
    node_box,
)

# Arrowhead marker, in stroke-width units; the tip is 3 units past refX
MARKER_PATH = "M2,4 L2,8 L5,6 Z"
MARKER_SIZE = 13
MARKER_REF_X = 2
MARKER_REF_Y = 6


def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class SVGRenderer:
    """Renders a layout as SVG: boxes, labels, and trimmed arrowed lines."""

    def __init__(
        self,
        background: str = "pink",
        node_fill: str = "blue",
        node_opacity: float = 0.3,
        selected_fill: str = "orange",
        text_color: str = "black",
        line_color: str = "black",
        stroke_width: float = 1.5,
    ):
        self.background = background
        self.node_fill = node_fill
        self.node_opacity = node_opacity
        self.selected_fill = selected_fill
        self.text_color = text_color
        self.line_color = line_color
        self.stroke_width = stroke_width

    def render(
        self, layout: DagLayout, selected: AbstractSet[str] = frozenset()
    ) -> str:
        """
        Render ``layout`` to an SVG string.

        Args:
            layout: The computed layout.
            selected: Ids of nodes to draw highlighted.
        """
        parts: List[str] = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{_num(layout.canvas_width)}" height="{_num(layout.canvas_height)}" '
            f'style="background-color: {self.background}">'
        ]

        parts.append("<defs>")
        seen = set()
        for edge in layout.edges:
            if edge.edge_id not in seen:
                seen.add(edge.edge_id)
                parts.append(self._render_marker(edge))
        parts.append("</defs>")

        for node in layout.nodes:
            parts.append(self._render_node(layout, node, node.id in selected))

        for edge in layout.edges:
            parts.append(self._render_edge(layout, edge))

        parts.append("</svg>")
        return "\n".join(parts)

    def save(
        self,
        layout: DagLayout,
        filename: str,
        selected: AbstractSet[str] = frozenset(),
    ) -> str:
        """Render ``layout`` and write it to ``filename``."""
        Path(filename).write_text(self.render(layout, selected), encoding="utf-8")
        return filename

    def _render_marker(self, edge: PositionedEdge) -> str:
        return (
            f'<marker id="marker_{_escape(edge.edge_id)}" '
            f'markerHeight="{MARKER_SIZE}" markerWidth="{MARKER_SIZE}" '
            f'markerUnits="strokeWidth" orient="auto" '
            f'refX="{MARKER_REF_X}" refY="{MARKER_REF_Y}">'
            f'<path d="{MARKER_PATH}" fill="{self.line_color}"/></marker>'
        )

    def _render_node(
        self, layout: DagLayout, node: PositionedNode, is_selected: bool
    ) -> str:
        x, y, w, h = node_box(node, layout.node_width, layout.node_height)
        fill = self.selected_fill if is_selected else self.node_fill
        tx, ty = label_origin(node, layout.node_height)
        node_id = _escape(node.id)
        return (
            f'<g class="node" data-node-id="{node_id}" '
            f'data-selected="{"true" if is_selected else "false"}">'
            f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(w)}" height="{_num(h)}" '
            f'fill="{fill}" opacity="{self.node_opacity}"/>'
            f'<text class="nodes" x="{_num(tx)}" y="{_num(ty)}" '
            f'font-size="{_num(font_size_for(node))}px" fill="{self.text_color}">'
            f"{_escape(node.display_name)}</text></g>"
        )

    def _render_edge(self, layout: DagLayout, edge: PositionedEdge) -> str:
        x1, y1 = edge.start_point
        x2, y2 = edge_end(edge, layout.clearance)
        marker = ""
        if has_arrowhead_room(edge, layout.clearance):
            marker = f' marker-end="url(#marker_{_escape(edge.edge_id)})"'
        return (
            f'<line id="{_escape(edge.edge_id)}" '
            f'x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
            f'stroke="{self.line_color}" stroke-width="{self.stroke_width}" '
            f'stroke-linecap="round"{marker}/>'
        )
