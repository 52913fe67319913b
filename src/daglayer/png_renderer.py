"""
PNG Renderer module for DAG layouts.

Renders a DagLayout as a PNG image with Pillow, and measures label sizes
with Pillow fonts so that labels can be scaled to fit their boxes.
"""

import logging
import os
from typing import AbstractSet, Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .geometry import arrowhead_polygon
from .models import DagLayout, LabelBox, PositionedEdge, PositionedNode
from .rendering import edge_end, font_size_for, has_arrowhead_room, node_box

logger = logging.getLogger(__name__)

FONT_OPTIONS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "C:/Windows/Fonts/arial.ttf",
    "DejaVuSans.ttf",
]


def load_font(
    font_size: float, font_path: Optional[str] = None
) -> ImageFont.ImageFont:
    """
    Load a font for label rendering and measurement.

    Tries the following in order:
    1. ``font_path`` if provided and present
    2. Common system fonts
    3. Pillow's default font
    """
    size = max(1, int(round(font_size)))

    candidates = []
    if font_path and os.path.exists(font_path):
        candidates.append(font_path)
    candidates.extend(FONT_OPTIONS)

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Older Pillow versions don't support size parameter
        return ImageFont.load_default()


class PillowTextMeasurer:
    """Measures label bounding boxes with a Pillow font."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.ImageFont] = {}

    def _font(self, font_size: float) -> ImageFont.ImageFont:
        key = max(1, int(round(font_size)))
        if key not in self._fonts:
            self._fonts[key] = load_font(key, self.font_path)
        return self._fonts[key]

    def measure(self, text: str, font_size: float) -> LabelBox:
        """Return the rendered width and height of ``text``."""
        if not text:
            return LabelBox(0, 0)
        left, top, right, bottom = self._font(font_size).getbbox(text)
        return LabelBox(right - left, bottom - top)


class PNGRenderer:
    """Renders DAG layouts as PNG images."""

    def __init__(
        self,
        scale: int = 2,  # For high-resolution output
        font_path: Optional[str] = None,
        line_width: float = 1.5,
    ):
        self.scale = scale
        self.font_path = font_path
        self.line_width = line_width

        # Colors
        self.bg_color = (255, 192, 203, 255)
        self.node_fill = (0, 0, 255, 77)
        self.selected_fill = (255, 165, 0, 128)
        self.text_color = (0, 0, 0, 255)
        self.line_color = (0, 0, 0, 255)

        self._fonts: Dict[int, ImageFont.ImageFont] = {}

    def _get_font(self, font_size: float) -> ImageFont.ImageFont:
        key = max(1, int(round(font_size * self.scale)))
        if key not in self._fonts:
            self._fonts[key] = load_font(key, self.font_path)
        return self._fonts[key]

    def _scaled(self, point: Tuple[float, float]) -> Tuple[float, float]:
        return (point[0] * self.scale, point[1] * self.scale)

    def render(
        self, layout: DagLayout, selected: AbstractSet[str] = frozenset()
    ) -> Image.Image:
        """Draw ``layout`` into a new RGBA image."""
        width = max(1, int(round(layout.canvas_width * self.scale)))
        height = max(1, int(round(layout.canvas_height * self.scale)))

        img = Image.new("RGBA", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img, "RGBA")

        for node in layout.nodes:
            self._draw_node(draw, layout, node, node.id in selected)

        for edge in layout.edges:
            self._draw_edge(draw, layout, edge)

        return img

    def save(
        self,
        layout: DagLayout,
        output_path: str,
        selected: AbstractSet[str] = frozenset(),
    ) -> str:
        """
        Render ``layout`` and save it as a PNG.

        Returns:
            ``output_path``
        """
        img = self.render(layout, selected)
        img.convert("RGB").save(output_path, "PNG")
        logger.debug("Wrote %dx%d PNG to %s", img.width, img.height, output_path)
        return output_path

    def _draw_node(
        self,
        draw: ImageDraw.ImageDraw,
        layout: DagLayout,
        node: PositionedNode,
        is_selected: bool,
    ):
        x, y, w, h = node_box(node, layout.node_width, layout.node_height)
        s = self.scale
        draw.rectangle(
            [x * s, y * s, (x + w) * s, (y + h) * s],
            fill=self.selected_fill if is_selected else self.node_fill,
        )

        if not node.display_name:
            return

        # Left-aligned, vertically centred in the box
        font = self._get_font(font_size_for(node))
        left, top, right, bottom = draw.textbbox((0, 0), node.display_name, font=font)
        text_y = y * s + (h * s - (bottom - top)) / 2 - top
        draw.text((x * s - left, text_y), node.display_name, fill=self.text_color, font=font)

    def _draw_edge(
        self, draw: ImageDraw.ImageDraw, layout: DagLayout, edge: PositionedEdge
    ):
        start = edge.start_point
        end = edge_end(edge, layout.clearance)

        draw.line(
            [self._scaled(start), self._scaled(end)],
            fill=self.line_color,
            width=max(1, int(round(self.line_width * self.scale))),
        )

        if not has_arrowhead_room(edge, layout.clearance):
            return

        # Head fills the clearance gap, tip on the target anchor
        head = arrowhead_polygon(
            start,
            end,
            length=layout.clearance,
            half_width=layout.clearance * 2 / 3,
        )
        draw.polygon([self._scaled(p) for p in head], fill=self.line_color)


def render_to_png(
    layout: DagLayout,
    output_path: str,
    selected: AbstractSet[str] = frozenset(),
    **kwargs,
) -> str:
    """Render ``layout`` to ``output_path`` with a PNGRenderer built from ``kwargs``."""
    return PNGRenderer(**kwargs).save(layout, output_path, selected)
