"""
Edge geometry for DAG layout.

An edge is drawn as a straight line from the source node's outgoing anchor
towards the target node's incoming anchor, stopping ``clearance`` units
short of the target so an arrowhead can be drawn in the gap without
overlapping the target box.

The end point is computed directly as ``target + clearance * u`` where ``u``
is the unit vector from the target back to the source. No slope is ever
formed, so vertical connectors need no special handling, and the result is
always the point on the segment itself.
"""

import math
from typing import List, NamedTuple, Optional, Tuple

DEFAULT_CLEARANCE = 3.0


class Point(NamedTuple):
    x: float
    y: float


class LabelBox(NamedTuple):
    """Rendered bounding box of a label, as reported by a text measurer."""

    width: float
    height: float


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def trimmed_endpoint(
    start: Tuple[float, float],
    target: Tuple[float, float],
    clearance: float = DEFAULT_CLEARANCE,
) -> Point:
    """
    Compute where a line from ``start`` to ``target`` should stop.

    The returned point lies on the segment, ``clearance`` away from
    ``target`` and ``L - clearance`` away from ``start``, where ``L`` is the
    length of the segment.

    Args:
        start: Source anchor (x1, y1).
        target: Target anchor (x2, y2).
        clearance: Gap to leave before the target.

    Returns:
        The trimmed end point. When ``L <= clearance`` the anchors are too
        close to leave a gap and the target anchor is returned unchanged.

    Raises:
        ValueError: If ``clearance`` is negative.
    """
    if clearance < 0:
        raise ValueError(f"clearance must be non-negative, got {clearance}")

    x1, y1 = start
    x2, y2 = target
    length = distance(start, target)

    if length <= clearance:
        return Point(x2, y2)

    ratio = clearance / length
    return Point(x2 + (x1 - x2) * ratio, y2 + (y1 - y2) * ratio)


def edge_angle(start: Tuple[float, float], end: Tuple[float, float]) -> float:
    """Direction of travel from ``start`` to ``end`` in radians (0 if they coincide)."""
    return math.atan2(end[1] - start[1], end[0] - start[0])


def arrowhead_polygon(
    start: Tuple[float, float],
    end: Tuple[float, float],
    length: float = DEFAULT_CLEARANCE,
    half_width: float = 2.0,
) -> List[Point]:
    """
    Triangle for an arrowhead whose base sits on ``end``.

    The head points along the vector from ``start`` to ``end`` and its tip
    lies ``length`` beyond ``end``. With ``length`` equal to the edge
    clearance the tip lands on the target anchor.

    Returns:
        Three points: tip, then the two base corners.
    """
    angle = edge_angle(start, end)
    cos_a, sin_a = math.cos(angle), math.sin(angle)

    tip = Point(end[0] + length * cos_a, end[1] + length * sin_a)
    left = Point(end[0] - half_width * sin_a, end[1] + half_width * cos_a)
    right = Point(end[0] + half_width * sin_a, end[1] - half_width * cos_a)
    return [tip, left, right]


def label_scale(
    render_width: float, render_height: float, measured: LabelBox
) -> Optional[float]:
    """
    Scale factor that fits a measured label inside a node's box.

    Returns ``min(render_width / measured.width,
    render_height / measured.height)``, or ``None`` when the label has no
    measurable extent.
    """
    if measured.width <= 0 or measured.height <= 0:
        return None
    return min(render_width / measured.width, render_height / measured.height)
