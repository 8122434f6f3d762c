"""
Geometry helpers for the board.

Plain-float vector math shared by hit-testing, the interaction
controller and the renderers. Works on any object exposing
``x``, ``y``, ``w`` and ``h`` attributes so it stays free of model
and Qt imports.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

Point = Tuple[float, float]

# Connector routing constants
DEGENERATE_DISTANCE = 1.0     # Centers closer than this draw nothing
CURVE_BOW_FACTOR = 0.15       # Bow grows with distance...
CURVE_BOW_MAX = 40.0          # ...up to this many units
ARROW_LENGTH = 11.0
ARROW_HALF_ANGLE = math.pi / 7
CONNECTOR_LABEL_OFFSET = 12.0

# Decoration margin around selected / pending shapes
SELECTION_MARGIN = 5.0


def point_in_rect(px: float, py: float, x: float, y: float, w: float, h: float) -> bool:
    """Closed axis-aligned bounding box test (edges count as inside)."""
    return x <= px <= x + w and y <= py <= y + h


def rect_center(rect) -> Point:
    """Center of an object with x/y/w/h attributes."""
    return (rect.x + rect.w / 2, rect.y + rect.h / 2)


def expanded_rect(x: float, y: float, w: float, h: float,
                  margin: float = SELECTION_MARGIN) -> Tuple[float, float, float, float]:
    """Grow a rectangle by ``margin`` on every side."""
    return (x - margin, y - margin, w + 2 * margin, h + 2 * margin)


def hit_test(candidates: Iterable, px: float, py: float):
    """
    Return the topmost candidate containing the point.

    Candidates are given in insertion (paint) order, so the scan runs
    back to front and the first match is the one drawn on top.
    """
    for item in reversed(list(candidates)):
        if point_in_rect(px, py, item.x, item.y, item.w, item.h):
            return item
    return None


@dataclass(frozen=True)
class ConnectorRoute:
    """
    Resolved geometry for one connector.

    Attributes:
        start: Center of the source shape
        control: Quadratic bezier control point
        end: Center of the target shape (arrow tip)
        arrow_left: First back corner of the arrowhead
        arrow_right: Second back corner of the arrowhead
        label_anchor: Where a connector label is centered
    """
    start: Point
    control: Point
    end: Point
    arrow_left: Point
    arrow_right: Point
    label_anchor: Point

    @property
    def end_angle(self) -> float:
        """Tangent angle at the tip, measured from the control point."""
        return math.atan2(self.end[1] - self.control[1], self.end[0] - self.control[0])


def compute_connector_route(source, target) -> Optional[ConnectorRoute]:
    """
    Route a curved arrow between the centers of two shapes.

    Returns None when the centers (nearly) coincide, e.g. a self-loop
    or two stacked shapes.
    """
    x1, y1 = rect_center(source)
    x2, y2 = rect_center(target)

    dx = x2 - x1
    dy = y2 - y1
    dist = math.hypot(dx, dy)
    if dist < DEGENERATE_DISTANCE:
        return None

    # Unit normal to the center line
    nx = -dy / dist
    ny = dx / dist
    bow = min(dist * CURVE_BOW_FACTOR, CURVE_BOW_MAX)
    cpx = (x1 + x2) / 2 + nx * bow
    cpy = (y1 + y2) / 2 + ny * bow

    angle = math.atan2(y2 - cpy, x2 - cpx)
    left = (
        x2 - ARROW_LENGTH * math.cos(angle - ARROW_HALF_ANGLE),
        y2 - ARROW_LENGTH * math.sin(angle - ARROW_HALF_ANGLE),
    )
    right = (
        x2 - ARROW_LENGTH * math.cos(angle + ARROW_HALF_ANGLE),
        y2 - ARROW_LENGTH * math.sin(angle + ARROW_HALF_ANGLE),
    )

    return ConnectorRoute(
        start=(x1, y1),
        control=(cpx, cpy),
        end=(x2, y2),
        arrow_left=left,
        arrow_right=right,
        label_anchor=(cpx, cpy - CONNECTOR_LABEL_OFFSET),
    )
