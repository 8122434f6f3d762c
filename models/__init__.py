"""
Models package.

This package contains the board data model and the pure geometry it
relies on:
- Board elements (ShapeElement, PathElement, Connector, BoardModel)
- Geometry (hit testing, connector routing)
"""

from .board import (
    ShapeKind,
    ShapeElement,
    PathElement,
    Connector,
    Element,
    BoardModel,
    element_from_dict,
    new_id,
    SHAPE_WIDTH,
    SHAPE_HEIGHT,
    DEFAULT_PATH_COLOR,
    DEFAULT_PATH_WIDTH,
)
from .geometry import (
    ConnectorRoute,
    compute_connector_route,
    hit_test,
    point_in_rect,
    rect_center,
    expanded_rect,
)

__all__ = [
    # Board
    "ShapeKind",
    "ShapeElement",
    "PathElement",
    "Connector",
    "Element",
    "BoardModel",
    "element_from_dict",
    "new_id",
    "SHAPE_WIDTH",
    "SHAPE_HEIGHT",
    "DEFAULT_PATH_COLOR",
    "DEFAULT_PATH_WIDTH",
    # Geometry
    "ConnectorRoute",
    "compute_connector_route",
    "hit_test",
    "point_in_rect",
    "rect_center",
    "expanded_rect",
]
