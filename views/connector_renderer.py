"""
Connector Renderer.

Draws a connector as a gently bowed quadratic curve between two shape
centers, with a filled arrowhead at the target and an optional label
near the curve's apex.
"""

from PyQt6.QtCore import Qt, QRectF, QPointF
from PyQt6.QtGui import QPainter, QPen, QBrush, QFont, QPainterPath, QPolygonF

from models.board import Connector, ShapeElement
from models.geometry import ConnectorRoute, compute_connector_route
from .colors import COLORS

LABEL_HALF_WIDTH = 100
LABEL_HALF_HEIGHT = 9


class ConnectorRenderer:
    """Static utility class for rendering connectors."""

    @staticmethod
    def render(painter: QPainter,
               source: ShapeElement,
               target: ShapeElement,
               connector: Connector,
               selected: bool = False) -> bool:
        """
        Render one connector.

        Args:
            painter: QPainter to render to
            source: Shape at the connector's ``from`` end
            target: Shape at the connector's ``to`` end (arrowhead)
            connector: The connector (for its label)
            selected: Emphasize the stroke

        Returns:
            False if the route was degenerate and nothing was drawn
        """
        route = compute_connector_route(source, target)
        if route is None:
            return False

        color = COLORS["connector_selected"] if selected else COLORS["connector"]
        width = 2.0 if selected else 1.5

        painter.save()

        pen = QPen(color, width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(ConnectorRenderer.curve_path(route))

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(color))
        painter.drawPolygon(QPolygonF([
            QPointF(*route.end),
            QPointF(*route.arrow_left),
            QPointF(*route.arrow_right),
        ]))

        if connector.label:
            ConnectorRenderer._draw_label(painter, connector.label, route)

        painter.restore()
        return True

    @staticmethod
    def curve_path(route: ConnectorRoute) -> QPainterPath:
        """Quadratic bezier from source center to target center."""
        path = QPainterPath(QPointF(*route.start))
        path.quadTo(QPointF(*route.control), QPointF(*route.end))
        return path

    @staticmethod
    def _draw_label(painter: QPainter, text: str, route: ConnectorRoute):
        painter.setFont(QFont("Inter", 11))
        painter.setPen(COLORS["connector_label"])
        lx, ly = route.label_anchor
        rect = QRectF(
            lx - LABEL_HALF_WIDTH,
            ly - LABEL_HALF_HEIGHT,
            2 * LABEL_HALF_WIDTH,
            2 * LABEL_HALF_HEIGHT,
        )
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)
