"""
Shape Renderer.

Draws board elements with a QPainter:
- one deterministic vector recipe per shape kind, computed purely from
  the element's bounding box
- freehand paths as polylines
- selection and pending-connector decorations

Used by the board canvas for on-screen painting and PNG export, and by
the palette for button previews, so every surface draws shapes the same
way.
"""

import math
from typing import Optional

from PyQt6.QtCore import Qt, QRectF, QPointF
from PyQt6.QtGui import (
    QPainter, QColor, QPen, QBrush, QFont, QPainterPath, QPolygonF, QPixmap
)

from models.board import (
    Element, ShapeElement, PathElement, ShapeKind,
    DEFAULT_PATH_COLOR, DEFAULT_PATH_WIDTH, SHAPE_WIDTH, SHAPE_HEIGHT,
)
from models.geometry import SELECTION_MARGIN, expanded_rect
from .colors import COLORS, SHAPE_COLORS, rgba

STROKE_WIDTH = 1.5

# Shape label placement
LABEL_GAP = 5
LABEL_HALF_WIDTH = 120
LABEL_HEIGHT = 18


def _pen(color, width: float = STROKE_WIDTH) -> QPen:
    pen = QPen(QColor(color), width)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def _dashed_pen(color: QColor, width: float, dash: float, gap: float) -> QPen:
    """Pen with a dash pattern given in surface units."""
    pen = QPen(color, width)
    pen.setStyle(Qt.PenStyle.DashLine)
    # Qt dash lengths are multiples of the pen width
    pen.setDashPattern([dash / width, gap / width])
    return pen


def _fill_and_stroke(painter: QPainter, kind: str):
    fill, stroke = SHAPE_COLORS.get(kind, SHAPE_COLORS["fallback"])
    painter.setBrush(QBrush(QColor(fill)))
    painter.setPen(_pen(stroke))


class ShapeRenderer:
    """
    Static utility class for rendering board shapes.

    All recipes take the bounding box ``(x, y, w, h)`` and nothing else,
    so a shape drawn at the same box always produces the same calls.
    """

    @staticmethod
    def render(painter: QPainter, element: Element, selected: bool = False):
        """
        Render any element.

        Args:
            painter: QPainter to render to
            element: ShapeElement or PathElement
            selected: Whether to draw the selection decoration
        """
        if element.is_path:
            PathRenderer.render(painter, element, selected)
            return

        painter.save()
        x, y, w, h = element.x, element.y, element.w, element.h

        recipe = _RECIPES.get(element.kind, ShapeRenderer._draw_fallback)
        recipe(painter, x, y, w, h)

        if selected:
            ShapeRenderer._draw_outline(painter, x, y, w, h,
                                        _dashed_pen(COLORS["selection"], 2.0, 4, 3))

        ShapeRenderer._draw_label(painter, element.display_label, x, y, w, h)
        painter.restore()

    @staticmethod
    def render_pending_anchor(painter: QPainter, shape: ShapeElement):
        """Highlight the first endpoint chosen with the connector tool."""
        painter.save()
        ShapeRenderer._draw_outline(painter, shape.x, shape.y, shape.w, shape.h,
                                    _dashed_pen(COLORS["pending_anchor"], 2.0, 5, 3))
        painter.restore()

    @staticmethod
    def render_preview(kind: str, size: int = 32) -> QPixmap:
        """
        Create a preview pixmap for palette buttons.

        The shape body is drawn at its natural aspect ratio, scaled to
        fit the square; no label or decoration.
        """
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        padding = 2
        w = size - 2 * padding
        h = w * SHAPE_HEIGHT / SHAPE_WIDTH
        recipe = _RECIPES.get(kind, ShapeRenderer._draw_fallback)
        recipe(painter, padding, (size - h) / 2, w, h)

        painter.end()
        return pixmap

    # ---- decorations ----------------------------------------------------

    @staticmethod
    def _draw_outline(painter: QPainter, x: float, y: float, w: float, h: float, pen: QPen):
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(*expanded_rect(x, y, w, h, SELECTION_MARGIN)))

    @staticmethod
    def _draw_label(painter: QPainter, text: str, x: float, y: float, w: float, h: float):
        """Draw the label centered under the shape."""
        font = QFont("Inter", 12)
        font.setWeight(QFont.Weight.Medium)
        painter.setFont(font)
        painter.setPen(COLORS["label"])

        label_rect = QRectF(
            x + w / 2 - LABEL_HALF_WIDTH,
            y + h + LABEL_GAP,
            2 * LABEL_HALF_WIDTH,
            LABEL_HEIGHT,
        )
        painter.drawText(label_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop, text)

    # ---- recipes --------------------------------------------------------

    @staticmethod
    def _draw_fallback(painter: QPainter, x: float, y: float, w: float, h: float):
        _fill_and_stroke(painter, "fallback")
        painter.drawRoundedRect(QRectF(x, y, w, h), 6, 6)

    @staticmethod
    def _draw_server(painter: QPainter, x: float, y: float, w: float, h: float):
        """Rack unit: rounded body with three rows of status lights."""
        _fill_and_stroke(painter, ShapeKind.SERVER.value)
        painter.drawRoundedRect(QRectF(x, y, w, h), 6, 6)

        rows = 3
        for i in range(rows):
            row_y = y + (h / (rows + 1)) * (i + 1)
            painter.setPen(QPen(rgba(255, 255, 255, 0.12), 1))
            painter.drawLine(QPointF(x + 8, row_y), QPointF(x + w - 22, row_y))

            # First light is the "power on" indicator
            light = QColor("#22c55e") if i == 0 else rgba(255, 255, 255, 0.18)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(light))
            painter.drawEllipse(QPointF(x + w - 13, row_y), 3, 3)

    @staticmethod
    def _draw_database(painter: QPainter, x: float, y: float, w: float, h: float):
        """Cylinder: body with half-ellipse ends, then the lid."""
        ry = min(10, h * 0.18)
        _fill_and_stroke(painter, ShapeKind.DATABASE.value)

        body = QPainterPath()
        body.moveTo(x, y + ry)
        body.lineTo(x, y + h - ry)
        body.arcTo(QRectF(x, y + h - 2 * ry, w, 2 * ry), 180, 180)
        body.lineTo(x + w, y + ry)
        body.arcTo(QRectF(x, y, w, 2 * ry), 0, 180)
        body.closeSubpath()
        painter.drawPath(body)

        painter.setBrush(QBrush(QColor("#7c2d12")))
        painter.drawEllipse(QRectF(x, y, w, 2 * ry))

    @staticmethod
    def _draw_api(painter: QPainter, x: float, y: float, w: float, h: float):
        """Pointy-sided hexagon with a brace glyph."""
        cx = x + w / 2
        cy = y + h / 2
        r = min(w, h) / 2 - 3

        _fill_and_stroke(painter, ShapeKind.API.value)
        hexagon = QPolygonF()
        for i in range(6):
            angle = (math.pi / 3) * i - math.pi / 6
            hexagon.append(QPointF(cx + r * math.cos(angle), cy + r * math.sin(angle)))
        painter.drawPolygon(hexagon)

        font = QFont("monospace", 10)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(rgba(134, 239, 172, 0.65))
        painter.drawText(QRectF(cx - r, cy - r, 2 * r, 2 * r), Qt.AlignmentFlag.AlignCenter, "{ }")

    @staticmethod
    def _draw_queue(painter: QPainter, x: float, y: float, w: float, h: float):
        """Parallelogram with two chevrons pointing downstream."""
        skew = 14
        _fill_and_stroke(painter, ShapeKind.QUEUE.value)
        painter.drawPolygon(QPolygonF([
            QPointF(x + skew, y),
            QPointF(x + w, y),
            QPointF(x + w - skew, y + h),
            QPointF(x, y + h),
        ]))

        mid_y = y + h / 2
        painter.setPen(_pen(rgba(251, 191, 36, 0.4)))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for i in range(2):
            ax = x + skew + ((w - skew * 2) / 3) * (i + 0.8)
            painter.drawPolyline(QPolygonF([
                QPointF(ax, mid_y - 4),
                QPointF(ax + 7, mid_y),
                QPointF(ax, mid_y + 4),
            ]))

    @staticmethod
    def _draw_load_balancer(painter: QPainter, x: float, y: float, w: float, h: float):
        cx = x + w / 2
        cy = y + h / 2

        _fill_and_stroke(painter, ShapeKind.LOAD_BALANCER.value)
        painter.drawPolygon(QPolygonF([
            QPointF(cx, y),
            QPointF(x + w, cy),
            QPointF(cx, y + h),
            QPointF(x, cy),
        ]))

        painter.setPen(_pen(rgba(196, 181, 253, 0.35)))
        for offset in (-10, 0, 10):
            painter.drawLine(QPointF(cx + offset, cy - 9), QPointF(cx + offset, cy + 9))

    @staticmethod
    def _draw_client(painter: QPainter, x: float, y: float, w: float, h: float):
        """Monitor on a stand."""
        monitor_h = h * 0.68
        base_w = w * 0.42
        base_x = x + (w - base_w) / 2
        stand_h = h * 0.12
        base_h = h * 0.1

        _fill_and_stroke(painter, ShapeKind.CLIENT.value)
        painter.drawRoundedRect(QRectF(x + 2, y, w - 4, monitor_h), 5, 5)

        # Screen
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(rgba(14, 165, 233, 0.13)))
        painter.drawRoundedRect(QRectF(x + 8, y + 6, w - 16, monitor_h - 18), 3, 3)

        _fill_and_stroke(painter, ShapeKind.CLIENT.value)
        painter.drawRect(QRectF(x + w / 2 - 3, y + monitor_h, 6, stand_h))
        painter.drawRoundedRect(QRectF(base_x, y + monitor_h + stand_h, base_w, base_h), 2, 2)

    @staticmethod
    def _draw_cloud(painter: QPainter, x: float, y: float, w: float, h: float):
        """Overlapping circles on a flat base, outlined along the top."""
        bumps = [
            (x + w * 0.25, y + h * 0.62, h * 0.27),
            (x + w * 0.5, y + h * 0.48, h * 0.33),
            (x + w * 0.75, y + h * 0.62, h * 0.27),
            (x + w * 0.37, y + h * 0.4, h * 0.27),
            (x + w * 0.63, y + h * 0.4, h * 0.25),
        ]
        fill, stroke = SHAPE_COLORS[ShapeKind.CLOUD.value]

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(fill)))
        for cx, cy, r in bumps:
            painter.drawEllipse(QPointF(cx, cy), r, r)
        painter.fillRect(QRectF(x + w * 0.1, y + h * 0.6, w * 0.8, h * 0.4), QColor(fill))

        painter.setPen(_pen(stroke))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for cx, cy, r in bumps:
            # Upper half only; angles in 1/16th degree
            painter.drawArc(QRectF(cx - r, cy - r, 2 * r, 2 * r), 0, 180 * 16)

        left_x = x + w * 0.1
        right_x = x + w * 0.9
        painter.drawLine(QPointF(left_x, y + h), QPointF(right_x, y + h))

        lx, ly, lr = bumps[0]
        rx, ry, rr = bumps[2]
        painter.drawLine(QPointF(left_x, y + h), QPointF(lx - lr + 1, ly))
        painter.drawLine(QPointF(right_x, y + h), QPointF(rx + rr - 1, ry))


_RECIPES = {
    ShapeKind.SERVER.value: ShapeRenderer._draw_server,
    ShapeKind.DATABASE.value: ShapeRenderer._draw_database,
    ShapeKind.API.value: ShapeRenderer._draw_api,
    ShapeKind.QUEUE.value: ShapeRenderer._draw_queue,
    ShapeKind.LOAD_BALANCER.value: ShapeRenderer._draw_load_balancer,
    ShapeKind.CLIENT.value: ShapeRenderer._draw_client,
    ShapeKind.CLOUD.value: ShapeRenderer._draw_cloud,
}


class PathRenderer:
    """Renders freehand strokes, committed or in progress."""

    @staticmethod
    def render(painter: QPainter, element: PathElement, selected: bool = False):
        """Draw a path as a polyline; fewer than two points draws nothing."""
        if not element.points or len(element.points) < 2:
            return
        color = COLORS["path_selected"] if selected else QColor(element.color or DEFAULT_PATH_COLOR)
        PathRenderer._stroke(painter, element.points, color, element.line_width or DEFAULT_PATH_WIDTH)

    @staticmethod
    def render_preview(painter: QPainter, points: Optional[list]):
        """Live preview of the stroke being captured."""
        if not points or len(points) < 2:
            return
        PathRenderer._stroke(painter, points, QColor(DEFAULT_PATH_COLOR), DEFAULT_PATH_WIDTH)

    @staticmethod
    def _stroke(painter: QPainter, points: list, color: QColor, width: float):
        painter.save()
        pen = QPen(color, width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPolyline(QPolygonF([QPointF(px, py) for px, py in points]))
        painter.restore()
