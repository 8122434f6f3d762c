"""
Background dot grid.
"""

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QPainter

from .colors import COLORS

GRID_SPACING = 28
DOT_SIZE = 1.5


class GridRenderer:
    """Draws a uniform low-opacity dot grid over the whole surface."""

    @staticmethod
    def render(painter: QPainter, width: float, height: float,
               spacing: float = GRID_SPACING):
        """
        Fill one small square per grid point.

        The first row and column sit one spacing in from the origin.
        """
        if spacing <= 0:
            return
        color = COLORS["grid_dot"]
        half = DOT_SIZE / 2

        x = spacing
        while x < width:
            y = spacing
            while y < height:
                painter.fillRect(QRectF(x - half, y - half, DOT_SIZE, DOT_SIZE), color)
                y += spacing
            x += spacing
