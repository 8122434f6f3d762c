"""Views package."""

from .board_canvas import BoardCanvas, LabelEditor, paint_board
from .shape_renderer import ShapeRenderer, PathRenderer
from .connector_renderer import ConnectorRenderer
from .grid_renderer import GridRenderer
from .shape_palette import ShapePalette
from .main_window import MainWindow, BoardToolbar

__all__ = [
    "BoardCanvas",
    "LabelEditor",
    "paint_board",
    "ShapeRenderer",
    "PathRenderer",
    "ConnectorRenderer",
    "GridRenderer",
    "ShapePalette",
    "MainWindow",
    "BoardToolbar",
]
