"""
Board canvas widget.

A plain QWidget that repaints the whole board from the model on every
change. Mouse and keyboard events are translated into calls on the
InteractionController; the controller's signals drive repaints and the
inline label editor.

The painting itself lives in ``paint_board`` so the same pass serves the
screen, PNG export and tests.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from PyQt6.QtCore import Qt, QSize
from PyQt6.QtGui import QPainter, QColor, QImage, QMouseEvent, QKeyEvent, QPaintEvent
from PyQt6.QtWidgets import QWidget, QLineEdit

from models.board import BoardModel, ShapeKind, ShapeElement
from services.interaction import InteractionController, LabelEditSession, Tool
from .colors import COLORS
from .connector_renderer import ConnectorRenderer
from .grid_renderer import GridRenderer, GRID_SPACING
from .shape_renderer import ShapeRenderer, PathRenderer

logger = logging.getLogger(__name__)


EXPORT_FILENAME = "wireboard-diagram.png"

LABEL_EDITOR_WIDTH = 160
LABEL_EDITOR_HEIGHT = 24

TOOL_CURSORS = {
    Tool.SELECT: Qt.CursorShape.ArrowCursor,
    Tool.DRAW: Qt.CursorShape.CrossCursor,
    Tool.CONNECTOR: Qt.CursorShape.PointingHandCursor,
    Tool.ERASER: Qt.CursorShape.ForbiddenCursor,
}


def paint_board(painter: QPainter,
                board: BoardModel,
                controller: Optional[InteractionController],
                width: float,
                height: float,
                show_grid: bool = True,
                grid_spacing: float = GRID_SPACING,
                background: Optional[QColor] = None):
    """
    Draw one full frame.

    Order: background, grid, connectors, elements, then the live
    overlays (path being drawn, pending connector anchor). Connectors
    whose endpoints are missing or are not shapes are skipped.
    """
    painter.fillRect(0, 0, int(width), int(height), background or COLORS["background"])

    if show_grid:
        GridRenderer.render(painter, width, height, grid_spacing)

    selected_id = controller.selected_id if controller is not None else None

    for conn in board.connectors:
        source = board.get_shape(conn.from_id)
        target = board.get_shape(conn.to_id)
        if source is None or target is None:
            continue
        ConnectorRenderer.render(painter, source, target, conn, conn.id == selected_id)

    for element in board.elements:
        ShapeRenderer.render(painter, element, element.id == selected_id)

    if controller is None:
        return

    PathRenderer.render_preview(painter, controller.path_preview)

    if controller.pending_anchor_id is not None:
        anchor = board.get_shape(controller.pending_anchor_id)
        if anchor is not None:
            ShapeRenderer.render_pending_anchor(painter, anchor)


class LabelEditor(QLineEdit):
    """
    Inline text field for editing a shape label.

    Enter or losing focus commits, Escape discards.
    """

    def __init__(self, controller: InteractionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setPlaceholderText("Label…")
        self.setFixedSize(LABEL_EDITOR_WIDTH, LABEL_EDITOR_HEIGHT)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setStyleSheet("""
            QLineEdit {
                background: #161b22;
                color: #c9d1d9;
                border: 1px solid #3b82f6;
                border-radius: 4px;
                padding: 2px 6px;
                font-size: 12px;
            }
        """)
        self.textEdited.connect(self.controller.update_label_text)
        self.hide()

    def open(self, session: LabelEditSession):
        self.setText(session.text)
        self.move(int(session.anchor_x - LABEL_EDITOR_WIDTH / 2), int(session.anchor_y))
        self.show()
        self.raise_()
        self.setFocus()
        self.selectAll()

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.controller.commit_label_edit()
            event.accept()
        elif event.key() == Qt.Key.Key_Escape:
            self.controller.cancel_label_edit()
            event.accept()
        else:
            super().keyPressEvent(event)

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        if self.controller.label_edit is not None:
            self.controller.commit_label_edit()


class BoardCanvas(QWidget):
    """
    Drawing surface for one board.

    Host-facing commands: add_shape, export_png, clear_all,
    cancel_operation, set_tool.
    """

    def __init__(self, board: BoardModel, controller: InteractionController,
                 show_grid: bool = True,
                 grid_spacing: float = GRID_SPACING,
                 background: str = "#0d1117",
                 parent=None):
        super().__init__(parent)
        self.board = board
        self.controller = controller
        self.show_grid = show_grid
        self.grid_spacing = grid_spacing
        self.background = QColor(background)

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(400, 300)
        self.setAutoFillBackground(False)

        self.label_editor = LabelEditor(controller, self)

        controller.boardChanged.connect(self.update)
        controller.overlayChanged.connect(self.update)
        controller.toolChanged.connect(self._on_tool_changed)
        controller.labelEditStarted.connect(self._on_label_edit_started)
        controller.labelEditFinished.connect(self._on_label_edit_finished)

        self._on_tool_changed(controller.tool)

    def sizeHint(self) -> QSize:
        return QSize(1200, 800)

    # ---- painting -------------------------------------------------------

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        paint_board(painter, self.board, self.controller,
                    self.width(), self.height(),
                    self.show_grid, self.grid_spacing, self.background)
        painter.end()

    def render_image(self) -> QImage:
        """Render the current board into an image the size of the canvas."""
        image = QImage(max(1, self.width()), max(1, self.height()),
                       QImage.Format.Format_ARGB32)
        painter = QPainter(image)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        paint_board(painter, self.board, self.controller,
                    image.width(), image.height(),
                    self.show_grid, self.grid_spacing, self.background)
        painter.end()
        return image

    # ---- input ----------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self.setFocus()
        pos = event.position()
        self.controller.pointer_down(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.position()
        self.controller.pointer_move(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self.controller.pointer_up()
        event.accept()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseDoubleClickEvent(event)
            return
        pos = event.position()
        self.controller.double_click(pos.x(), pos.y())
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        """Handle keyboard shortcuts."""
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.controller.delete_selected()
            event.accept()
        elif event.key() == Qt.Key.Key_Escape:
            self.controller.cancel_all()
            event.accept()
        else:
            super().keyPressEvent(event)

    # ---- controller signals ---------------------------------------------

    def _on_tool_changed(self, tool: Tool):
        self.setCursor(TOOL_CURSORS.get(tool, Qt.CursorShape.ArrowCursor))
        self.update()

    def _on_label_edit_started(self, session: LabelEditSession):
        self.label_editor.open(session)

    def _on_label_edit_finished(self):
        self.label_editor.hide()
        self.setFocus()
        self.update()

    # ---- commands -------------------------------------------------------

    def set_tool(self, tool: Union[Tool, str]):
        self.controller.set_tool(tool)

    def add_shape(self, kind: Union[ShapeKind, str]) -> ShapeElement:
        """Add a shape near the center of the visible surface."""
        return self.controller.add_shape(kind, self.width(), self.height())

    def export_png(self, directory: Optional[Union[str, Path]] = None) -> Optional[str]:
        """
        Save the board as ``wireboard-diagram.png``.

        Args:
            directory: Target directory (defaults to the current one)

        Returns:
            The written file path, or None if saving failed
        """
        target = Path(directory) if directory else Path.cwd()
        file_path = os.path.join(str(target), EXPORT_FILENAME)
        if not self.render_image().save(file_path, "PNG"):
            logger.warning(f"Failed to export PNG to {file_path}")
            return None
        logger.info(f"Exported board to {file_path}")
        return file_path

    def clear_all(self):
        self.controller.clear_all()

    def cancel_operation(self):
        self.controller.cancel_operation()
