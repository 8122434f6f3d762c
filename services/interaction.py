"""
Tool state machine and interaction controller.

Interprets pointer and keyboard input against the active tool,
mutates the BoardModel and owns the transient interaction session
(drag, freehand capture, pending connector anchor, label edit).

The controller is toolkit-agnostic about input: the canvas widget
translates Qt events into plain coordinates and calls the methods
below. Listeners are notified through Qt signals:

- boardChanged: the model was mutated (redraw + persist)
- overlayChanged: only selection / previews changed (redraw)
- labelEditStarted / labelEditFinished: show or hide the text editor
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from models.board import (
    BoardModel, ShapeKind, ShapeElement,
    SHAPE_WIDTH, SHAPE_HEIGHT, DEFAULT_PATH_COLOR, DEFAULT_PATH_WIDTH,
)

logger = logging.getLogger(__name__)


# A committed freehand stroke needs more than this many points
MIN_PATH_POINTS = 2

# Consecutive add-shape commands cascade diagonally
ADD_SHAPE_STEP = 22
ADD_SHAPE_CYCLE = 8

# Label editor sits just below the drawn label
LABEL_EDIT_OFFSET = 15


class Tool(str, Enum):
    """Pointer tools selectable by the host toolbar."""
    SELECT = "select"
    DRAW = "draw"
    CONNECTOR = "connector"
    ERASER = "eraser"


@dataclass
class DragSession:
    """Shape being dragged and the grab offset inside it."""
    element_id: str
    offset_x: float
    offset_y: float


@dataclass
class PathCapture:
    """Freehand stroke in progress."""
    points: list[tuple[float, float]] = field(default_factory=list)


@dataclass
class LabelEditSession:
    """
    Open label editor.

    Attributes:
        element_id: Shape whose label is edited
        anchor_x: Horizontal center of the editor
        anchor_y: Top of the editor
        text: Current (uncommitted) text
    """
    element_id: str
    anchor_x: float
    anchor_y: float
    text: str = ""


class InteractionController(QObject):
    """
    Owns the active tool and interaction session for one board.

    At most one of drag / path capture / pending anchor / label edit is
    active at a time. Changing tools cancels any drag, capture or
    pending anchor.
    """

    boardChanged = pyqtSignal()
    overlayChanged = pyqtSignal()
    toolChanged = pyqtSignal(object)         # Tool
    labelEditStarted = pyqtSignal(object)    # LabelEditSession
    labelEditFinished = pyqtSignal()

    def __init__(self, board: BoardModel, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.board = board
        self._tool = Tool.SELECT
        self._selected_id: Optional[str] = None
        self._drag: Optional[DragSession] = None
        self._capture: Optional[PathCapture] = None
        self._pending_anchor: Optional[str] = None
        self._label_edit: Optional[LabelEditSession] = None

    # ---- state ----------------------------------------------------------

    @property
    def tool(self) -> Tool:
        return self._tool

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._drag

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def path_preview(self) -> Optional[list[tuple[float, float]]]:
        """Points of the stroke being captured, or None."""
        if self._capture is None:
            return None
        return list(self._capture.points)

    @property
    def pending_anchor_id(self) -> Optional[str]:
        return self._pending_anchor

    @property
    def label_edit(self) -> Optional[LabelEditSession]:
        return self._label_edit

    def set_tool(self, tool: Union[Tool, str]):
        """Switch tools, cancelling any drag, capture or pending anchor."""
        try:
            tool = Tool(tool)
        except ValueError:
            logger.warning(f"Ignoring unknown tool {tool!r}")
            return
        self.cancel_operation()
        if tool != self._tool:
            self._tool = tool
            logger.debug(f"Tool changed to {tool.value}")
            self.toolChanged.emit(tool)

    def select(self, item_id: Optional[str]):
        """
        Set the selection to an element or connector id.

        Pointer input only ever selects shapes; connector ids arrive here
        from the host.
        """
        if item_id != self._selected_id:
            self._selected_id = item_id
            self.overlayChanged.emit()

    # ---- pointer input --------------------------------------------------

    def pointer_down(self, x: float, y: float):
        """Primary button pressed at (x, y)."""
        if self._label_edit is not None:
            # Clicking the canvas takes focus from the editor
            self.commit_label_edit()

        if self._tool == Tool.SELECT:
            self._select_down(x, y)
        elif self._tool == Tool.DRAW:
            self._capture = PathCapture(points=[(x, y)])
            self.overlayChanged.emit()
        elif self._tool == Tool.CONNECTOR:
            self._connector_down(x, y)
        elif self._tool == Tool.ERASER:
            self._eraser_down(x, y)

    def pointer_move(self, x: float, y: float):
        """Pointer moved to (x, y)."""
        if self._drag is not None:
            moved = self.board.move_shape(
                self._drag.element_id,
                x - self._drag.offset_x,
                y - self._drag.offset_y,
            )
            if moved:
                self.boardChanged.emit()
        elif self._capture is not None:
            self._capture.points.append((x, y))
            self.overlayChanged.emit()

    def pointer_up(self):
        """Primary button released."""
        self._drag = None

        if self._capture is None:
            return

        points = self._capture.points
        self._capture = None
        if len(points) > MIN_PATH_POINTS:
            self.board.add_path(points, DEFAULT_PATH_COLOR, DEFAULT_PATH_WIDTH)
            self.boardChanged.emit()
        else:
            self.overlayChanged.emit()

    def double_click(self, x: float, y: float) -> Optional[LabelEditSession]:
        """Open the label editor for the shape under the pointer."""
        shape = self.board.find_shape_at(x, y)
        if shape is None:
            return None

        self.cancel_operation()
        self._label_edit = LabelEditSession(
            element_id=shape.id,
            anchor_x=shape.x + shape.w / 2,
            anchor_y=shape.y + shape.h + LABEL_EDIT_OFFSET,
            text=shape.label,
        )
        self.labelEditStarted.emit(self._label_edit)
        return self._label_edit

    def _select_down(self, x: float, y: float):
        shape = self.board.find_shape_at(x, y)
        if shape is None:
            self.select(None)
            return
        self.select(shape.id)
        self._drag = DragSession(shape.id, x - shape.x, y - shape.y)

    def _connector_down(self, x: float, y: float):
        shape = self.board.find_shape_at(x, y)
        if shape is None:
            self._set_pending_anchor(None)
            return

        if self._pending_anchor is None:
            self._set_pending_anchor(shape.id)
        elif shape.id != self._pending_anchor:
            created = self.board.add_connector(self._pending_anchor, shape.id)
            self._set_pending_anchor(None)
            if created is not None:
                self.boardChanged.emit()

    def _eraser_down(self, x: float, y: float):
        shape = self.board.find_shape_at(x, y)
        if shape is None:
            return
        self._delete(shape.id)

    def _set_pending_anchor(self, element_id: Optional[str]):
        if element_id != self._pending_anchor:
            self._pending_anchor = element_id
            self.overlayChanged.emit()

    # ---- label editing --------------------------------------------------

    def update_label_text(self, text: str):
        if self._label_edit is not None:
            self._label_edit.text = text

    def commit_label_edit(self) -> bool:
        """Write the edited text to the shape and close the editor."""
        session = self._label_edit
        if session is None:
            return False
        self._label_edit = None
        changed = self.board.set_label(session.element_id, session.text)
        self.labelEditFinished.emit()
        if changed:
            self.boardChanged.emit()
        return changed

    def cancel_label_edit(self):
        """Close the editor without touching the label."""
        if self._label_edit is None:
            return
        self._label_edit = None
        self.labelEditFinished.emit()

    # ---- commands -------------------------------------------------------

    def cancel_operation(self):
        """Drop any drag, freehand capture or pending connector anchor."""
        had_overlay = self._capture is not None or self._pending_anchor is not None
        self._drag = None
        self._capture = None
        self._pending_anchor = None
        if had_overlay:
            self.overlayChanged.emit()

    def cancel_all(self):
        """Escape: cancel every in-flight session, label edit included."""
        self.cancel_operation()
        self.cancel_label_edit()

    def delete_selected(self) -> bool:
        """Delete the selected element (with its connectors) or connector."""
        if self._selected_id is None:
            return False
        return self._delete(self._selected_id)

    def _delete(self, item_id: str) -> bool:
        removed = self.board.remove(item_id)
        if self._selected_id == item_id:
            self._selected_id = None
        if self._drag is not None and self._drag.element_id == item_id:
            self._drag = None
        if self._pending_anchor == item_id:
            self._pending_anchor = None
        if self._label_edit is not None and self._label_edit.element_id == item_id:
            self.cancel_label_edit()
        if removed:
            self.boardChanged.emit()
        return removed

    def add_shape(self, kind: Union[ShapeKind, str],
                  canvas_width: float, canvas_height: float) -> ShapeElement:
        """
        Add a shape near the canvas center.

        Each new shape is nudged diagonally by the number of shapes
        already present so repeated additions do not stack exactly.
        """
        offset = (self.board.shape_count % ADD_SHAPE_CYCLE) * ADD_SHAPE_STEP
        shape = self.board.add_shape(
            kind,
            canvas_width / 2 - SHAPE_WIDTH / 2 + offset,
            canvas_height / 2 - SHAPE_HEIGHT / 2 + offset,
        )
        self.boardChanged.emit()
        return shape

    def clear_all(self):
        """Remove everything from the board."""
        self.cancel_all()
        self.board.clear()
        self._selected_id = None
        self.boardChanged.emit()

    def replace_board_contents(self):
        """Reset session state after the model was reloaded externally."""
        self.cancel_all()
        self._selected_id = None
        self.overlayChanged.emit()
