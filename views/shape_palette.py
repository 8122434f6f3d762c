"""
Shape palette for adding architectural shapes to the board.

One button per shape kind; clicking adds the shape near the canvas
center.
"""

from PyQt6.QtCore import Qt, QSize, pyqtSignal
from PyQt6.QtGui import QFont, QIcon
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel, QPushButton

from models.board import ShapeKind
from .colors import PALETTE_COLORS
from .shape_renderer import ShapeRenderer


SHAPE_NAMES = {
    ShapeKind.SERVER.value: "Server",
    ShapeKind.DATABASE.value: "Database",
    ShapeKind.API.value: "API",
    ShapeKind.QUEUE.value: "Queue",
    ShapeKind.LOAD_BALANCER.value: "Load Balancer",
    ShapeKind.CLIENT.value: "Client",
    ShapeKind.CLOUD.value: "Cloud",
}


class ShapeKindButton(QPushButton):
    """A palette button for one shape kind."""

    clicked_with_kind = pyqtSignal(str)

    def __init__(self, kind: ShapeKind, parent=None):
        super().__init__(parent)
        self.kind = kind.value
        self._setup_ui()

        self.clicked.connect(lambda: self.clicked_with_kind.emit(self.kind))

    @property
    def display_name(self) -> str:
        return SHAPE_NAMES.get(self.kind, self.kind.title())

    def _setup_ui(self):
        self.setFixedHeight(40)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setText(self.display_name)
        self.setToolTip(f"Add {self.display_name}")
        self.setIcon(QIcon(ShapeRenderer.render_preview(self.kind, 28)))
        self.setIconSize(QSize(28, 28))

        color = PALETTE_COLORS.get(self.kind, "#6b7280")
        self.setStyleSheet(f"""
            QPushButton {{
                background: #161b22;
                color: #c9d1d9;
                border: 1px solid #30363d;
                border-radius: 6px;
                text-align: left;
                padding: 4px 10px;
                font-size: 12px;
            }}
            QPushButton:hover {{
                border-color: {color};
                background: #1c2230;
            }}
            QPushButton:pressed {{
                background: #0d1117;
            }}
        """)


class ShapePalette(QWidget):
    """
    Palette panel containing all shape kinds.
    """

    shapeKindSelected = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.buttons: dict[str, ShapeKindButton] = {}
        self._setup_ui()

    def _setup_ui(self):
        self.setFixedWidth(180)
        self.setStyleSheet("background: #0d1117;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        title = QLabel("Components")
        title_font = QFont("Inter", 11)
        title_font.setWeight(QFont.Weight.Bold)
        title.setFont(title_font)
        title.setStyleSheet("color: #8b949e; margin-bottom: 4px;")
        layout.addWidget(title)

        for kind in ShapeKind:
            btn = ShapeKindButton(kind)
            btn.clicked_with_kind.connect(self.shapeKindSelected)
            self.buttons[kind.value] = btn
            layout.addWidget(btn)

        layout.addStretch()

        help_text = QLabel("Double-click a shape\nto edit its label")
        help_text.setAlignment(Qt.AlignmentFlag.AlignCenter)
        help_text.setStyleSheet("""
            color: #6e7681;
            font-size: 11px;
            padding: 10px;
            background: #161b22;
            border-radius: 6px;
        """)
        layout.addWidget(help_text)
