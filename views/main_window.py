"""
Main application window.

Assembles the toolbar, shape palette and board canvas, and wires the
board model, interaction controller and persistence sync together.
"""

import logging
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QActionGroup, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QToolBar, QPushButton, QLabel,
    QButtonGroup, QSizePolicy, QStatusBar, QMessageBox, QFileDialog,
)

from models.board import BoardModel
from services.board_client import BoardClient
from services.interaction import InteractionController, Tool
from services.persistence_sync import PersistenceSync, SaveStatus
from services.settings_manager import SettingsManager, get_settings
from .board_canvas import BoardCanvas
from .shape_palette import ShapePalette

logger = logging.getLogger(__name__)


# (tool, button text, tooltip, shortcut)
TOOL_BUTTONS = [
    (Tool.SELECT, "↖ Select", "Select & Move", "V"),
    (Tool.DRAW, "✏ Draw", "Freehand Draw", "D"),
    (Tool.CONNECTOR, "⤳ Connect", "Connect Shapes", "C"),
    (Tool.ERASER, "⊘ Erase", "Erase", "E"),
]

SAVE_STATUS_TEXT = {
    SaveStatus.IDLE: "",
    SaveStatus.SAVING: "● Saving…",
    SaveStatus.SAVED: "✓ Saved",
}


class BoardToolbar(QToolBar):
    """Toolbar with tool buttons, save status and board actions."""

    toolSelected = pyqtSignal(object)   # Tool

    def __init__(self, parent=None):
        super().__init__("Board", parent)
        self.setMovable(False)
        self.tool_buttons: dict[Tool, QPushButton] = {}
        self._setup_ui()

    def _setup_ui(self):
        self.setStyleSheet("""
            QToolBar {
                background: #161b22;
                border-bottom: 1px solid #30363d;
                padding: 6px 12px;
                spacing: 6px;
            }
            QPushButton {
                background: transparent;
                color: #c9d1d9;
                border: 1px solid transparent;
                padding: 6px 12px;
                border-radius: 6px;
                font-size: 13px;
            }
            QPushButton:hover {
                background: #1f2937;
            }
            QPushButton:checked {
                background: #1e3a6e;
                border-color: #3b82f6;
            }
        """)

        brand = QLabel("⬡ Wireboard")
        brand.setStyleSheet("color: #e6edf3; font-weight: 600; font-size: 14px; padding-right: 12px;")
        self.addWidget(brand)

        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(True)
        for tool, text, tip, shortcut in TOOL_BUTTONS:
            btn = QPushButton(text)
            btn.setCheckable(True)
            btn.setToolTip(f"{tip} ({shortcut})")
            btn.clicked.connect(lambda _checked, t=tool: self.toolSelected.emit(t))
            self._tool_group.addButton(btn)
            self.tool_buttons[tool] = btn
            self.addWidget(btn)
        self.tool_buttons[Tool.SELECT].setChecked(True)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.addWidget(spacer)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #8b949e; font-size: 12px; padding-right: 8px;")
        self.addWidget(self.status_label)

        self.export_btn = QPushButton("Export PNG")
        self.export_btn.setToolTip("Export as PNG")
        self.addWidget(self.export_btn)

        self.clear_btn = QPushButton("Clear")
        self.clear_btn.setToolTip("Clear board")
        self.clear_btn.setStyleSheet("""
            QPushButton {
                color: #f87171;
                border: 1px solid #7f1d1d;
            }
            QPushButton:hover {
                background: #450a0a;
            }
        """)
        self.addWidget(self.clear_btn)

    def set_active_tool(self, tool: Tool):
        """Reflect the controller's tool in the buttons."""
        btn = self.tool_buttons.get(tool)
        if btn is not None and not btn.isChecked():
            btn.setChecked(True)

    def set_save_status(self, status: SaveStatus):
        self.status_label.setText(SAVE_STATUS_TEXT.get(status, ""))


class MainWindow(QMainWindow):
    """
    Main application window for Wireboard.

    Layout:
    ┌─────────────────────────────────────────────────────┐
    │  Toolbar: [Select] [Draw] [Connect] [Erase]  Saved  │
    ├─────────────┬───────────────────────────────────────┤
    │             │                                       │
    │   Shape     │          Board Canvas                 │
    │   Palette   │                                       │
    │             │                                       │
    ├─────────────┴───────────────────────────────────────┤
    │  Status Bar                                         │
    └─────────────────────────────────────────────────────┘
    """

    def __init__(self,
                 settings_manager: Optional[SettingsManager] = None,
                 server_url: Optional[str] = None,
                 offline: bool = False,
                 load_on_start: bool = True):
        super().__init__()

        self.settings_manager = settings_manager or get_settings()
        service = self.settings_manager.service

        # Models
        self.board = BoardModel()
        self.controller = InteractionController(self.board, self)

        # Persistence
        client = None
        if not offline and service.enabled:
            client = BoardClient(
                server_url or service.base_url,
                self.settings_manager.session_id,
                service.request_timeout,
            )
        self.sync = PersistenceSync(
            self.board, client, self.controller,
            service.save_debounce_ms, service.saved_status_ms, self,
        )

        # Setup
        self._setup_window()
        self._setup_menu()
        self._setup_toolbar()
        self._setup_central_widget()
        self._setup_status_bar()
        self._connect_signals()

        self._load_window_settings()

        if load_on_start:
            self.sync.load_board()
        self._update_counts()

    def _load_window_settings(self):
        """Restore window geometry and state."""
        geometry, state = self.settings_manager.get_window_geometry()
        if geometry:
            self.restoreGeometry(geometry)
        if state:
            self.restoreState(state)

    def _save_window_settings(self):
        """Save window geometry and state."""
        self.settings_manager.save_window_geometry(
            self.saveGeometry(),
            self.saveState()
        )

    def closeEvent(self, event):
        """Handle window close - flush the board and save settings."""
        self.sync.shutdown()
        self._save_window_settings()
        super().closeEvent(event)

    def _setup_window(self):
        """Configure window properties."""
        if self.sync.enabled:
            self.setWindowTitle("Wireboard - Architecture Scratchpad")
        else:
            self.setWindowTitle("Wireboard - Architecture Scratchpad (offline)")
        self.setMinimumSize(900, 600)
        self.resize(1400, 900)

        self.setStyleSheet("""
            QMainWindow {
                background: #0d1117;
            }
        """)

    def _setup_menu(self):
        """Create menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        export_action = QAction("&Export PNG...", self)
        export_action.setShortcut("Ctrl+Shift+E")
        export_action.triggered.connect(self._on_export_png)
        file_menu.addAction(export_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        delete_action = QAction("&Delete Selected", self)
        delete_action.triggered.connect(self.controller.delete_selected)
        edit_menu.addAction(delete_action)

        cancel_action = QAction("&Cancel Operation", self)
        cancel_action.triggered.connect(self.controller.cancel_all)
        edit_menu.addAction(cancel_action)

        edit_menu.addSeparator()

        clear_action = QAction("C&lear Board...", self)
        clear_action.triggered.connect(self._on_clear_board)
        edit_menu.addAction(clear_action)

        # Tools menu
        tools_menu = menubar.addMenu("&Tools")
        self._tool_actions: dict[Tool, QAction] = {}
        tool_group = QActionGroup(self)
        tool_group.setExclusive(True)
        for tool, text, tip, shortcut in TOOL_BUTTONS:
            action = QAction(tip, self)
            action.setCheckable(True)
            action.setShortcut(shortcut)
            action.triggered.connect(lambda _checked, t=tool: self.controller.set_tool(t))
            tool_group.addAction(action)
            tools_menu.addAction(action)
            self._tool_actions[tool] = action
        self._tool_actions[Tool.SELECT].setChecked(True)

        # View menu
        view_menu = menubar.addMenu("&View")

        grid_action = QAction("Show &Grid", self)
        grid_action.setCheckable(True)
        grid_action.setChecked(self.settings_manager.ui.show_grid)
        grid_action.toggled.connect(self._on_toggle_grid)
        view_menu.addAction(grid_action)

        # Help menu
        help_menu = menubar.addMenu("&Help")

        about_action = QAction("&About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _setup_toolbar(self):
        """Create and add toolbar."""
        self.toolbar = BoardToolbar()
        self.addToolBar(self.toolbar)

        self.toolbar.toolSelected.connect(self.controller.set_tool)
        self.toolbar.export_btn.clicked.connect(self._on_export_png)
        self.toolbar.clear_btn.clicked.connect(self._on_clear_board)

    def _setup_central_widget(self):
        """Create the palette + canvas layout."""
        central = QWidget()
        self.setCentralWidget(central)

        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.palette = ShapePalette()
        layout.addWidget(self.palette)

        ui = self.settings_manager.ui
        self.canvas = BoardCanvas(
            self.board, self.controller,
            show_grid=ui.show_grid,
            grid_spacing=ui.grid_spacing,
            background=ui.canvas_background,
        )
        layout.addWidget(self.canvas, 1)

    def _setup_status_bar(self):
        """Create status bar."""
        status = QStatusBar()
        status.setStyleSheet("""
            QStatusBar {
                background: #161b22;
                border-top: 1px solid #30363d;
                padding: 4px 8px;
                color: #8b949e;
                font-size: 12px;
            }
        """)
        self.setStatusBar(status)

        self._count_label = QLabel("Shapes: 0  Connectors: 0")
        status.addWidget(self._count_label)

        status.addWidget(QWidget(), 1)

        self._instruction_label = QLabel(
            "V select • D draw • C connect • E erase • Del delete • Esc cancel"
        )
        status.addWidget(self._instruction_label)

    def _connect_signals(self):
        """Connect all signals."""
        self.palette.shapeKindSelected.connect(self._on_shape_kind_selected)
        self.controller.toolChanged.connect(self._on_tool_changed)
        self.controller.boardChanged.connect(self._update_counts)
        self.sync.statusChanged.connect(self.toolbar.set_save_status)
        self.sync.boardLoaded.connect(self.canvas.update)
        self.sync.boardLoaded.connect(self._update_counts)

    def _on_shape_kind_selected(self, kind: str):
        self.canvas.add_shape(kind)
        self.canvas.setFocus()

    def _on_tool_changed(self, tool: Tool):
        self.toolbar.set_active_tool(tool)
        action = self._tool_actions.get(tool)
        if action is not None:
            action.setChecked(True)

    def _update_counts(self):
        self._count_label.setText(
            f"Shapes: {self.board.shape_count}  Connectors: {len(self.board.connectors)}"
        )

    def _on_toggle_grid(self, checked: bool):
        self.settings_manager.ui.show_grid = checked
        self.settings_manager.save()
        self.canvas.show_grid = checked
        self.canvas.update()

    def _on_export_png(self):
        """Export the board as a PNG into a chosen directory."""
        directory = QFileDialog.getExistingDirectory(
            self,
            "Export PNG To",
            str(self.settings_manager.get_export_directory()),
        )
        if not directory:
            return

        file_path = self.canvas.export_png(directory)
        if file_path is None:
            QMessageBox.warning(self, "Export Failed", f"Could not write PNG to:\n{directory}")
            return
        self.settings_manager.set_export_directory(directory)
        self.statusBar().showMessage(f"Exported to {file_path}", 3000)

    def _on_clear_board(self):
        """Clear the board after confirmation."""
        if self.board.is_empty():
            return

        reply = QMessageBox.question(
            self,
            "Clear Board",
            "Clear the entire board? This cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )

        if reply == QMessageBox.StandardButton.Yes:
            self.canvas.clear_all()
            self._update_counts()
            self.statusBar().showMessage("Board cleared", 2000)

    def _on_about(self):
        """Show about dialog."""
        session = self.settings_manager.session_id
        QMessageBox.about(
            self,
            "About Wireboard",
            "<h3>Wireboard</h3>"
            "<p>Architecture scratchpad: place components, connect them "
            "with arrows and sketch freehand notes.</p>"
            f"<p>Board session: <code>{session}</code></p>"
        )
