"""
Pytest configuration and shared fixtures for Wireboard tests.
"""

import os
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

# Qt widgets and fonts need a platform; tests never open a window
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QApplication

from models.board import BoardModel, ShapeElement, PathElement, Connector, ShapeKind
from services.interaction import InteractionController
from services.settings_manager import SettingsManager, reset_settings_manager


# ============== Qt Fixtures ==============

@pytest.fixture(scope="session", autouse=True)
def qapp() -> QApplication:
    """One QApplication for the whole test session."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def recording_painter() -> MagicMock:
    """A QPainter stand-in that records every drawing call."""
    return MagicMock(spec=QPainter)


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="wireboard_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def settings_manager(temp_dir: Path) -> Generator[SettingsManager, None, None]:
    """Settings manager writing to a throwaway file."""
    reset_settings_manager()
    yield SettingsManager(config_override=str(temp_dir / "settings.json"))
    reset_settings_manager()


# ============== Model Fixtures ==============

@pytest.fixture
def empty_board() -> BoardModel:
    """Create an empty board."""
    return BoardModel()


@pytest.fixture
def simple_board() -> BoardModel:
    """Two shapes joined by one labelled connector."""
    board = BoardModel()
    board.add_element(ShapeElement(id="s1", kind=ShapeKind.SERVER, x=100, y=100))
    board.add_element(ShapeElement(id="s2", kind=ShapeKind.DATABASE, x=400, y=100, label="Orders DB"))
    board.connectors.append(Connector(id="c1", from_id="s1", to_id="s2", label="SQL"))
    return board


@pytest.fixture
def mixed_board(simple_board: BoardModel) -> BoardModel:
    """simple_board plus a freehand path and a third shape."""
    simple_board.add_element(PathElement(
        id="p1", points=[(10, 10), (20, 25), (35, 30)]
    ))
    simple_board.add_element(ShapeElement(id="s3", kind=ShapeKind.QUEUE, x=100, y=300))
    return simple_board


@pytest.fixture
def controller(empty_board: BoardModel) -> InteractionController:
    """Controller over an empty board."""
    return InteractionController(empty_board)


@pytest.fixture
def simple_controller(simple_board: BoardModel) -> InteractionController:
    """Controller over simple_board."""
    return InteractionController(simple_board)


# ============== Helper Functions ==============

def called_methods(painter: MagicMock) -> list[str]:
    """Names of the painter methods called, in order."""
    return [c[0] for c in painter.method_calls]


def count_calls(painter: MagicMock, name: str) -> int:
    """How many times one painter method was called."""
    return sum(1 for c in painter.method_calls if c[0] == name)


DRAW_METHODS = {
    "drawRect", "drawRoundedRect", "drawEllipse", "drawPath", "drawPolygon",
    "drawPolyline", "drawLine", "drawArc", "fillRect", "drawText",
}


def drawing_calls(painter: MagicMock) -> list:
    """Only the calls that put pixels on the surface."""
    return [c for c in painter.method_calls if c[0] in DRAW_METHODS]
