"""Services package."""

from .interaction import (
    InteractionController,
    Tool,
    DragSession,
    PathCapture,
    LabelEditSession,
)
from .board_client import BoardClient, BoardServiceError
from .persistence_sync import PersistenceSync, SaveStatus
from .settings_manager import (
    SettingsManager,
    AppSettings,
    get_settings,
    reset_settings_manager,
)

__all__ = [
    "InteractionController",
    "Tool",
    "DragSession",
    "PathCapture",
    "LabelEditSession",
    "BoardClient",
    "BoardServiceError",
    "PersistenceSync",
    "SaveStatus",
    "SettingsManager",
    "AppSettings",
    "get_settings",
    "reset_settings_manager",
]
