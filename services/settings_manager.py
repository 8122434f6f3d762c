"""
Settings Manager.

Handles application settings with JSON file storage.
"""

import json
import logging
import os
import uuid
from dataclasses import dataclass, field, asdict
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class BoardSettings:
    """Board identity."""
    session_id: str = ""


@dataclass
class ServiceSettings:
    """Board service connection and save timing."""
    base_url: str = "http://localhost:5000"
    request_timeout: float = 5.0    # seconds
    save_debounce_ms: int = 1500
    saved_status_ms: int = 1500
    enabled: bool = True


@dataclass
class UISettings:
    """User interface settings."""
    show_grid: bool = True
    grid_spacing: int = 28
    canvas_background: str = "#0d1117"


@dataclass
class PathSettings:
    """Last used directories (for file dialogs)."""
    last_export_dir: str = ""

    def get_export_dir(self) -> Path:
        """Directory PNG exports are written to."""
        if self.last_export_dir and os.path.isdir(self.last_export_dir):
            return Path(self.last_export_dir)
        pictures = Path.home() / "Pictures"
        if pictures.is_dir():
            return pictures
        return Path.home()


@dataclass
class AppSettings:
    """Complete application settings."""
    board: BoardSettings = field(default_factory=BoardSettings)
    service: ServiceSettings = field(default_factory=ServiceSettings)
    ui: UISettings = field(default_factory=UISettings)
    paths: PathSettings = field(default_factory=PathSettings)
    window_geometry: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "board": asdict(self.board),
            "service": asdict(self.service),
            "ui": asdict(self.ui),
            "paths": asdict(self.paths),
            "window_geometry": self.window_geometry,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary. Unknown keys are ignored."""
        settings = cls()

        if "board" in data:
            settings.board = _build(BoardSettings, data["board"])
        if "service" in data:
            settings.service = _build(ServiceSettings, data["service"])
        if "ui" in data:
            settings.ui = _build(UISettings, data["ui"])
        if "paths" in data:
            settings.paths = _build(PathSettings, data["paths"])
        if "window_geometry" in data:
            settings.window_geometry = data["window_geometry"]

        return settings


def _build(section_cls, values):
    """Instantiate a settings section from a dict, dropping unknown keys."""
    if not isinstance(values, dict):
        return section_cls()
    known = section_cls.__dataclass_fields__
    return section_cls(**{k: v for k, v in values.items() if k in known})


class SettingsManager:
    """
    Manages application settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/Wireboard/settings.json
    - Linux: ~/.config/Wireboard/settings.json
    - macOS: ~/Library/Application Support/Wireboard/settings.json
    """

    APP_NAME = "Wireboard"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = AppSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self._ensure_settings_dir()
        self.load()

    @property
    def settings(self) -> AppSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    @property
    def session_id(self) -> str:
        """
        Durable per-client board session identifier.

        Generated and saved on first access.
        """
        if not self._settings.board.session_id:
            self._settings.board.session_id = uuid.uuid4().hex
            logger.info(f"Created board session {self._settings.board.session_id}")
            self.save()
        return self._settings.board.session_id

    @property
    def service(self) -> ServiceSettings:
        return self._settings.service

    @property
    def ui(self) -> UISettings:
        return self._settings.ui

    def get_export_directory(self) -> Path:
        return self._settings.paths.get_export_dir()

    def set_export_directory(self, path: str):
        """Set the last used export directory."""
        if os.path.isfile(path):
            path = os.path.dirname(path)
        self._settings.paths.last_export_dir = path
        self.save()

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def _ensure_settings_dir(self):
        """Create settings directory if it doesn't exist."""
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> bool:
        """Load settings from file."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root is not an object")
            self._settings = AppSettings.from_dict(data)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading settings from {self._settings_path}: {e}")
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._ensure_settings_dir()
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Error saving settings to {self._settings_path}: {e}")
            return False

    def reset(self):
        """Reset settings to defaults, keeping the board session."""
        session_id = self._settings.board.session_id
        self._settings = AppSettings()
        self._settings.board.session_id = session_id
        self.save()

    def save_window_geometry(self, geometry: bytes, state: bytes):
        """Save window geometry and state."""
        import base64
        self._settings.window_geometry = {
            "geometry": base64.b64encode(geometry).decode("ascii"),
            "state": base64.b64encode(state).decode("ascii"),
        }
        self.save()

    def get_window_geometry(self) -> tuple:
        """Get saved window geometry and state."""
        import base64
        geo = self._settings.window_geometry
        if not geo:
            return None, None

        try:
            geometry = base64.b64decode(geo.get("geometry", ""))
            state = base64.b64decode(geo.get("state", ""))
            return geometry, state
        except (ValueError, TypeError):
            return None, None


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
