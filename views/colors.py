"""
Color scheme for the board surface.

Dark theme; per-kind fill/stroke pairs match the palette buttons.
"""

from PyQt6.QtGui import QColor

from models.board import ShapeKind


def rgba(r: int, g: int, b: int, a: float) -> QColor:
    """QColor from 0-255 channels and a 0-1 alpha."""
    return QColor(r, g, b, round(a * 255))


# (fill, stroke) per shape kind, keyed by the wire type string
SHAPE_COLORS = {
    ShapeKind.SERVER.value: ("#1e3a6e", "#3b82f6"),
    ShapeKind.DATABASE.value: ("#431407", "#ea580c"),
    ShapeKind.API.value: ("#052e16", "#16a34a"),
    ShapeKind.QUEUE.value: ("#422006", "#d97706"),
    ShapeKind.LOAD_BALANCER.value: ("#2e1065", "#7c3aed"),
    ShapeKind.CLIENT.value: ("#0c2340", "#0ea5e9"),
    ShapeKind.CLOUD.value: ("#1f2937", "#6b7280"),
    "fallback": ("#374151", "#6b7280"),
}

# Palette accent per kind (buttons, drag previews)
PALETTE_COLORS = {
    ShapeKind.SERVER.value: "#3b82f6",
    ShapeKind.DATABASE.value: "#ea580c",
    ShapeKind.API.value: "#16a34a",
    ShapeKind.QUEUE.value: "#d97706",
    ShapeKind.LOAD_BALANCER.value: "#7c3aed",
    ShapeKind.CLIENT.value: "#0ea5e9",
    ShapeKind.CLOUD.value: "#6b7280",
}

COLORS = {
    "background": QColor("#0d1117"),
    "label": QColor("#c9d1d9"),
    "selection": QColor("#60a5fa"),
    "pending_anchor": QColor("#3b82f6"),
    "connector": QColor("#4b5563"),
    "connector_selected": QColor("#60a5fa"),
    "connector_label": QColor("#9ca3af"),
    "path_selected": QColor("#7aa2f7"),
    "grid_dot": rgba(255, 255, 255, 0.055),
}
