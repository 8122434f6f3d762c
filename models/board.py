"""
Board data models.

A board is an ordered list of elements (shapes and freehand paths) plus
a list of connectors linking shapes. Element order is paint order, so
the last element is drawn on top.

The JSON snapshot produced by ``BoardModel.to_dict`` is the exact
document exchanged with the board service.
"""

import logging
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .geometry import hit_test

logger = logging.getLogger(__name__)


SHAPE_WIDTH = 130
SHAPE_HEIGHT = 72

DEFAULT_PATH_COLOR = "#a9b1d6"
DEFAULT_PATH_WIDTH = 2.0

PATH_TYPE = "path"


def new_id() -> str:
    """Fresh element/connector identifier."""
    return str(uuid.uuid4())


def _ident(value, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{name} must be a string or integer, got {value!r}")
    return str(value)


def _number(value, name: str) -> float:
    """Finite number from stored data."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _text(value, name: str, default: str = "") -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _point(value) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        raise ValueError(f"point must be an [x, y] pair, got {value!r}")
    return (_number(value[0], "point x"), _number(value[1], "point y"))


class ShapeKind(str, Enum):
    """
    Architectural shape kinds offered by the palette.

    Values are the on-the-wire ``type`` strings.
    """
    SERVER = "server"
    DATABASE = "database"
    API = "api"
    QUEUE = "queue"
    LOAD_BALANCER = "loadbalancer"
    CLIENT = "client"
    CLOUD = "cloud"


@dataclass
class ShapeElement:
    """
    A typed architectural shape.

    Attributes:
        id: Unique identifier
        kind: Shape type string (a ShapeKind value; unknown kinds are kept
              as-is and rendered with the fallback recipe)
        x, y: Top-left corner, changed by dragging
        w, h: Size, fixed at creation
        label: Free text; empty means "use the kind name"
    """
    id: str = field(default_factory=new_id)
    kind: str = ShapeKind.SERVER.value
    x: float = 0.0
    y: float = 0.0
    w: float = SHAPE_WIDTH
    h: float = SHAPE_HEIGHT
    label: str = ""

    def __post_init__(self):
        if isinstance(self.kind, ShapeKind):
            self.kind = self.kind.value

    @property
    def is_path(self) -> bool:
        return False

    @property
    def display_label(self) -> str:
        """Label text shown under the shape."""
        if self.label:
            return self.label
        return self.kind[:1].upper() + self.kind[1:]

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.kind,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShapeElement":
        """
        Build a shape from stored data.

        Raises:
            KeyError, ValueError: if the entry is missing its id/type or
                carries a field of the wrong type
        """
        kind = data["type"]
        if not isinstance(kind, str):
            raise ValueError(f"type must be a string, got {kind!r}")
        return cls(
            id=_ident(data["id"], "id"),
            kind=kind,
            x=_number(data.get("x", 0.0), "x"),
            y=_number(data.get("y", 0.0), "y"),
            w=_number(data.get("w", SHAPE_WIDTH), "w"),
            h=_number(data.get("h", SHAPE_HEIGHT), "h"),
            label=_text(data.get("label"), "label"),
        )


@dataclass
class PathElement:
    """
    A freehand stroke.

    Attributes:
        id: Unique identifier
        points: Ordered (x, y) vertices; fewer than two is inert
        color: Stroke color
        line_width: Stroke width
    """
    id: str = field(default_factory=new_id)
    points: list[tuple[float, float]] = field(default_factory=list)
    color: str = DEFAULT_PATH_COLOR
    line_width: float = DEFAULT_PATH_WIDTH

    @property
    def is_path(self) -> bool:
        return True

    @property
    def is_drawable(self) -> bool:
        return len(self.points) >= 2

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": PATH_TYPE,
            "points": [[px, py] for px, py in self.points],
            "color": self.color,
            "lineWidth": self.line_width,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PathElement":
        raw_points = data.get("points")
        if raw_points is None:
            raw_points = []
        if not isinstance(raw_points, list):
            raise ValueError(f"points must be a list, got {raw_points!r}")
        line_width = _number(data.get("lineWidth", DEFAULT_PATH_WIDTH), "lineWidth")
        return cls(
            id=_ident(data["id"], "id"),
            points=[_point(p) for p in raw_points],
            color=_text(data.get("color"), "color") or DEFAULT_PATH_COLOR,
            line_width=line_width if line_width > 0 else DEFAULT_PATH_WIDTH,
        )


Element = Union[ShapeElement, PathElement]


@dataclass
class Connector:
    """
    A directed, optionally labelled arrow between two shapes.

    ``from_id``/``to_id`` are not checked against the board; a connector
    whose endpoint is missing is simply not drawn.
    """
    id: str = field(default_factory=new_id)
    from_id: str = ""
    to_id: str = ""
    label: str = ""

    def links(self, a: str, b: str) -> bool:
        """True if this connector joins a and b in either direction."""
        return {self.from_id, self.to_id} == {a, b}

    def touches(self, element_id: str) -> bool:
        return self.from_id == element_id or self.to_id == element_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "from": self.from_id,
            "to": self.to_id,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Connector":
        return cls(
            id=_ident(data["id"], "id"),
            from_id=_ident(data["from"], "from"),
            to_id=_ident(data["to"], "to"),
            label=_text(data.get("label"), "label"),
        )


def element_from_dict(data: dict) -> Element:
    """Build the right element variant from its snapshot dict."""
    if data.get("type") == PATH_TYPE:
        return PathElement.from_dict(data)
    return ShapeElement.from_dict(data)


@dataclass
class BoardModel:
    """
    Root model: the element store for one board.

    Elements keep insertion order (= z-order). All mutation goes through
    this class so invariants (unique ids, undirected connector dedup,
    delete cascade) hold in one place.
    """
    elements: list[Element] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)

    # ---- lookup ---------------------------------------------------------

    def get_element(self, element_id: str) -> Optional[Element]:
        """Get an element by ID."""
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def get_shape(self, element_id: str) -> Optional[ShapeElement]:
        """Get a shape by ID (paths are ignored)."""
        el = self.get_element(element_id)
        if el is None or el.is_path:
            return None
        return el

    def get_connector(self, connector_id: str) -> Optional[Connector]:
        """Get a connector by ID."""
        for conn in self.connectors:
            if conn.id == connector_id:
                return conn
        return None

    def shapes(self) -> list[ShapeElement]:
        """All shapes in paint order."""
        return [el for el in self.elements if not el.is_path]

    @property
    def shape_count(self) -> int:
        return len(self.shapes())

    def find_shape_at(self, px: float, py: float) -> Optional[ShapeElement]:
        """Topmost shape under the point. Paths are never hit."""
        return hit_test(self.shapes(), px, py)

    def has_connector_between(self, a: str, b: str) -> bool:
        return any(conn.links(a, b) for conn in self.connectors)

    def is_empty(self) -> bool:
        return not self.elements and not self.connectors

    # ---- mutation -------------------------------------------------------

    def add_element(self, element: Element) -> Element:
        """Append an element on top of the stack."""
        if self.get_element(element.id) is not None:
            raise ValueError(f"Duplicate element id: {element.id}")
        self.elements.append(element)
        logger.debug(f"Added {type(element).__name__} {element.id}")
        return element

    def add_shape(self, kind: Union[ShapeKind, str], x: float, y: float,
                  label: str = "") -> ShapeElement:
        """Create a shape of the standard size with its top-left at (x, y)."""
        shape = ShapeElement(kind=kind, x=x, y=y, label=label)
        self.add_element(shape)
        return shape

    def add_path(self, points: list[tuple[float, float]],
                 color: str = DEFAULT_PATH_COLOR,
                 line_width: float = DEFAULT_PATH_WIDTH) -> PathElement:
        """Create a freehand path from captured points."""
        path = PathElement(points=list(points), color=color, line_width=line_width)
        self.add_element(path)
        return path

    def add_connector(self, from_id: str, to_id: str, label: str = "") -> Optional[Connector]:
        """
        Connect two elements.

        Returns None (and changes nothing) for a self-connection or when
        the unordered pair is already connected.
        """
        if from_id == to_id:
            return None
        if self.has_connector_between(from_id, to_id):
            logger.debug(f"Connector {from_id} <-> {to_id} already exists")
            return None

        conn = Connector(from_id=from_id, to_id=to_id, label=label)
        self.connectors.append(conn)
        logger.debug(f"Added connector {conn.id}: {from_id} -> {to_id}")
        return conn

    def move_shape(self, element_id: str, x: float, y: float) -> bool:
        """Reposition a shape. Paths cannot be moved."""
        shape = self.get_shape(element_id)
        if shape is None:
            return False
        shape.x = x
        shape.y = y
        return True

    def set_label(self, element_id: str, label: str) -> bool:
        """Set the label of a shape or connector."""
        target = self.get_shape(element_id) or self.get_connector(element_id)
        if target is None:
            return False
        target.label = label
        return True

    def remove_element(self, element_id: str) -> Optional[Element]:
        """Remove an element and every connector attached to it."""
        for i, el in enumerate(self.elements):
            if el.id == element_id:
                break
        else:
            return None

        self.connectors = [c for c in self.connectors if not c.touches(element_id)]
        logger.debug(f"Removed element {element_id}")
        return self.elements.pop(i)

    def remove_connector(self, connector_id: str) -> Optional[Connector]:
        """Remove a connector by ID."""
        for i, conn in enumerate(self.connectors):
            if conn.id == connector_id:
                return self.connectors.pop(i)
        return None

    def remove(self, item_id: str) -> bool:
        """Remove whatever element or connector carries this ID."""
        if self.remove_element(item_id) is not None:
            return True
        return self.remove_connector(item_id) is not None

    def clear(self):
        """Remove all elements and connectors."""
        self.elements.clear()
        self.connectors.clear()

    # ---- snapshot -------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize to the board snapshot document."""
        return {
            "elements": [el.to_dict() for el in self.elements],
            "connectors": [conn.to_dict() for conn in self.connectors],
        }

    def load_snapshot(self, data) -> bool:
        """
        Replace the board contents with a snapshot.

        Anything that is not a mapping with list-typed ``elements`` and
        ``connectors`` is treated as "no board" and leaves the model
        untouched. Individual malformed entries are skipped.

        Returns:
            True if the snapshot was applied
        """
        if not isinstance(data, dict):
            return False
        raw_elements = data.get("elements")
        raw_connectors = data.get("connectors")
        if not isinstance(raw_elements, list) or not isinstance(raw_connectors, list):
            return False

        elements = []
        seen = set()
        for item in raw_elements:
            try:
                el = element_from_dict(item)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed element {item!r}: {e}")
                continue
            if el.id in seen:
                continue
            seen.add(el.id)
            elements.append(el)

        connectors = []
        for item in raw_connectors:
            try:
                connectors.append(Connector.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed connector {item!r}: {e}")

        self.elements = elements
        self.connectors = connectors
        return True

    @classmethod
    def from_dict(cls, data) -> "BoardModel":
        """Build a board from a snapshot; malformed input gives an empty board."""
        board = cls()
        board.load_snapshot(data)
        return board
