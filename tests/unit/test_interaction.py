"""
Unit tests for the interaction controller.

Tests:
- Select tool: selection and dragging
- Draw tool: freehand capture thresholds
- Connector tool: anchor handling and dedup
- Eraser tool and keyboard delete with cascade
- Label editing (commit / discard)
- Tool switching and Escape cancelling sessions
- Host commands (add shape, clear all)
"""

import pytest
from models.board import ShapeKind, SHAPE_WIDTH, SHAPE_HEIGHT
from services.interaction import (
    InteractionController, Tool, ADD_SHAPE_STEP, LABEL_EDIT_OFFSET,
)


def record_signals(controller: InteractionController) -> list:
    events = []
    controller.boardChanged.connect(lambda: events.append("board"))
    controller.overlayChanged.connect(lambda: events.append("overlay"))
    controller.labelEditStarted.connect(lambda _s: events.append("edit_started"))
    controller.labelEditFinished.connect(lambda: events.append("edit_finished"))
    return events


class TestSelectTool:
    """Tests for select and drag."""

    def test_click_selects_and_starts_drag(self, simple_controller):
        simple_controller.pointer_down(110, 120)
        assert simple_controller.selected_id == "s1"
        assert simple_controller.is_dragging
        drag = simple_controller.drag_session
        assert (drag.offset_x, drag.offset_y) == (10, 20)

    def test_click_empty_clears_selection(self, simple_controller):
        simple_controller.select("s1")
        simple_controller.pointer_down(5, 5)
        assert simple_controller.selected_id is None
        assert not simple_controller.is_dragging

    def test_drag_keeps_grab_offset(self, simple_controller):
        board = simple_controller.board
        simple_controller.pointer_down(110, 120)
        simple_controller.pointer_move(210, 320)
        shape = board.get_shape("s1")
        assert (shape.x, shape.y) == (200, 300)
        assert (shape.w, shape.h) == (SHAPE_WIDTH, SHAPE_HEIGHT)

    def test_drag_emits_board_changed(self, simple_controller):
        events = record_signals(simple_controller)
        simple_controller.pointer_down(110, 120)
        simple_controller.pointer_move(111, 121)
        assert "board" in events

    def test_pointer_up_ends_drag(self, simple_controller):
        simple_controller.pointer_down(110, 120)
        simple_controller.pointer_up()
        simple_controller.pointer_move(500, 500)
        shape = simple_controller.board.get_shape("s1")
        assert (shape.x, shape.y) == (100, 100)

    def test_topmost_shape_selected(self, simple_controller):
        board = simple_controller.board
        top = board.add_shape("api", 120, 110)
        simple_controller.pointer_down(125, 115)
        assert simple_controller.selected_id == top.id

    def test_move_without_session_is_noop(self, simple_controller):
        events = record_signals(simple_controller)
        simple_controller.pointer_move(50, 50)
        assert events == []


class TestDrawTool:
    """Tests for freehand capture."""

    def test_preview_accumulates(self, controller):
        controller.set_tool(Tool.DRAW)
        controller.pointer_down(0, 0)
        controller.pointer_move(5, 5)
        assert controller.path_preview == [(0, 0), (5, 5)]

    def test_two_point_capture_discarded(self, controller):
        """Test a 2-point stroke is dropped on pointer-up."""
        controller.set_tool(Tool.DRAW)
        controller.pointer_down(0, 0)
        controller.pointer_move(5, 5)
        controller.pointer_up()
        assert controller.board.elements == []
        assert controller.path_preview is None

    def test_three_point_capture_committed(self, controller):
        """Test a 3-point stroke becomes a PathElement."""
        events = record_signals(controller)
        controller.set_tool(Tool.DRAW)
        controller.pointer_down(0, 0)
        controller.pointer_move(5, 5)
        controller.pointer_move(10, 3)
        controller.pointer_up()

        assert len(controller.board.elements) == 1
        path = controller.board.elements[0]
        assert path.is_path
        assert path.points == [(0, 0), (5, 5), (10, 3)]
        assert path.color == "#a9b1d6"
        assert path.line_width == 2
        assert controller.path_preview is None
        assert "board" in events

    def test_single_click_discarded(self, controller):
        controller.set_tool(Tool.DRAW)
        controller.pointer_down(0, 0)
        controller.pointer_up()
        assert controller.board.elements == []

    def test_drawing_over_shape_does_not_select(self, simple_controller):
        simple_controller.set_tool(Tool.DRAW)
        simple_controller.pointer_down(110, 110)
        assert simple_controller.selected_id is None
        assert not simple_controller.is_dragging


class TestConnectorTool:
    """Tests for connector creation."""

    def test_first_click_sets_anchor(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        assert simple_controller.pending_anchor_id == "s1"

    def test_second_click_creates_connector(self, simple_controller):
        board = simple_controller.board
        board.connectors.clear()
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.pointer_down(410, 110)

        assert len(board.connectors) == 1
        conn = board.connectors[0]
        assert conn.from_id == "s1"
        assert conn.to_id == "s2"
        assert conn.label == ""
        assert simple_controller.pending_anchor_id is None

    def test_reverse_duplicate_clears_anchor(self, simple_controller):
        """Test B->A when A->B exists adds nothing but still clears the anchor."""
        board = simple_controller.board
        events = record_signals(simple_controller)
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(410, 110)
        simple_controller.pointer_down(110, 110)

        assert len(board.connectors) == 1
        assert simple_controller.pending_anchor_id is None
        assert "board" not in events

    def test_same_shape_is_noop(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.pointer_down(120, 120)
        assert simple_controller.pending_anchor_id == "s1"
        assert len(simple_controller.board.connectors) == 1

    def test_miss_cancels_anchor(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.pointer_down(5, 5)
        assert simple_controller.pending_anchor_id is None

    def test_paths_cannot_be_connected(self, mixed_board):
        ctrl = InteractionController(mixed_board)
        ctrl.set_tool(Tool.CONNECTOR)
        ctrl.pointer_down(20, 25)
        assert ctrl.pending_anchor_id is None


class TestEraserAndDelete:
    """Tests for eraser tool and keyboard delete."""

    def test_eraser_deletes_with_cascade(self, simple_controller):
        board = simple_controller.board
        simple_controller.select("s1")
        simple_controller.set_tool(Tool.ERASER)
        simple_controller.pointer_down(110, 110)

        assert board.get_element("s1") is None
        assert board.connectors == []
        assert simple_controller.selected_id is None

    def test_eraser_miss_is_noop(self, simple_controller):
        simple_controller.set_tool(Tool.ERASER)
        simple_controller.pointer_down(5, 5)
        assert len(simple_controller.board.elements) == 2

    def test_delete_selected(self, simple_controller):
        simple_controller.pointer_down(410, 110)
        simple_controller.pointer_up()
        assert simple_controller.delete_selected()
        assert simple_controller.board.get_element("s2") is None
        assert simple_controller.board.connectors == []
        assert simple_controller.selected_id is None

    def test_delete_selected_connector(self, simple_controller):
        simple_controller.select("c1")
        assert simple_controller.delete_selected()
        assert simple_controller.board.connectors == []
        assert len(simple_controller.board.elements) == 2

    def test_click_on_connector_does_not_select_it(self, simple_controller):
        """Test pointer selection picks shapes only, even on a connector."""
        simple_controller.pointer_down(315, 136)
        simple_controller.pointer_up()
        assert simple_controller.selected_id is None

    def test_delete_without_selection(self, simple_controller):
        assert not simple_controller.delete_selected()
        assert len(simple_controller.board.elements) == 2

    def test_delete_clears_pending_anchor(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.select("s1")
        simple_controller.delete_selected()
        assert simple_controller.pending_anchor_id is None


class TestToolSwitching:
    """Tests for tool changes and cancellation."""

    def test_default_tool(self, controller):
        assert controller.tool == Tool.SELECT

    def test_set_tool_by_name(self, controller):
        controller.set_tool("eraser")
        assert controller.tool == Tool.ERASER

    def test_unknown_tool_ignored(self, controller):
        controller.set_tool("lasso")
        assert controller.tool == Tool.SELECT

    def test_tool_changed_signal(self, controller):
        seen = []
        controller.toolChanged.connect(seen.append)
        controller.set_tool(Tool.DRAW)
        controller.set_tool(Tool.DRAW)
        assert seen == [Tool.DRAW]

    def test_switch_mid_drag_cancels_drag(self, simple_controller):
        """Test changing tools while dragging stops the drag."""
        simple_controller.pointer_down(110, 110)
        assert simple_controller.is_dragging
        simple_controller.set_tool(Tool.DRAW)
        assert not simple_controller.is_dragging

        simple_controller.pointer_move(400, 400)
        shape = simple_controller.board.get_shape("s1")
        assert (shape.x, shape.y) == (100, 100)

    def test_switch_mid_capture_discards_path(self, controller):
        controller.set_tool(Tool.DRAW)
        controller.pointer_down(0, 0)
        controller.pointer_move(1, 1)
        controller.pointer_move(2, 2)
        controller.set_tool(Tool.SELECT)
        controller.pointer_up()
        assert controller.path_preview is None
        assert controller.board.elements == []

    def test_switch_clears_pending_anchor(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.set_tool(Tool.SELECT)
        assert simple_controller.pending_anchor_id is None

    def test_reselecting_same_tool_still_cancels(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.set_tool(Tool.CONNECTOR)
        assert simple_controller.pending_anchor_id is None

    def test_escape_cancels_everything(self, simple_controller):
        simple_controller.set_tool(Tool.CONNECTOR)
        simple_controller.pointer_down(110, 110)
        simple_controller.double_click(410, 110)
        simple_controller.cancel_all()
        assert simple_controller.pending_anchor_id is None
        assert simple_controller.label_edit is None


class TestLabelEditing:
    """Tests for inline label editing."""

    def test_double_click_opens_editor(self, simple_controller):
        events = record_signals(simple_controller)
        session = simple_controller.double_click(110, 110)
        assert session is simple_controller.label_edit
        assert session.element_id == "s1"
        assert session.anchor_x == 100 + SHAPE_WIDTH / 2
        assert session.anchor_y == 100 + SHAPE_HEIGHT + LABEL_EDIT_OFFSET
        assert session.text == ""
        assert "edit_started" in events

    def test_editor_starts_with_current_label(self, simple_controller):
        session = simple_controller.double_click(410, 110)
        assert session.text == "Orders DB"

    def test_double_click_empty_is_noop(self, simple_controller):
        assert simple_controller.double_click(5, 5) is None
        assert simple_controller.label_edit is None

    def test_commit(self, simple_controller):
        events = record_signals(simple_controller)
        simple_controller.double_click(110, 110)
        simple_controller.update_label_text("Gateway")
        assert simple_controller.commit_label_edit()
        assert simple_controller.board.get_shape("s1").label == "Gateway"
        assert simple_controller.label_edit is None
        assert "edit_finished" in events
        assert "board" in events

    def test_escape_discards(self, simple_controller):
        """Test Escape during a label edit leaves the label unchanged."""
        simple_controller.double_click(410, 110)
        simple_controller.update_label_text("Something else")
        simple_controller.cancel_all()
        assert simple_controller.board.get_shape("s2").label == "Orders DB"
        assert simple_controller.label_edit is None

    def test_pointer_down_commits(self, simple_controller):
        """Test clicking the canvas while editing commits the text."""
        simple_controller.double_click(110, 110)
        simple_controller.update_label_text("Web")
        simple_controller.pointer_down(5, 5)
        assert simple_controller.board.get_shape("s1").label == "Web"
        assert simple_controller.label_edit is None

    def test_commit_without_session(self, simple_controller):
        assert not simple_controller.commit_label_edit()

    def test_deleting_edited_shape_closes_editor(self, simple_controller):
        simple_controller.double_click(110, 110)
        simple_controller.select("s1")
        simple_controller.delete_selected()
        assert simple_controller.label_edit is None

    def test_update_without_session_ignored(self, simple_controller):
        simple_controller.update_label_text("nothing")
        assert simple_controller.label_edit is None


class TestCommands:
    """Tests for host-facing commands."""

    def test_add_shape_centered(self, controller):
        shape = controller.add_shape(ShapeKind.SERVER, 1000, 600)
        assert (shape.x, shape.y) == (500 - 65, 300 - 36)
        assert shape.kind == "server"

    def test_add_shape_cascades(self, controller):
        first = controller.add_shape("api", 1000, 600)
        second = controller.add_shape("api", 1000, 600)
        assert second.x - first.x == ADD_SHAPE_STEP
        assert second.y - first.y == ADD_SHAPE_STEP

    def test_add_shape_cascade_wraps(self, controller):
        shapes = [controller.add_shape("queue", 1000, 600) for _ in range(9)]
        assert (shapes[8].x, shapes[8].y) == (shapes[0].x, shapes[0].y)

    def test_add_shape_emits_board_changed(self, controller):
        events = record_signals(controller)
        controller.add_shape("cloud", 800, 600)
        assert events == ["board"]

    def test_clear_all(self, simple_controller):
        simple_controller.select("s1")
        simple_controller.clear_all()
        assert simple_controller.board.is_empty()
        assert simple_controller.selected_id is None

    def test_cancel_operation_keeps_label_edit(self, simple_controller):
        simple_controller.double_click(110, 110)
        simple_controller.cancel_operation()
        assert simple_controller.label_edit is not None

    def test_replace_board_contents_resets_state(self, simple_controller):
        simple_controller.pointer_down(110, 110)
        simple_controller.replace_board_contents()
        assert simple_controller.selected_id is None
        assert not simple_controller.is_dragging
