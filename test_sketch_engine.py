#!/usr/bin/env python3
"""
Tests for the sketch engine's tool state machine and pointer protocol.
"""

import json
import math
import os
import sys

import pytest

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from models.scene import Fixture, Point, SceneTab
from sketch.sketch_engine import SketchEngine, TOOL_STATUS
from sketch.sketch_tools import ToolType


G = 30


def _tap(engine, px, py):
    engine.pointer_down(px, py)
    engine.pointer_up(px, py)


def _draw_room(engine, corners):
    engine.set_tool(ToolType.WALL)
    for gx, gy in corners:
        _tap(engine, gx * G, gy * G)
    gx, gy = corners[0]
    _tap(engine, gx * G + 5, gy * G + 5)


def _walls(scene):
    return [(p.x, p.y) for p in scene.walls]


@pytest.fixture
def engine():
    return SketchEngine()


@pytest.fixture
def three_sinks(engine):
    # Sinks are 2.5 x 2.0 cells; centers at x = 37.5, 337.5, 637.5 px
    for x in (0, 10, 20):
        engine.scenes.before.fixtures.append(Fixture.from_library('sink', x=x, y=0))
    return engine


# ---------------------- Walls ----------------------

def test_closing_rectangle_commits_walls(engine):
    statuses = []
    engine.status_changed.connect(lambda text: statuses.append(text))

    _draw_room(engine, [(0, 0), (4, 0), (4, 3), (0, 3)])

    assert _walls(engine.active_scene) == [(0, 0), (4, 0), (4, 3), (0, 3)]
    assert engine.active_scene.is_closed
    assert engine.tool_manager.wall_tool.vertices == []
    assert engine.tool_manager.wall_tool.ghost is None
    assert engine.can_undo
    assert statuses[-1] == 'Room closed ✓ — select fixtures to place'


def test_repeated_wall_point_is_ignored(engine):
    engine.set_tool(ToolType.WALL)
    _tap(engine, 0, 0)
    _tap(engine, 4, 7)
    assert len(engine.tool_manager.wall_tool.vertices) == 1


def test_tap_near_first_point_needs_three_points(engine):
    engine.set_tool(ToolType.WALL)
    _tap(engine, 0, 0)
    _tap(engine, 4 * G, 0)
    _tap(engine, 5, 5)
    # Two points only: the tap is not a close, and (0, 0) differs from the last point
    assert engine.active_scene.walls == []
    assert len(engine.tool_manager.wall_tool.vertices) == 3


def test_wall_move_reports_live_length(engine):
    engine.set_tool(ToolType.WALL)
    _tap(engine, 0, 0)
    engine.pointer_move(4 * G + 3, 2)
    assert engine.tool_manager.wall_tool.ghost == Point(4, 0)
    assert engine.status == 'Drawing … 800mm · Tap blue ● to close room'


def test_wall_points_follow_shared_scale(engine):
    engine.scale_manager.cell_pixels = 60
    engine.set_tool(ToolType.WALL)
    _tap(engine, 120, 120)
    assert engine.tool_manager.wall_tool.vertices == [Point(2, 2)]

    engine.start_placing('light')
    engine.pointer_move(150, 150)
    placing = engine.tool_manager.placing_tool.fixture
    assert (placing.x, placing.y) == (2, 2)


def test_entering_wall_tool_clears_selection(three_sinks):
    engine = three_sinks
    engine.selected_index = 1
    engine.set_tool(ToolType.WALL)
    assert engine.selected_index is None
    assert engine.cursor == 'crosshair'
    assert engine.status == TOOL_STATUS[ToolType.WALL]


def test_clear_walls_is_undoable(engine):
    _draw_room(engine, [(0, 0), (4, 0), (4, 3), (0, 3)])
    engine.clear_walls()
    assert engine.active_scene.walls == []
    engine.undo()
    assert len(engine.active_scene.walls) == 4


def test_tool_changes_reported_once_per_switch(engine):
    tools = []
    engine.tool_changed.connect(lambda tool: tools.append(tool))

    engine.set_tool(ToolType.WALL)
    engine.start_placing('sink')
    engine.pointer_down(90, 90)
    engine.set_tool(ToolType.DELETE)

    assert tools == ['wall', 'placing', 'select', 'delete']


# ---------------------- Placing ----------------------

def test_place_fixture_selects_it_and_returns_to_select(engine):
    assert engine.start_placing('toilet')
    placing = engine.tool_manager.placing_tool.fixture
    assert (placing.x, placing.y) == (2.0, 2.0)
    assert engine.status == 'Tap canvas to place Toilet · ESC to cancel'

    engine.pointer_move(150, 150)
    engine.pointer_down(150, 150)

    fixtures = engine.active_scene.fixtures
    assert len(fixtures) == 1
    assert fixtures[0].type == 'toilet'
    # Centered on the half-grid-snapped pointer
    assert fixtures[0].x == pytest.approx(5.0 - 0.9)
    assert fixtures[0].y == pytest.approx(5.0 - 1.75)
    assert engine.selected_index == 0
    assert engine.current_tool == ToolType.SELECT
    assert engine.tool_manager.placing_tool.fixture is None


def test_undo_after_placement_ignores_hover_moves(engine):
    engine.start_placing('sink')
    engine.pointer_down(60, 60)
    engine.pointer_up(60, 60)
    before = [f.to_dict() for f in engine.active_scene.fixtures]

    engine.start_placing('bath')
    for px, py in ((100, 100), (300, 120), (250, 260)):
        engine.pointer_move(px, py)
    engine.pointer_down(400, 300)
    engine.pointer_up(400, 300)
    for px, py in ((10, 10), (420, 310)):
        engine.pointer_move(px, py)
    assert len(engine.active_scene.fixtures) == 2

    assert engine.undo()
    assert [f.to_dict() for f in engine.active_scene.fixtures] == before
    assert engine.selected_index is None
    assert engine.status == 'Undo ✓'


def test_unknown_fixture_type_is_rejected(engine):
    assert not engine.start_placing('jacuzzi')
    assert engine.current_tool == ToolType.SELECT
    assert engine.tool_manager.placing_tool.fixture is None


# ---------------------- Select / gestures ----------------------

def test_drag_moves_fixture_and_undo_restores(three_sinks):
    engine = three_sinks
    engine.pointer_down(37.5, 30)
    assert engine.selected_index == 0
    assert engine.gesture_active
    assert engine.can_undo

    engine.pointer_move(97.5, 30)
    engine.pointer_up(97.5, 30)
    assert not engine.gesture_active
    assert engine.active_scene.fixtures[0].x == 2.0

    engine.undo()
    assert engine.active_scene.fixtures[0].x == 0
    assert engine.selected_index is None


def test_pointer_cancel_keeps_last_applied_move(three_sinks):
    engine = three_sinks
    engine.pointer_down(37.5, 30)
    engine.pointer_move(97.5, 30)
    engine.pointer_cancel()
    assert not engine.gesture_active
    assert engine.active_scene.fixtures[0].x == 2.0

    # Further moves without a gesture change nothing
    engine.pointer_move(300, 300)
    assert engine.active_scene.fixtures[0].x == 2.0


def test_click_on_topmost_fixture(engine):
    engine.scenes.before.fixtures.append(Fixture.from_library('bath', x=0, y=0))
    engine.scenes.before.fixtures.append(Fixture.from_library('sink', x=1, y=1))
    _tap(engine, 60, 60)
    assert engine.selected_index == 1


def test_click_on_empty_space_clears_selection(three_sinks):
    engine = three_sinks
    _tap(engine, 37.5, 30)
    assert engine.selected_index == 0
    _tap(engine, 500, 500)
    assert engine.selected_index is None


def test_rotate_through_handle(three_sinks):
    engine = three_sinks
    _tap(engine, 37.5, 30)
    # Rotate handle sits 28 px above the top edge
    engine.pointer_down(37.5, -28)
    assert engine.tool_manager.select_tool.snapshot.handle.is_rotate
    engine.pointer_move(137.5, 30)
    engine.pointer_up(137.5, 30)
    assert engine.active_scene.fixtures[0].rotation == pytest.approx(math.pi / 2)


def test_resize_through_corner_handle(three_sinks):
    engine = three_sinks
    _tap(engine, 37.5, 30)
    engine.pointer_down(75, 60)
    engine.pointer_move(105, 90)
    engine.pointer_up(105, 90)
    fixture = engine.active_scene.fixtures[0]
    # New half extent is the pointer offset from the pre-gesture center
    assert fixture.w == pytest.approx(4.5)
    assert fixture.h == pytest.approx(4.0)
    assert fixture.x == pytest.approx(0)
    assert fixture.y == pytest.approx(0)


def test_hover_cursor_hints(three_sinks):
    engine = three_sinks
    _tap(engine, 37.5, 30)
    engine.pointer_move(37.5, -28)
    assert engine.cursor == 'grab'
    engine.pointer_move(75, 60)
    assert engine.cursor == 'nwse-resize'
    engine.pointer_move(37.5, 30)
    assert engine.cursor == 'move'
    engine.pointer_move(500, 500)
    assert engine.cursor == 'default'


# ---------------------- Delete ----------------------

def test_delete_tool_adjusts_selection_above_removed(three_sinks):
    engine = three_sinks
    engine.selected_index = 2
    engine.set_tool(ToolType.DELETE)
    engine.pointer_down(37.5, 30)
    assert len(engine.active_scene.fixtures) == 2
    assert engine.selected_index == 1


def test_delete_tool_clears_selection_of_removed(three_sinks):
    engine = three_sinks
    engine.selected_index = 1
    engine.set_tool(ToolType.DELETE)
    engine.pointer_down(337.5, 30)
    assert [f.x for f in engine.active_scene.fixtures] == [0, 20]
    assert engine.selected_index is None


def test_delete_tool_keeps_selection_below_removed(three_sinks):
    engine = three_sinks
    engine.selected_index = 0
    engine.set_tool(ToolType.DELETE)
    engine.pointer_down(637.5, 30)
    assert engine.selected_index == 0


def test_delete_tool_miss_records_nothing(three_sinks):
    engine = three_sinks
    engine.set_tool(ToolType.DELETE)
    engine.pointer_down(500, 500)
    assert len(engine.active_scene.fixtures) == 3
    assert not engine.can_undo


def test_delete_key_removes_selection(three_sinks):
    engine = three_sinks
    engine.key_press('Delete')
    assert len(engine.active_scene.fixtures) == 3

    engine.selected_index = 1
    assert engine.key_press('Backspace') is True
    assert len(engine.active_scene.fixtures) == 2
    assert engine.selected_index is None


# ---------------------- Cancel / keyboard ----------------------

def test_escape_cancels_placing_first(engine):
    engine.start_placing('door')
    engine.key_press('Escape')
    assert engine.current_tool == ToolType.SELECT
    assert engine.tool_manager.placing_tool.fixture is None


def test_escape_discards_wall_in_progress(engine):
    engine.set_tool(ToolType.WALL)
    _tap(engine, 0, 0)
    _tap(engine, 4 * G, 0)
    engine.cancel()
    assert engine.tool_manager.wall_tool.vertices == []
    assert engine.current_tool == ToolType.WALL
    assert engine.active_scene.walls == []


def test_escape_clears_selection(three_sinks):
    engine = three_sinks
    engine.selected_index = 2
    engine.cancel()
    assert engine.selected_index is None


def test_escape_mid_drag_ends_gesture(three_sinks):
    engine = three_sinks
    engine.pointer_down(37.5, 30)
    engine.pointer_move(97.5, 30)
    assert engine.gesture_active

    engine.key_press('Escape')
    assert engine.selected_index is None
    assert not engine.gesture_active

    engine.pointer_move(300, 300)
    assert engine.active_scene.fixtures[0].x == pytest.approx(2)


def test_ctrl_z_undoes(three_sinks):
    engine = three_sinks
    engine.selected_index = 0
    engine.delete_selected()
    assert engine.key_press('z', ctrl=True)
    assert len(engine.active_scene.fixtures) == 3
    assert not engine.key_press('z')


def test_undo_with_empty_history_is_noop(engine):
    assert not engine.undo()
    assert not engine.can_undo


# ---------------------- Tabs ----------------------

def test_switch_to_after_seeds_independent_wall_copy(engine):
    _draw_room(engine, [(0, 0), (4, 0), (4, 3), (0, 3)])
    engine.switch_tab(SceneTab.AFTER)

    before = engine.scenes.before
    after = engine.scenes.after
    assert engine.active_tab == SceneTab.AFTER
    assert _walls(after) == _walls(before)
    assert all(a is not b for a, b in zip(after.walls, before.walls))
    assert engine.status == 'AFTER — walls copied from Before. Add new fixtures.'

    after.walls[0].x = 9
    assert before.walls[0].x == 0


def test_seeding_happens_once(engine):
    _draw_room(engine, [(0, 0), (4, 0), (4, 3), (0, 3)])
    engine.switch_tab(SceneTab.AFTER)
    engine.clear_walls()
    _draw_room(engine, [(0, 0), (6, 0), (6, 6)])
    engine.switch_tab(SceneTab.BEFORE)
    assert engine.status == 'BEFORE sketch'
    engine.switch_tab(SceneTab.AFTER)
    assert _walls(engine.active_scene) == [(0, 0), (6, 0), (6, 6)]


def test_switching_tabs_resets_transient_state(three_sinks):
    engine = three_sinks
    engine.selected_index = 1
    engine.set_tool(ToolType.WALL)
    _tap(engine, 0, 0)
    engine.switch_tab(SceneTab.AFTER)
    assert engine.selected_index is None
    assert engine.tool_manager.wall_tool.vertices == []
    assert engine.current_tool == ToolType.SELECT


# ---------------------- Documents ----------------------

def test_malformed_input_gives_empty_scenes():
    for value in (None, '', 'not json', '[1, 2]', '{"scenes": {"before": {"walls": 5}}}',
                  '{"scenes": {"before": {"walls": [{"x": 1}]}}}'):
        engine = SketchEngine(value)
        assert engine.scenes.before.walls == []
        assert engine.scenes.after.fixtures == []


def test_input_document_extra_fields_ignored():
    value = json.dumps({
        'version': 7,
        'whatever': True,
        'scenes': {
            'before': {'walls': [{'x': 0, 'y': 0}, {'x': 4, 'y': 0}, {'x': 4, 'y': 3}], 'fixtures': []},
            'after': {'walls': [], 'fixtures': [
                {'type': 'light', 'w': 1, 'h': 1, 'rotation': 0, 'label': 'Light',
                 'color': '#fffcb8', 'stroke': '#c8c050', 'x': 2, 'y': 2},
            ]},
        },
    })
    engine = SketchEngine(value)
    assert _walls(engine.scenes.before) == [(0, 0), (4, 0), (4, 3)]
    assert engine.scenes.after.fixtures[0].type == 'light'


def test_save_hides_selection_during_capture(three_sinks):
    engine = three_sinks
    engine.sketch_name = 'Flat 2'
    engine.selected_index = 1

    captured = []

    def fake_renderer(scene, tab):
        captured.append((tab, engine.selected_index))
        return f'data:image/png;base64,{tab.value}'

    emitted = []
    engine.image_renderer = fake_renderer
    engine.saved.connect(lambda saved: emitted.append(saved))

    result = engine.save()

    assert captured == [(SceneTab.BEFORE, None), (SceneTab.AFTER, None)]
    assert engine.selected_index == 1
    assert result.before_png == 'data:image/png;base64,before'
    assert result.after_png == 'data:image/png;base64,after'
    assert emitted == [result]
    assert engine.status == '✅ Saved — Flat 2'

    document = json.loads(result.json)
    assert document['version'] == 2
    assert document['sketchName'] == 'Flat 2'
    assert document['scale'] == '1 grid cell = 200mm'
    assert document['savedAt'].endswith('Z')
    assert document['scenes'] == engine.scenes.to_dict()


def test_saved_document_reloads(engine):
    _draw_room(engine, [(0, 0), (4, 0), (4, 3), (0, 3)])
    engine.start_placing('shower')
    engine.pointer_down(90, 90)
    engine.switch_tab(SceneTab.AFTER)

    result = engine.save()
    reloaded = SketchEngine(result.json)
    assert reloaded.scenes.to_dict() == engine.scenes.to_dict()
    assert result.before_png == ''
    assert engine.status == '✅ Saved — sketch'


def test_load_document_resets_history_and_transient_state(three_sinks):
    engine = three_sinks
    saved = SketchEngine(json.dumps({'scenes': {
        'before': {'walls': [{'x': 0, 'y': 0}, {'x': 5, 'y': 0}, {'x': 5, 'y': 4}], 'fixtures': []},
    }}))

    engine.selected_index = 0
    engine.delete_selected()
    engine.switch_tab(SceneTab.AFTER)
    engine.start_placing('bath')
    assert engine.can_undo

    undo_states = []
    tabs = []
    engine.can_undo_changed.connect(lambda enabled: undo_states.append(enabled))
    engine.tab_changed.connect(lambda tab: tabs.append(tab))

    engine.load_document(saved.save().json)

    assert _walls(engine.scenes.before) == [(0, 0), (5, 0), (5, 4)]
    assert engine.scenes.before.fixtures == []
    assert engine.active_tab == SceneTab.BEFORE
    assert engine.current_tool == ToolType.SELECT
    assert engine.tool_manager.placing_tool.fixture is None
    assert engine.selected_index is None
    assert not engine.can_undo
    assert undo_states == [False]
    assert tabs == ['before']
    assert not engine.undo()


def test_load_unreadable_document_gives_empty_scenes(three_sinks):
    engine = three_sinks
    engine.load_document('{"scenes": ' + '[' * 100000 + ']' * 100000 + '}')
    assert engine.scenes.before.fixtures == []
    assert engine.scenes.after.walls == []
