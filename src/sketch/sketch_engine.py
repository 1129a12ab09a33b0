"""
Sketch Engine - Tool state machine and pointer/keyboard protocol

The engine owns the before/after scenes, the undo history, the current
selection and the active tool. Hosts feed it pointer events in surface pixels
and repaint from render_state() whenever scene_changed fires.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from models.scene import Fixture, Point, Scene, SceneContainer, SceneTab
from sketch.hit_testing import hit_fixture, hit_fixture_list, hit_handle
from sketch.scale_manager import ScaleManager
from sketch.sketch_constants import CELL_PIXELS, MAX_UNDO, MM_PER_CELL
from sketch.sketch_document import SavedSketch, parse_document, serialize_document
from sketch.sketch_tools import SketchToolManager, ToolType
from sketch.transform_engine import GestureMode, apply_gesture, begin_gesture
from sketch.undo_manager import UndoManager
from utils.debug_logger import debug_logger


TOOL_STATUS = {
    ToolType.SELECT: 'Click to select · Drag to move · Corner handles resize · Green ● rotates',
    ToolType.WALL: 'Tap to add wall points · Tap the blue ● to close the room',
    ToolType.DELETE: 'Tap a fixture to delete it',
}

# Renders one scene to a PNG data URL for the save output
ImageRenderer = Callable[[Scene, SceneTab], str]


@dataclass
class RenderState:
    """Everything a renderer needs to draw one frame"""
    scene: Scene
    wall_points: List[Point]
    ghost_point: Optional[Point]
    placing_fixture: Optional[Fixture]
    selected_index: Optional[int]


class SketchEngine(QObject):
    """Interactive floor-plan sketch: walls, fixtures, tools and undo"""

    status_changed = Signal(str)
    scene_changed = Signal()
    can_undo_changed = Signal(bool)
    tool_changed = Signal(str)
    tab_changed = Signal(str)
    cursor_changed = Signal(str)
    saved = Signal(object)  # SavedSketch

    def __init__(self, value: Optional[str] = None, sketch_name: str = '',
                 cell_pixels: float = CELL_PIXELS, mm_per_cell: float = MM_PER_CELL,
                 max_undo: int = MAX_UNDO):
        super().__init__()
        self.scale_manager = ScaleManager(cell_pixels, mm_per_cell)
        self.tool_manager = SketchToolManager(self.scale_manager)
        self.undo_manager = UndoManager(max_undo)
        self.undo_manager.can_undo_changed.connect(self.can_undo_changed.emit)

        self.scenes = parse_document(value)
        self.active_tab = SceneTab.BEFORE
        self.selected_index: Optional[int] = None
        self.sketch_name = sketch_name
        self.cursor = 'default'
        self.status = 'Tap Draw Walls to begin'
        self.image_renderer: Optional[ImageRenderer] = None
        # Optional SketchRecordManager; saves are stored through it when set
        self.record_manager = None

        for tool in self.tool_manager.tools.values():
            tool.updated.connect(self.scene_changed.emit)

    # ---------------------- State accessors ----------------------
    @property
    def cell_pixels(self) -> float:
        return self.scale_manager.cell_pixels

    @property
    def active_scene(self) -> Scene:
        return self.scenes.scene(self.active_tab)

    @property
    def current_tool(self) -> ToolType:
        return self.tool_manager.current_tool_type

    @property
    def selected_fixture(self) -> Optional[Fixture]:
        if self.selected_index is None:
            return None
        fixtures = self.active_scene.fixtures
        if 0 <= self.selected_index < len(fixtures):
            return fixtures[self.selected_index]
        return None

    @property
    def gesture_active(self) -> bool:
        return self.tool_manager.select_tool.gesture_active

    @property
    def can_undo(self) -> bool:
        return self.undo_manager.can_undo

    def render_state(self) -> RenderState:
        wall_tool = self.tool_manager.wall_tool
        return RenderState(
            scene=self.active_scene,
            wall_points=list(wall_tool.vertices),
            ghost_point=wall_tool.ghost,
            placing_fixture=self.tool_manager.placing_tool.fixture,
            selected_index=self.selected_index,
        )

    def _set_status(self, message: str):
        self.status = message
        self.status_changed.emit(message)

    def _set_cursor(self, cursor: str):
        if cursor != self.cursor:
            self.cursor = cursor
            self.cursor_changed.emit(cursor)

    def _record_undo(self):
        self.undo_manager.record_before_change(self.scenes)

    # ---------------------- Document ----------------------
    def load_document(self, value: Optional[str]):
        """Replace both scenes with a saved document; unreadable input gives empty scenes

        History, selection and any tool in progress are dropped and the
        before tab becomes active.
        """
        self.scenes = parse_document(value)
        self.undo_manager.clear()
        self.active_tab = SceneTab.BEFORE
        self._reset_transient()
        self.tab_changed.emit(self.active_tab.value)
        self.set_tool(ToolType.SELECT)
        debug_logger.info('SketchEngine', "Loaded sketch document", {'sketch_name': self.sketch_name})

    def reload_latest(self) -> bool:
        """Reopen the most recent stored save of the current sketch name"""
        if self.record_manager is None:
            return False
        record = self.record_manager.load_latest(self.sketch_name or None)
        if record is None:
            self._set_status(f'No saved sketch named {self.sketch_name or "sketch"}')
            return False
        self.load_document(record.plan_json)
        self._set_status(f'Reopened {record.sketch_name or "sketch"}')
        return True

    def _reset_transient(self):
        self.tool_manager.cancel_all()
        self.selected_index = None

    # ---------------------- Tool actions ----------------------
    def set_tool(self, tool_type: ToolType):
        """Switch tools; placing is entered through start_placing()"""
        if tool_type == ToolType.PLACING:
            return
        self.tool_manager.set_tool(tool_type)
        if tool_type == ToolType.WALL:
            self.selected_index = None
        self._set_cursor(self.tool_manager.current_tool.cursor)
        self.tool_changed.emit(tool_type.value)
        self._set_status(TOOL_STATUS.get(tool_type, ''))
        self.scene_changed.emit()

    def start_placing(self, fixture_type: str) -> bool:
        """Float a library fixture under the pointer until the next tap"""
        self.tool_manager.set_tool(ToolType.PLACING)
        fixture = self.tool_manager.placing_tool.start(fixture_type)
        if fixture is None:
            debug_logger.warning('SketchEngine', "Unknown fixture type", {'type': fixture_type})
            self.set_tool(ToolType.SELECT)
            return False
        self._set_cursor(self.tool_manager.current_tool.cursor)
        self.tool_changed.emit(ToolType.PLACING.value)
        self._set_status(f'Tap canvas to place {fixture.label} · ESC to cancel')
        self.scene_changed.emit()
        return True

    def switch_tab(self, tab: SceneTab):
        """Make tab the active scene; the after scene inherits the before walls once"""
        if tab == SceneTab.AFTER and self.scenes.seed_after_walls():
            debug_logger.info('SketchEngine', "Seeded after walls from before",
                              {'count': len(self.scenes.after.walls)})
        self.active_tab = tab
        self._reset_transient()
        self.tab_changed.emit(tab.value)
        self.set_tool(ToolType.SELECT)
        if tab == SceneTab.AFTER:
            self._set_status('AFTER — walls copied from Before. Add new fixtures.')
        else:
            self._set_status('BEFORE sketch')

    def clear_walls(self):
        self._record_undo()
        self.active_scene.walls = []
        self.tool_manager.wall_tool.cancel()
        debug_logger.info('SketchEngine', "Walls cleared", {'tab': self.active_tab.value})
        self.scene_changed.emit()

    def delete_selected(self) -> bool:
        """Remove the selected fixture; nothing happens without a selection"""
        if self.selected_fixture is None:
            return False
        self._record_undo()
        removed = self.active_scene.fixtures.pop(self.selected_index)
        debug_logger.info('SketchEngine', "Deleted selected fixture",
                          {'type': removed.type, 'index': self.selected_index})
        self.selected_index = None
        self.tool_manager.select_tool.cancel()
        self.scene_changed.emit()
        return True

    def undo(self) -> bool:
        previous = self.undo_manager.undo()
        if previous is None:
            return False
        self.scenes = previous
        self.selected_index = None
        self.tool_manager.select_tool.cancel()
        self._set_status('Undo ✓')
        self.scene_changed.emit()
        return True

    def cancel(self):
        """Escape: leave placing, else drop the wall in progress, else deselect"""
        if self.current_tool == ToolType.PLACING:
            self.set_tool(ToolType.SELECT)
        elif self.tool_manager.wall_tool.is_busy:
            self.tool_manager.wall_tool.cancel()
            self.scene_changed.emit()
        else:
            self.selected_index = None
            self.tool_manager.select_tool.cancel()
            self.scene_changed.emit()

    def key_press(self, key: str, ctrl: bool = False) -> bool:
        """Keyboard contract: Ctrl+Z undo, Delete/Backspace delete, Escape cancel

        Returns True when the key was handled.
        """
        if ctrl and key.lower() == 'z':
            self.undo()
            return True
        if key in ('Delete', 'Backspace'):
            self.delete_selected()
            return True
        if key == 'Escape':
            self.cancel()
            return True
        return False

    # ---------------------- Pointer events ----------------------
    def pointer_down(self, px: float, py: float):
        tool = self.current_tool
        if tool == ToolType.WALL:
            self._wall_down(px, py)
        elif tool == ToolType.PLACING:
            self._placing_down(px, py)
        elif tool == ToolType.SELECT:
            self._select_down(px, py)
        elif tool == ToolType.DELETE:
            self._delete_down(px, py)

    def pointer_move(self, px: float, py: float):
        tool = self.current_tool
        if tool == ToolType.WALL:
            wall_tool = self.tool_manager.wall_tool
            ghost = wall_tool.update_ghost(px, py)
            if wall_tool.vertices:
                mm = self.scale_manager.calculate_distance(wall_tool.vertices[-1], ghost)
                if mm > 0:
                    self._set_status(f'Drawing … {mm}mm · Tap blue ● to close room')
            return
        if tool == ToolType.PLACING:
            self.tool_manager.placing_tool.track(px, py)
            return

        snapshot = self.tool_manager.select_tool.snapshot
        if snapshot is None:
            if tool == ToolType.SELECT:
                self._update_hover_cursor(px, py)
            return

        fixture = self.selected_fixture
        if fixture is None:
            return
        apply_gesture(fixture, snapshot, px, py, self.cell_pixels)
        self.scene_changed.emit()

    def pointer_up(self, px: float = 0.0, py: float = 0.0):
        """Ends any active gesture; the last applied move stands"""
        snapshot = self.tool_manager.select_tool.end_gesture()
        if snapshot is not None:
            debug_logger.log_gesture_end('SketchEngine', snapshot.mode.value, cancelled=False)

    def pointer_cancel(self):
        """Input lost mid-gesture: stop without applying anything further"""
        snapshot = self.tool_manager.select_tool.end_gesture()
        if snapshot is not None:
            debug_logger.log_gesture_end('SketchEngine', snapshot.mode.value, cancelled=True)
        self.scene_changed.emit()

    def _wall_down(self, px: float, py: float):
        wall_tool = self.tool_manager.wall_tool
        if wall_tool.can_close_at(px, py):
            self._record_undo()
            self.active_scene.walls = wall_tool.take_polygon()
            debug_logger.info('SketchEngine', "Room closed",
                              {'count': len(self.active_scene.walls), 'tab': self.active_tab.value})
            self._set_status('Room closed ✓ — select fixtures to place')
            self.scene_changed.emit()
            return
        wall_tool.add_vertex(px, py)

    def _placing_down(self, px: float, py: float):
        placing_tool = self.tool_manager.placing_tool
        if placing_tool.fixture is None:
            return
        self._record_undo()
        fixture = placing_tool.take_fixture(px, py)
        fixtures = self.active_scene.fixtures
        fixtures.append(fixture)
        debug_logger.info('SketchEngine', "Placed fixture",
                          {'type': fixture.type, 'x': fixture.x, 'y': fixture.y})
        self.set_tool(ToolType.SELECT)
        self.selected_index = len(fixtures) - 1
        self.scene_changed.emit()

    def _select_down(self, px: float, py: float):
        fixtures = self.active_scene.fixtures
        selected = self.selected_fixture
        if selected is not None:
            handle = hit_handle(selected, px, py, self.cell_pixels)
            if handle is not None:
                # Undo restores the pre-gesture fixture
                self._record_undo()
                mode = GestureMode.ROTATE if handle.is_rotate else GestureMode.RESIZE
                self._begin_gesture(mode, selected, px, py, handle)
                return

        index = hit_fixture_list(fixtures, px, py, self.cell_pixels)
        if index is not None:
            self.selected_index = index
            self._record_undo()
            self._begin_gesture(GestureMode.DRAG, fixtures[index], px, py)
            self.scene_changed.emit()
            return

        self.selected_index = None
        self.scene_changed.emit()

    def _begin_gesture(self, mode: GestureMode, fixture: Fixture, px: float, py: float, handle=None):
        snapshot = begin_gesture(mode, fixture, px, py, handle)
        self.tool_manager.select_tool.begin_gesture(snapshot)
        debug_logger.log_gesture_start('SketchEngine', mode.value, self.selected_index,
                                       snapshot.to_log_data())

    def _delete_down(self, px: float, py: float):
        fixtures = self.active_scene.fixtures
        index = hit_fixture_list(fixtures, px, py, self.cell_pixels)
        if index is None:
            return
        self._record_undo()
        removed = fixtures.pop(index)
        debug_logger.info('SketchEngine', "Deleted fixture", {'type': removed.type, 'index': index})
        if self.selected_index == index:
            self.selected_index = None
        elif self.selected_index is not None and self.selected_index > index:
            self.selected_index -= 1
        self.scene_changed.emit()

    def _update_hover_cursor(self, px: float, py: float):
        fixture = self.selected_fixture
        if fixture is None:
            return
        handle = hit_handle(fixture, px, py, self.cell_pixels)
        if handle is not None:
            self._set_cursor('grab' if handle.is_rotate else 'nwse-resize')
        elif hit_fixture(fixture, px, py, self.cell_pixels):
            self._set_cursor('move')
        else:
            self._set_cursor('default')

    # ---------------------- Save ----------------------
    def save(self) -> SavedSketch:
        """Build the plan JSON and before/after images

        The selection is hidden while the images are captured and restored
        afterwards.
        """
        previous_selection = self.selected_index
        self.selected_index = None
        try:
            before_png = ''
            after_png = ''
            if self.image_renderer is not None:
                before_png = self.image_renderer(self.scenes.before, SceneTab.BEFORE)
                after_png = self.image_renderer(self.scenes.after, SceneTab.AFTER)
            result = SavedSketch(
                json=serialize_document(self.scenes, self.sketch_name),
                before_png=before_png,
                after_png=after_png,
                sketch_name=self.sketch_name,
            )
        finally:
            self.selected_index = previous_selection

        if self.record_manager is not None:
            self.record_manager.save_sketch(result)
        debug_logger.info('SketchEngine', "Sketch saved", {'sketch_name': self.sketch_name})
        self.saved.emit(result)
        self._set_status(f'✅ Saved — {self.sketch_name or "sketch"}')
        self.scene_changed.emit()
        return result
