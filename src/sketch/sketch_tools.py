"""
Sketch Tools - Select, wall, placing and delete tools for the sketch engine

Tools only hold transient, non-persisted state (in-progress wall points, the
fixture being placed, the active gesture). Scene mutations and undo recording
are done by the SketchEngine.
"""

from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from models.scene import Fixture, Point
from sketch.geometry import (
    d2,
    grid_to_world,
    world_to_grid,
    world_to_half_grid,
)
from sketch.scale_manager import ScaleManager
from sketch.sketch_constants import (
    PLACEMENT_SPAWN_X,
    PLACEMENT_SPAWN_Y,
    WALL_CLOSE_RADIUS,
)
from sketch.transform_engine import InteractionSnapshot


class ToolType(Enum):
    """Available sketch tools"""
    SELECT = "select"
    WALL = "wall"
    PLACING = "placing"
    DELETE = "delete"


class SketchTool(QObject):
    """Base class for sketch tools"""

    updated = Signal()  # Emitted when the tool's preview state changes

    cursor = 'default'

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        super().__init__()
        self.scale_manager = scale_manager or ScaleManager()

    @property
    def cell_pixels(self) -> float:
        return self.scale_manager.cell_pixels

    def cancel(self):
        """Drop any transient state"""
        pass

    @property
    def is_busy(self) -> bool:
        """True while the tool holds state that cancel() would discard"""
        return False


class SelectTool(SketchTool):
    """Selection/transform tool

    A gesture is active exactly while a snapshot is held.
    """

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        super().__init__(scale_manager)
        self.snapshot: Optional[InteractionSnapshot] = None

    @property
    def gesture_active(self) -> bool:
        return self.snapshot is not None

    def begin_gesture(self, snapshot: InteractionSnapshot):
        self.snapshot = snapshot

    def end_gesture(self) -> Optional[InteractionSnapshot]:
        snapshot = self.snapshot
        self.snapshot = None
        return snapshot

    def cancel(self):
        self.snapshot = None

    @property
    def is_busy(self) -> bool:
        return self.gesture_active


class WallTool(SketchTool):
    """Tool for drawing the room outline by tapping grid points"""

    cursor = 'crosshair'

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        super().__init__(scale_manager)
        self.vertices: List[Point] = []
        self.ghost: Optional[Point] = None

    @property
    def is_busy(self) -> bool:
        return len(self.vertices) > 0

    def can_close_at(self, px: float, py: float) -> bool:
        """True when a tap at (px, py) should close the room

        Needs at least three points and a tap near the first one.
        """
        if len(self.vertices) < 3:
            return False
        first = self.vertices[0]
        fx = grid_to_world(first.x, self.cell_pixels)
        fy = grid_to_world(first.y, self.cell_pixels)
        return d2(px, py, fx, fy) < WALL_CLOSE_RADIUS ** 2

    def add_vertex(self, px: float, py: float) -> bool:
        """Append the grid point under (px, py); repeats of the last point are ignored"""
        point = Point(world_to_grid(px, self.cell_pixels), world_to_grid(py, self.cell_pixels))
        if self.vertices:
            last = self.vertices[-1]
            if last.x == point.x and last.y == point.y:
                return False
        self.vertices.append(point)
        self.updated.emit()
        return True

    def update_ghost(self, px: float, py: float) -> Point:
        """Move the preview point for the next segment"""
        self.ghost = Point(world_to_grid(px, self.cell_pixels), world_to_grid(py, self.cell_pixels))
        self.updated.emit()
        return self.ghost

    def take_polygon(self) -> List[Point]:
        """Hand over the finished outline and reset the tool"""
        points = self.vertices
        self.vertices = []
        self.ghost = None
        return points

    def cancel(self):
        self.vertices = []
        self.ghost = None


class PlacingTool(SketchTool):
    """Tool for placing a fixture from the library"""

    cursor = 'crosshair'

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        super().__init__(scale_manager)
        self.fixture: Optional[Fixture] = None

    @property
    def is_busy(self) -> bool:
        return self.fixture is not None

    def start(self, fixture_type: str) -> Optional[Fixture]:
        """Create the floating fixture for fixture_type at the spawn position"""
        self.fixture = Fixture.from_library(fixture_type, PLACEMENT_SPAWN_X, PLACEMENT_SPAWN_Y)
        self.updated.emit()
        return self.fixture

    def track(self, px: float, py: float):
        """Center the floating fixture on the pointer, snapped to half cells"""
        if self.fixture is None:
            return
        self.fixture.x = world_to_half_grid(px, self.cell_pixels) - self.fixture.w / 2
        self.fixture.y = world_to_half_grid(py, self.cell_pixels) - self.fixture.h / 2
        self.updated.emit()

    def take_fixture(self, px: float, py: float) -> Optional[Fixture]:
        """Return the fixture to commit at (px, py) and reset the tool"""
        if self.fixture is None:
            return None
        self.track(px, py)
        fixture = self.fixture
        self.fixture = None
        return fixture

    def cancel(self):
        self.fixture = None


class DeleteTool(SketchTool):
    """Tap a fixture to remove it; the engine performs the removal"""


class SketchToolManager(QObject):
    """Manages sketch tools and their state"""

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        super().__init__()
        self.scale_manager = scale_manager or ScaleManager()
        self.tools = {
            ToolType.SELECT: SelectTool(self.scale_manager),
            ToolType.WALL: WallTool(self.scale_manager),
            ToolType.PLACING: PlacingTool(self.scale_manager),
            ToolType.DELETE: DeleteTool(self.scale_manager),
        }

        self.current_tool_type = ToolType.SELECT
        self.current_tool = self.tools[self.current_tool_type]

    @property
    def select_tool(self) -> SelectTool:
        return self.tools[ToolType.SELECT]

    @property
    def wall_tool(self) -> WallTool:
        return self.tools[ToolType.WALL]

    @property
    def placing_tool(self) -> PlacingTool:
        return self.tools[ToolType.PLACING]

    def set_tool(self, tool_type: ToolType):
        """Set the active tool; the previous tool's transient state is dropped"""
        if tool_type not in self.tools:
            return
        for tool in self.tools.values():
            tool.cancel()
        self.current_tool_type = tool_type
        self.current_tool = self.tools[tool_type]

    def cancel_all(self):
        for tool in self.tools.values():
            tool.cancel()
