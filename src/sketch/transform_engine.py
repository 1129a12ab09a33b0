"""
Transform Engine - Drag, rotate and anchor-preserving resize of a fixture

Each gesture works from an InteractionSnapshot captured once at pointer-down.
Every pointer-move recomputes the fixture from that snapshot and the current
pointer position alone, so the result does not depend on how many move
events arrived in between.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from models.scene import Fixture
from sketch.geometry import (
    pointer_angle,
    snap_rotation,
    to_local,
    to_world,
    world_to_half_grid,
)
from sketch.hit_testing import Handle, fixture_frame
from sketch.sketch_constants import CELL_PIXELS, MIN_FIXTURE_EXTENT


class GestureMode(Enum):
    DRAG = "drag"
    ROTATE = "rotate"
    RESIZE = "resize"


@dataclass(frozen=True)
class InteractionSnapshot:
    """Pointer start (pixels) and the fixture geometry (grid cells) at gesture start"""
    mode: GestureMode
    start_x: float
    start_y: float
    x: float
    y: float
    w: float
    h: float
    rotation: float
    handle: Optional[Handle] = None

    def to_log_data(self):
        return {
            'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h,
            'start_rotation': self.rotation,
            'handle': self.handle.id if self.handle else None,
        }


def begin_gesture(mode: GestureMode, fixture: Fixture, px: float, py: float,
                  handle: Optional[Handle] = None) -> InteractionSnapshot:
    """Capture the snapshot a gesture will work from"""
    if mode == GestureMode.RESIZE and (handle is None or handle.is_rotate):
        raise ValueError("Resize gestures need a resize handle")
    return InteractionSnapshot(
        mode=mode,
        start_x=px,
        start_y=py,
        x=fixture.x,
        y=fixture.y,
        w=fixture.w,
        h=fixture.h,
        rotation=fixture.rotation or 0.0,
        handle=handle,
    )


def apply_drag(fixture: Fixture, snapshot: InteractionSnapshot, px: float, py: float,
               cell_pixels: float = CELL_PIXELS):
    """Translate by the half-grid-snapped pointer delta since gesture start"""
    fixture.x = snapshot.x + (world_to_half_grid(px, cell_pixels) - world_to_half_grid(snapshot.start_x, cell_pixels))
    fixture.y = snapshot.y + (world_to_half_grid(py, cell_pixels) - world_to_half_grid(snapshot.start_y, cell_pixels))


def apply_rotate(fixture: Fixture, px: float, py: float, cell_pixels: float = CELL_PIXELS):
    """Point the rotate handle at the pointer, quantized to 15 degrees

    The pivot is the fixture's live center.
    """
    _, _, cx, cy = fixture_frame(fixture, cell_pixels)
    fixture.rotation = snap_rotation(pointer_angle(px, py, cx, cy))


def resize_anchor_world(snapshot: InteractionSnapshot,
                        cell_pixels: float = CELL_PIXELS) -> Tuple[float, float]:
    """World position (pixels) of the point opposite the dragged handle, before resizing"""
    handle = snapshot.handle
    ocx = (snapshot.x + snapshot.w / 2) * cell_pixels
    ocy = (snapshot.y + snapshot.h / 2) * cell_pixels
    alx = -handle.fx * snapshot.w * cell_pixels
    aly = -handle.fy * snapshot.h * cell_pixels
    return to_world(alx, aly, ocx, ocy, snapshot.rotation)


def compute_resize(snapshot: InteractionSnapshot, px: float, py: float,
                   cell_pixels: float = CELL_PIXELS) -> Tuple[float, float, float, float]:
    """New (x, y, w, h) for a resize gesture with the pointer at (px, py)

    1. The pointer goes into the fixture's pre-gesture local frame.
    2. The handle's local coordinate gives the new half extent on each axis
       the handle sits on; the other axis keeps its size.
    3. The point opposite the handle keeps its world position: the new center
       is that anchor minus the rotated new anchor offset.
    """
    handle = snapshot.handle
    rot = snapshot.rotation
    ocx = (snapshot.x + snapshot.w / 2) * cell_pixels
    ocy = (snapshot.y + snapshot.h / 2) * cell_pixels
    lx, ly = to_local(px, py, ocx, ocy, rot)

    nw = snapshot.w
    nh = snapshot.h
    if handle.fx != 0:
        nw = max(MIN_FIXTURE_EXTENT, (lx if handle.fx > 0 else -lx) * 2 / cell_pixels)
    if handle.fy != 0:
        nh = max(MIN_FIXTURE_EXTENT, (ly if handle.fy > 0 else -ly) * 2 / cell_pixels)

    awx, awy = resize_anchor_world(snapshot, cell_pixels)
    nalx = -handle.fx * nw * cell_pixels
    naly = -handle.fy * nh * cell_pixels
    ncx, ncy = to_world(-nalx, -naly, awx, awy, rot)

    return ncx / cell_pixels - nw / 2, ncy / cell_pixels - nh / 2, nw, nh


def apply_resize(fixture: Fixture, snapshot: InteractionSnapshot, px: float, py: float,
                 cell_pixels: float = CELL_PIXELS):
    fixture.x, fixture.y, fixture.w, fixture.h = compute_resize(snapshot, px, py, cell_pixels)


def apply_gesture(fixture: Fixture, snapshot: InteractionSnapshot, px: float, py: float,
                  cell_pixels: float = CELL_PIXELS):
    """Update the fixture for a pointer-move during the gesture"""
    if snapshot.mode == GestureMode.DRAG:
        apply_drag(fixture, snapshot, px, py, cell_pixels)
    elif snapshot.mode == GestureMode.ROTATE:
        apply_rotate(fixture, px, py, cell_pixels)
    elif snapshot.mode == GestureMode.RESIZE:
        apply_resize(fixture, snapshot, px, py, cell_pixels)
