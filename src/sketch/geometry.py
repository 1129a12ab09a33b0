"""
Geometry - Coordinate conversions and rotation transforms for the sketch engine

Three spaces are in play:
    world  - pixels on the sketch surface (pointer events arrive here)
    grid   - grid cells; everything stored in a scene uses this unit
    local  - pixels in a fixture's own unrotated frame, origin at its center

Every rotated hit test and resize is done in local space through
to_local/to_world, never with ad hoc trigonometry.
"""

import math
from typing import Tuple

from sketch.sketch_constants import CELL_PIXELS, ROTATION_STEP


def round_half_up(value: float) -> float:
    """Round to the nearest integer; exact halves go toward +infinity"""
    return math.floor(value + 0.5)


def to_local(px: float, py: float, cx: float, cy: float, rot: float) -> Tuple[float, float]:
    """Rotate a world point into the frame centered at (cx, cy) with angle rot"""
    dx = px - cx
    dy = py - cy
    co = math.cos(rot)
    si = math.sin(rot)
    return dx * co + dy * si, -dx * si + dy * co


def to_world(lx: float, ly: float, cx: float, cy: float, rot: float) -> Tuple[float, float]:
    """Inverse of to_local"""
    co = math.cos(rot)
    si = math.sin(rot)
    return cx + lx * co - ly * si, cy + lx * si + ly * co


def world_to_grid(v: float, cell_pixels: float = CELL_PIXELS) -> float:
    """Snap a pixel coordinate to the nearest whole grid cell"""
    return round_half_up(v / cell_pixels)


def world_to_half_grid(v: float, cell_pixels: float = CELL_PIXELS) -> float:
    """Snap a pixel coordinate to the nearest half grid cell"""
    return round_half_up(v / cell_pixels * 2) / 2


def grid_to_world(v: float, cell_pixels: float = CELL_PIXELS) -> float:
    return v * cell_pixels


def d2(ax: float, ay: float, bx: float, by: float) -> float:
    """Squared distance between two points"""
    return (ax - bx) ** 2 + (ay - by) ** 2


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.sqrt(d2(ax, ay, bx, by))


def snap_rotation(angle: float, step: float = ROTATION_STEP) -> float:
    """Quantize an angle (radians) to the nearest multiple of step"""
    return round_half_up(angle / step) * step


def pointer_angle(px: float, py: float, cx: float, cy: float) -> float:
    """Rotation that points a fixture's top edge at (px, py)

    Zero rotation has the rotate handle straight above the center, hence
    the quarter-turn offset on atan2.
    """
    return math.atan2(py - cy, px - cx) + math.pi / 2

