"""
Hit Testing - Find the fixture or control handle under the pointer

All tests happen in the fixture's local (unrotated) frame, so a rotated
fixture is picked exactly where it is drawn.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from models.scene import Fixture
from sketch.geometry import d2, grid_to_world, to_local
from sketch.sketch_constants import (
    CELL_PIXELS,
    FIXTURE_HIT_MARGIN,
    RESIZE_HANDLE_HIT_D2,
    ROTATE_HANDLE_HIT_D2,
    ROTATE_HANDLE_OFFSET,
)


@dataclass(frozen=True)
class Handle:
    """Control point on a fixture's bounding box

    (fx, fy) are fractions of the box extents relative to its center:
    fx = +-0.5 puts the handle on the right/left edge, fy = +-0.5 on the
    bottom/top edge.
    """
    id: str
    fx: float
    fy: float

    @property
    def is_rotate(self) -> bool:
        return self.id == 'rotate'


HANDLES: List[Handle] = [
    Handle('tl', -0.5, -0.5), Handle('tm', 0.0, -0.5), Handle('tr', 0.5, -0.5),
    Handle('mr', 0.5, 0.0), Handle('br', 0.5, 0.5), Handle('bm', 0.0, 0.5),
    Handle('bl', -0.5, 0.5), Handle('ml', -0.5, 0.0),
]

ROTATE_HANDLE = Handle('rotate', 0.0, -0.5)

HANDLES_BY_ID = {h.id: h for h in HANDLES}


def fixture_frame(fixture: Fixture, cell_pixels: float = CELL_PIXELS) -> Tuple[float, float, float, float]:
    """Pixel width, height and center of a fixture: (pw, ph, cx, cy)"""
    pw = fixture.w * cell_pixels
    ph = fixture.h * cell_pixels
    cx = grid_to_world(fixture.x, cell_pixels) + pw / 2
    cy = grid_to_world(fixture.y, cell_pixels) + ph / 2
    return pw, ph, cx, cy


def rotate_handle_local(ph: float) -> Tuple[float, float]:
    """Local position of the rotate handle above the top edge"""
    return 0.0, -ph / 2 - ROTATE_HANDLE_OFFSET


def handle_local(handle: Handle, pw: float, ph: float) -> Tuple[float, float]:
    return handle.fx * pw, handle.fy * ph


def hit_handle(fixture: Fixture, px: float, py: float,
               cell_pixels: float = CELL_PIXELS) -> Optional[Handle]:
    """Return the handle under (px, py); the rotate handle wins over resize handles"""
    pw, ph, cx, cy = fixture_frame(fixture, cell_pixels)
    lx, ly = to_local(px, py, cx, cy, fixture.rotation or 0.0)

    rx, ry = rotate_handle_local(ph)
    if d2(lx, ly, rx, ry) < ROTATE_HANDLE_HIT_D2:
        return ROTATE_HANDLE

    for handle in HANDLES:
        hx, hy = handle_local(handle, pw, ph)
        if d2(lx, ly, hx, hy) < RESIZE_HANDLE_HIT_D2:
            return handle
    return None


def hit_fixture(fixture: Fixture, px: float, py: float,
                cell_pixels: float = CELL_PIXELS) -> bool:
    """True when (px, py) is on the fixture body (with a small margin)"""
    pw, ph, cx, cy = fixture_frame(fixture, cell_pixels)
    lx, ly = to_local(px, py, cx, cy, fixture.rotation or 0.0)
    return abs(lx) <= pw / 2 + FIXTURE_HIT_MARGIN and abs(ly) <= ph / 2 + FIXTURE_HIT_MARGIN


def hit_fixture_list(fixtures: List[Fixture], px: float, py: float,
                     cell_pixels: float = CELL_PIXELS) -> Optional[int]:
    """Index of the topmost fixture under (px, py), or None

    Fixtures are drawn in list order, so the last one is on top and is
    tested first.
    """
    for index in range(len(fixtures) - 1, -1, -1):
        if hit_fixture(fixtures[index], px, py, cell_pixels):
            return index
    return None
