#!/usr/bin/env python3
"""
Tests for coordinate conversions, snapping and rotation helpers.
"""

import math
import os
import sys

import pytest

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from sketch.geometry import (
    d2,
    distance,
    grid_to_world,
    pointer_angle,
    round_half_up,
    snap_rotation,
    to_local,
    to_world,
    world_to_grid,
    world_to_half_grid,
)
from sketch.sketch_constants import ROTATION_STEP


def test_round_half_up_rounds_halves_toward_positive_infinity():
    assert round_half_up(0.5) == 1
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(-1.5) == -1
    assert round_half_up(-1.6) == -2


def test_world_to_grid_snaps_to_whole_cells():
    assert world_to_grid(44) == 1
    assert world_to_grid(45) == 2
    assert world_to_grid(0) == 0
    assert world_to_grid(-14) == 0


def test_world_to_half_grid_snaps_to_half_cells():
    assert world_to_half_grid(37) == 1.0
    assert world_to_half_grid(38) == 1.5
    assert world_to_half_grid(75) == 2.5


def test_grid_to_world_uses_cell_size():
    assert grid_to_world(3) == 90
    assert grid_to_world(3, cell_pixels=20) == 60


def test_to_local_without_rotation_is_a_translation():
    lx, ly = to_local(110, 50, 100, 40, 0.0)
    assert lx == pytest.approx(10)
    assert ly == pytest.approx(10)


def test_to_local_quarter_turn():
    # A point below the center of a fixture turned 90 degrees lies on its +x axis
    lx, ly = to_local(100, 150, 100, 100, math.pi / 2)
    assert lx == pytest.approx(50)
    assert ly == pytest.approx(0, abs=1e-9)


@pytest.mark.parametrize("rot", [0.0, 0.3, math.pi / 2, 2.1, math.pi, 4.9])
def test_to_world_inverts_to_local(rot):
    cx, cy = 137.0, -42.5
    for px, py in ((0, 0), (250.5, 13.25), (-80, 400)):
        lx, ly = to_local(px, py, cx, cy, rot)
        wx, wy = to_world(lx, ly, cx, cy, rot)
        assert wx == pytest.approx(px)
        assert wy == pytest.approx(py)


def test_distances():
    assert d2(0, 0, 3, 4) == 25
    assert distance(0, 0, 3, 4) == pytest.approx(5)


def test_snap_rotation_quantizes_to_fifteen_degrees():
    assert snap_rotation(0.3) == pytest.approx(ROTATION_STEP)
    assert snap_rotation(math.radians(22)) == pytest.approx(math.radians(15))
    assert snap_rotation(math.radians(23)) == pytest.approx(math.radians(30))
    assert snap_rotation(0.0) == 0


def test_pointer_angle_is_zero_straight_above_center():
    assert pointer_angle(50, 0, 50, 50) == pytest.approx(0)
    assert pointer_angle(100, 50, 50, 50) == pytest.approx(math.pi / 2)
    assert pointer_angle(50, 100, 50, 50) == pytest.approx(math.pi)
