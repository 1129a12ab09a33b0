#!/usr/bin/env python3
"""
Tests for the bounded undo history.
"""

import os
import sys

import pytest

# Add src directory to path
CURRENT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(CURRENT_DIR, 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from models.scene import Fixture, Point, SceneContainer
from sketch.undo_manager import UndoManager


def _scenes_with(count):
    scenes = SceneContainer()
    for i in range(count):
        scenes.before.fixtures.append(Fixture.from_library('sink', x=i * 5, y=0))
    return scenes


def test_undo_on_empty_history_is_noop():
    manager = UndoManager()
    assert not manager.can_undo
    assert manager.undo() is None


def test_depth_is_capped_and_oldest_dropped():
    manager = UndoManager(max_depth=3)
    for count in range(5):
        manager.record_before_change(_scenes_with(count))
    assert manager.depth == 3

    restored = [len(manager.undo().before.fixtures) for _ in range(3)]
    assert restored == [4, 3, 2]
    assert manager.undo() is None


def test_default_depth_is_fifty():
    manager = UndoManager()
    scenes = SceneContainer()
    for _ in range(60):
        manager.record_before_change(scenes)
    assert manager.depth == 50


def test_snapshot_is_independent_of_live_scenes():
    manager = UndoManager()
    scenes = _scenes_with(1)
    scenes.before.walls = [Point(0, 0), Point(4, 0), Point(4, 3)]
    manager.record_before_change(scenes)

    scenes.before.fixtures[0].x = 99
    scenes.before.walls.append(Point(0, 3))

    previous = manager.undo()
    assert previous.before.fixtures[0].x == 0
    assert len(previous.before.walls) == 3


def test_can_undo_signal():
    manager = UndoManager()
    seen = []
    manager.can_undo_changed.connect(lambda value: seen.append(value))

    manager.record_before_change(SceneContainer())
    manager.record_before_change(SceneContainer())
    manager.undo()
    manager.undo()
    assert seen == [True, True, True, False]


def test_clear_empties_history():
    manager = UndoManager()
    manager.record_before_change(SceneContainer())
    manager.clear()
    assert manager.depth == 0
    assert not manager.can_undo


def test_depth_must_be_positive():
    with pytest.raises(ValueError):
        UndoManager(max_depth=0)
