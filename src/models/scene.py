"""
Scene model - walls and fixtures for the before/after sketch pair

Everything here is stored in grid cells. Pixels only appear in the sketch
engine and the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from data.fixtures import get_fixture_defaults


class SceneTab(Enum):
    """Which of the two scenes is being edited"""
    BEFORE = "before"
    AFTER = "after"


@dataclass
class Point:
    """Wall vertex in grid cells"""
    x: float
    y: float

    def copy(self) -> 'Point':
        return Point(self.x, self.y)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        return cls(x=float(data['x']), y=float(data['y']))


@dataclass
class Fixture:
    """A placed fixture

    (x, y) is the top-left corner of the unrotated box and (w, h) its extents,
    all in grid cells. rotation is in radians about the box center.
    """
    type: str
    w: float
    h: float
    rotation: float = 0.0
    label: str = ''
    color: str = '#ffffff'
    stroke: str = '#808080'
    x: float = 0.0
    y: float = 0.0

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def center_y(self) -> float:
        return self.y + self.h / 2

    def copy(self) -> 'Fixture':
        return Fixture(
            type=self.type, w=self.w, h=self.h, rotation=self.rotation,
            label=self.label, color=self.color, stroke=self.stroke,
            x=self.x, y=self.y,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'w': self.w,
            'h': self.h,
            'rotation': self.rotation,
            'label': self.label,
            'color': self.color,
            'stroke': self.stroke,
            'x': self.x,
            'y': self.y,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Fixture':
        """Rebuild a fixture from saved data; missing cosmetic fields fall back to the library"""
        fixture_type = str(data['type'])
        defaults = get_fixture_defaults(fixture_type) or {}
        return cls(
            type=fixture_type,
            w=float(data['w']),
            h=float(data['h']),
            rotation=float(data.get('rotation') or 0.0),
            label=str(data.get('label', defaults.get('label', fixture_type))),
            color=str(data.get('color', defaults.get('color', '#ffffff'))),
            stroke=str(data.get('stroke', defaults.get('stroke', '#808080'))),
            x=float(data['x']),
            y=float(data['y']),
        )

    @classmethod
    def from_library(cls, fixture_type: str, x: float = 0.0, y: float = 0.0) -> Optional['Fixture']:
        """Create a fixture with the library defaults for its type"""
        defaults = get_fixture_defaults(fixture_type)
        if defaults is None:
            return None
        return cls(
            type=fixture_type,
            w=defaults['w'],
            h=defaults['h'],
            rotation=0.0,
            label=defaults['label'],
            color=defaults['color'],
            stroke=defaults['stroke'],
            x=x,
            y=y,
        )


@dataclass
class Scene:
    """One sketch: a wall polygon plus fixtures in z-order (last is on top)

    More than two wall points means a closed room; closure is implied.
    """
    walls: List[Point] = field(default_factory=list)
    fixtures: List[Fixture] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return len(self.walls) > 2

    def copy(self) -> 'Scene':
        return Scene(
            walls=[p.copy() for p in self.walls],
            fixtures=[f.copy() for f in self.fixtures],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'walls': [p.to_dict() for p in self.walls],
            'fixtures': [f.to_dict() for f in self.fixtures],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Scene':
        walls = data.get('walls') or []
        fixtures = data.get('fixtures') or []
        if not isinstance(walls, list) or not isinstance(fixtures, list):
            raise TypeError("Scene walls and fixtures must be lists")
        return cls(
            walls=[Point.from_dict(p) for p in walls],
            fixtures=[Fixture.from_dict(f) for f in fixtures],
        )


@dataclass
class SceneContainer:
    """The before/after pair edited side by side"""
    before: Scene = field(default_factory=Scene)
    after: Scene = field(default_factory=Scene)

    def scene(self, tab: SceneTab) -> Scene:
        return self.before if tab == SceneTab.BEFORE else self.after

    def copy(self) -> 'SceneContainer':
        return SceneContainer(before=self.before.copy(), after=self.after.copy())

    def seed_after_walls(self) -> bool:
        """Copy the before walls into an empty after scene

        One-time and one-way: the copy is independent of the original.
        Returns True when walls were copied.
        """
        if self.after.walls or not self.before.walls:
            return False
        self.after.walls = [p.copy() for p in self.before.walls]
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'before': self.before.to_dict(),
            'after': self.after.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SceneContainer':
        if not isinstance(data, dict):
            raise TypeError("Scenes must be an object")
        return cls(
            before=Scene.from_dict(data.get('before') or {}),
            after=Scene.from_dict(data.get('after') or {}),
        )
