"""
Sketch Document - Reading and writing the saved plan JSON

Output envelope:
    {"version": 2, "savedAt": ISO-8601, "sketchName": str,
     "scale": "1 grid cell = 200mm", "scenes": {"before": ..., "after": ...}}

Input only needs a "scenes" field; anything else is ignored. A document that
cannot be read yields two empty scenes instead of an error.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models.scene import SceneContainer
from sketch.sketch_constants import DOCUMENT_VERSION, SCALE_STRING
from utils.debug_logger import debug_logger


@dataclass
class SavedSketch:
    """Everything produced by one save: plan JSON plus before/after PNG data URLs"""
    json: str
    before_png: str = ''
    after_png: str = ''
    sketch_name: str = ''


def parse_document(value: Optional[str]) -> SceneContainer:
    """Load the scenes from a saved document, falling back to empty scenes"""
    if not value:
        return SceneContainer()
    try:
        saved = json.loads(value)
        scenes = saved.get('scenes') if isinstance(saved, dict) else None
        if not scenes:
            return SceneContainer()
        return SceneContainer.from_dict(scenes)
    except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
        debug_logger.warning('SketchDocument', "Unreadable saved sketch, starting empty",
                             {'error': str(e)})
        return SceneContainer()


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix"""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_document(scenes: SceneContainer, sketch_name: str = '',
                   saved_at: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        'version': DOCUMENT_VERSION,
        'savedAt': format_timestamp(saved_at),
        'sketchName': sketch_name,
        'scale': SCALE_STRING,
        'scenes': scenes.to_dict(),
    }


def serialize_document(scenes: SceneContainer, sketch_name: str = '',
                       saved_at: Optional[datetime] = None) -> str:
    return json.dumps(build_document(scenes, sketch_name, saved_at))
