"""
Sketch components: engine, tools, rendering and the interactive overlay
"""

from .scale_manager import ScaleManager
from .sketch_tools import SketchToolManager, ToolType
from .undo_manager import UndoManager
from .sketch_document import SavedSketch, parse_document, serialize_document
from .sketch_engine import SketchEngine, RenderState
from .sketch_renderer import SketchRenderer
from .sketch_overlay import SketchOverlay

__all__ = [
    'ScaleManager',
    'SketchToolManager',
    'ToolType',
    'UndoManager',
    'SavedSketch',
    'parse_document',
    'serialize_document',
    'SketchEngine',
    'RenderState',
    'SketchRenderer',
    'SketchOverlay'
]
