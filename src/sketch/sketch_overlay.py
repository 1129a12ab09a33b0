"""
Sketch Overlay - Widget hosting the sketch engine on a QPainter surface
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QWidget

from models.scene import Scene, SceneTab
from sketch.sketch_engine import SketchEngine
from sketch.sketch_renderer import MIN_IMAGE_HEIGHT, MIN_IMAGE_WIDTH, SketchRenderer
from utils.debug_logger import debug_logger


CURSOR_SHAPES = {
    'default': Qt.ArrowCursor,
    'crosshair': Qt.CrossCursor,
    'grab': Qt.OpenHandCursor,
    'move': Qt.SizeAllCursor,
    'nwse-resize': Qt.SizeFDiagCursor,
}

KEY_NAMES = {
    Qt.Key_Escape: 'Escape',
    Qt.Key_Delete: 'Delete',
    Qt.Key_Backspace: 'Backspace',
    Qt.Key_Z: 'z',
}


class SketchOverlay(QWidget):
    """Interactive sketch surface

    Mouse and keyboard input goes straight to the engine; the widget repaints
    whenever the engine reports a scene change.
    """

    def __init__(self, engine: SketchEngine = None, parent=None):
        super().__init__(parent)
        self.engine = engine or SketchEngine()
        self.renderer = SketchRenderer(self.engine.scale_manager)

        self.setMinimumSize(MIN_IMAGE_WIDTH, MIN_IMAGE_HEIGHT)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

        self.engine.image_renderer = self.render_scene_png
        self.engine.scene_changed.connect(self.update)
        self.engine.cursor_changed.connect(self._apply_cursor)

    def render_scene_png(self, scene: Scene, tab: SceneTab) -> str:
        """Snapshot a scene at the current surface size"""
        return self.renderer.render_scene_png(scene, self.width(), self.height(), tab,
                                              self.engine.sketch_name)

    def _apply_cursor(self, cursor: str):
        self.setCursor(CURSOR_SHAPES.get(cursor, Qt.ArrowCursor))

    # ---------------------- Mouse/keyboard events ----------------------
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            pos = event.position()
            self.setFocus()
            self.engine.pointer_down(pos.x(), pos.y())

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.engine.pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            pos = event.position()
            self.engine.pointer_up(pos.x(), pos.y())

    def leaveEvent(self, event):
        if self.engine.gesture_active:
            self.engine.pointer_cancel()
        super().leaveEvent(event)

    def keyPressEvent(self, event):
        key = KEY_NAMES.get(event.key())
        ctrl = bool(event.modifiers() & (Qt.ControlModifier | Qt.MetaModifier))
        if key is not None and self.engine.key_press(key, ctrl):
            self.update()
            return
        super().keyPressEvent(event)

    # ---------------------- Painting ----------------------
    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor('white'))
            self.renderer.paint(painter, self.engine.render_state(), self.width(), self.height())
        except Exception as e:
            debug_logger.error('SketchOverlay', "Error drawing sketch", e)
        finally:
            painter.end()
