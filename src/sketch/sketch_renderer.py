"""
Sketch Renderer - QPainter drawing of scenes, tool previews and saved images
"""

import math
from typing import List, Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QImage, QPainter, QPainterPath, QPen

from data.fixtures import get_fixture_shape
from models.scene import Fixture, Point, Scene, SceneTab
from sketch.hit_testing import HANDLES, fixture_frame, rotate_handle_local
from sketch.scale_manager import ScaleManager
from sketch.sketch_constants import DEFAULT_SKETCH_NAME, MAJOR_GRID_EVERY, MIN_MEASURE_CELLS


GRID_MINOR_COLOR = QColor('#dde0e8')
GRID_MAJOR_COLOR = QColor('#c0c5d5')
ROOM_FILL_COLOR = QColor('#f8f9fc')
WALL_COLOR = QColor('#1d2230')
WALL_PROGRESS_COLOR = QColor('#3a4870')
ACCENT_COLOR = QColor('#4f8ef7')
ROTATE_COLOR = QColor('#3ecf8e')
ROTATE_STROKE_COLOR = QColor('#20a068')
LABEL_BACKGROUND = QColor(10, 12, 28, 217)
MEASURE_BACKGROUND = QColor(15, 18, 32, 224)
MEASURE_PROGRESS_BACKGROUND = QColor(20, 30, 70, 230)
MEASURE_PROGRESS_TEXT = QColor('#7fb0ff')
FOOTER_COLOR = QColor(100, 110, 130, 128)

MIN_IMAGE_WIDTH = 600
MIN_IMAGE_HEIGHT = 400


def mono_font(pixel_size: float, bold: bool = False) -> QFont:
    font = QFont("Consolas")
    font.setStyleHint(QFont.Monospace)
    font.setPixelSize(max(1, int(round(pixel_size))))
    font.setBold(bold)
    return font


def image_to_data_url(image: QImage) -> str:
    """Encode a QImage as a base64 PNG data URL"""
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.WriteOnly)
    image.save(buffer, "PNG")
    buffer.close()
    encoded = bytes(data.toBase64()).decode('ascii')
    return f"data:image/png;base64,{encoded}"


class SketchRenderer:
    """Draws sketch scenes with a QPainter

    Used both by the interactive overlay (with tool previews and selection)
    and for the before/after images produced on save.
    """

    def __init__(self, scale_manager: Optional[ScaleManager] = None):
        self.scale_manager = scale_manager or ScaleManager()

    @property
    def cell_pixels(self) -> float:
        return self.scale_manager.cell_pixels

    def gp(self, v: float) -> float:
        return v * self.cell_pixels

    # ---------------------- Frames ----------------------
    def paint(self, painter: QPainter, state, width: int, height: int):
        """Draw one interactive frame from a RenderState"""
        painter.setRenderHint(QPainter.Antialiasing)
        self.draw_grid(painter, width, height)
        scene = state.scene
        if scene.walls:
            self.draw_walls(painter, scene.walls)
        if state.wall_points:
            self.draw_wall_in_progress(painter, state.wall_points, state.ghost_point)
        for i, fixture in enumerate(scene.fixtures):
            self.draw_fixture(painter, fixture, selected=(i == state.selected_index))
        if state.placing_fixture is not None:
            painter.setOpacity(0.5)
            self.draw_fixture(painter, state.placing_fixture, selected=False)
            painter.setOpacity(1.0)

    def render_scene_image(self, scene: Scene, width: int, height: int,
                           tab: SceneTab = SceneTab.BEFORE, sketch_name: str = '') -> QImage:
        """Render a scene for export: white background, no selection or previews"""
        width = max(MIN_IMAGE_WIDTH, int(width))
        height = max(MIN_IMAGE_HEIGHT, int(height))
        image = QImage(width, height, QImage.Format_ARGB32)
        image.fill(QColor('white'))

        painter = QPainter(image)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            self.draw_grid(painter, width, height)
            if scene.walls:
                self.draw_walls(painter, scene.walls, markers=False)
            for fixture in scene.fixtures:
                self.draw_fixture(painter, fixture, selected=False, detailed=False)
            self.draw_footer(painter, width, height, tab, sketch_name)
        finally:
            painter.end()
        return image

    def render_scene_png(self, scene: Scene, width: int, height: int,
                         tab: SceneTab = SceneTab.BEFORE, sketch_name: str = '') -> str:
        return image_to_data_url(self.render_scene_image(scene, width, height, tab, sketch_name))

    # ---------------------- Grid ----------------------
    def draw_grid(self, painter: QPainter, width: int, height: int):
        step = self.cell_pixels
        if step <= 0:
            return
        for color, line_width, every in ((GRID_MINOR_COLOR, 0.5, step),
                                         (GRID_MAJOR_COLOR, 1.0, step * MAJOR_GRID_EVERY)):
            painter.setPen(QPen(color, line_width))
            x = 0.0
            while x <= width:
                painter.drawLine(QPointF(x, 0), QPointF(x, height))
                x += every
            y = 0.0
            while y <= height:
                painter.drawLine(QPointF(0, y), QPointF(width, y))
                y += every

    # ---------------------- Walls ----------------------
    def _wall_path(self, points: List[Point], closed: bool) -> QPainterPath:
        path = QPainterPath()
        path.moveTo(self.gp(points[0].x), self.gp(points[0].y))
        for p in points[1:]:
            path.lineTo(self.gp(p.x), self.gp(p.y))
        if closed:
            path.closeSubpath()
        return path

    def draw_walls(self, painter: QPainter, walls: List[Point], markers: bool = True):
        """Closed room outline with a measurement on every edge"""
        n = len(walls)
        path = self._wall_path(walls, closed=True)
        if n > 2:
            painter.fillPath(path, QBrush(ROOM_FILL_COLOR))

        pen = QPen(WALL_COLOR, 5)
        pen.setCapStyle(Qt.SquareCap)
        pen.setJoinStyle(Qt.MiterJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(path)

        for i in range(n):
            self.draw_measure(painter, walls[i], walls[(i + 1) % n], in_progress=False)
        if markers:
            self._draw_vertex_markers(painter, walls, WALL_COLOR)

    def draw_wall_in_progress(self, painter: QPainter, points: List[Point], ghost: Optional[Point]):
        n = len(points)
        pen = QPen(WALL_PROGRESS_COLOR, 3)
        pen.setCapStyle(Qt.SquareCap)
        pen.setDashPattern([8 / 3, 5 / 3])
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(self._wall_path(points, closed=False))

        for i in range(n - 1):
            self.draw_measure(painter, points[i], points[i + 1], in_progress=True)

        if ghost is not None:
            last = points[-1]
            ghost_pen = QPen(ACCENT_COLOR, 2)
            ghost_pen.setDashPattern([5 / 2, 4 / 2])
            painter.setPen(ghost_pen)
            painter.drawLine(QPointF(self.gp(last.x), self.gp(last.y)),
                             QPointF(self.gp(ghost.x), self.gp(ghost.y)))
            self.draw_measure(painter, last, ghost, in_progress=True)

        self._draw_vertex_markers(painter, points, WALL_PROGRESS_COLOR)

    def _draw_vertex_markers(self, painter: QPainter, points: List[Point], color: QColor):
        # First vertex is the close target
        for i, p in enumerate(points):
            center = QPointF(self.gp(p.x), self.gp(p.y))
            if i == 0:
                painter.setPen(QPen(QColor('white'), 2))
                painter.setBrush(QBrush(ACCENT_COLOR))
                painter.drawEllipse(center, 8, 8)
            else:
                painter.setPen(Qt.NoPen)
                painter.setBrush(QBrush(color))
                painter.drawEllipse(center, 5, 5)

    def draw_measure(self, painter: QPainter, a: Point, b: Point, in_progress: bool):
        """Length label offset to one side of segment a-b"""
        dist = math.hypot(b.x - a.x, b.y - a.y)
        if dist < MIN_MEASURE_CELLS:
            return
        text = self.scale_manager.format_distance(self.scale_manager.calculate_distance(a, b))
        span = dist * self.cell_pixels
        mx = self.gp((a.x + b.x) / 2)
        my = self.gp((a.y + b.y) / 2)
        nx = -(self.gp(b.y) - self.gp(a.y)) / span * 22
        ny = (self.gp(b.x) - self.gp(a.x)) / span * 22

        font = mono_font(15)
        tw = QFontMetricsF(font).horizontalAdvance(text) + 12
        box = QRectF(mx + nx - tw / 2, my + ny - 13, tw, 26)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(MEASURE_PROGRESS_BACKGROUND if in_progress else MEASURE_BACKGROUND))
        painter.drawRoundedRect(box, 5, 5)
        painter.setFont(font)
        painter.setPen(QPen(MEASURE_PROGRESS_TEXT if in_progress else QColor('white')))
        painter.drawText(box, Qt.AlignCenter, text)

    # ---------------------- Fixtures ----------------------
    def draw_fixture(self, painter: QPainter, fixture: Fixture, selected: bool = False,
                     detailed: bool = True):
        pw, ph, cx, cy = fixture_frame(fixture, self.cell_pixels)
        painter.save()
        try:
            painter.translate(cx, cy)
            painter.rotate(math.degrees(fixture.rotation or 0.0))

            if get_fixture_shape(fixture.type) == 'circle':
                self._draw_base_circle(painter, pw, ph, fixture)
            else:
                self._draw_base_box(painter, pw, ph, fixture)
            if detailed:
                detail = self.FIXTURE_DETAILS.get(fixture.type)
                if detail is not None:
                    detail(self, painter, pw, ph, fixture)

            if selected:
                pen = QPen(ACCENT_COLOR, 2.5)
                pen.setDashPattern([5 / 2.5, 4 / 2.5])
                painter.setPen(pen)
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(QRectF(-pw / 2 - 3, -ph / 2 - 3, pw + 6, ph + 6))

            if detailed:
                size = max(16.0, min(22.0, min(pw, ph) * 0.26))
            else:
                size = max(13.0, min(18.0, min(pw, ph) * 0.22))
            self._draw_label(painter, fixture.label, size)
        finally:
            painter.restore()

        if selected:
            self.draw_handles(painter, fixture)

    def _draw_label(self, painter: QPainter, text: str, size: float):
        if not text:
            return
        font = mono_font(size, bold=True)
        tw = QFontMetricsF(font).horizontalAdvance(text) + 12
        box = QRectF(-tw / 2, -size * 0.65, tw, size * 1.3)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(LABEL_BACKGROUND))
        painter.drawRoundedRect(box, 4, 4)
        painter.setFont(font)
        painter.setPen(QPen(QColor('white')))
        painter.drawText(box, Qt.AlignCenter, text)

    def _draw_base_box(self, painter: QPainter, pw: float, ph: float, fixture: Fixture):
        painter.setPen(QPen(QColor(fixture.stroke), 1.5))
        painter.setBrush(QBrush(QColor(fixture.color)))
        painter.drawRect(QRectF(-pw / 2, -ph / 2, pw, ph))

    def _draw_base_circle(self, painter: QPainter, pw: float, ph: float, fixture: Fixture):
        r = min(pw, ph) / 2
        painter.setPen(QPen(QColor(fixture.stroke), 1.5))
        painter.setBrush(QBrush(QColor(fixture.color)))
        painter.drawEllipse(QPointF(0, 0), r, r)

    def _outline(self, painter: QPainter, color: str, width: float = 1.0):
        painter.setPen(QPen(QColor(color), width))
        painter.setBrush(Qt.NoBrush)

    def _fill(self, painter: QPainter, color: str):
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(color)))

    def _draw_toilet(self, painter, pw, ph, fixture):
        cistern = QRectF(-pw * 0.42, -ph / 2, pw * 0.84, ph * 0.28)
        painter.setPen(QPen(QColor('#a0a0a0'), 1))
        painter.setBrush(QBrush(QColor('#dddcd5')))
        painter.drawRect(cistern)
        painter.setPen(QPen(QColor(fixture.stroke), 1))
        painter.setBrush(QBrush(QColor('#f8f7f0')))
        painter.drawEllipse(QPointF(0, ph * 0.1), pw * 0.36, ph * 0.27)
        self._outline(painter, '#c0bfb5', 0.8)
        painter.drawEllipse(QPointF(0, ph * 0.1), pw * 0.28, ph * 0.20)

    def _draw_sink(self, painter, pw, ph, fixture):
        painter.setPen(QPen(QColor(fixture.stroke), 1))
        painter.setBrush(QBrush(QColor('#eef6ff')))
        painter.drawEllipse(QPointF(0, 0), pw * 0.36, ph * 0.36)
        self._fill(painter, '#7090a8')
        painter.drawEllipse(QPointF(0, 0), 2.5, 2.5)
        self._fill(painter, '#b8c8d4')
        painter.drawRect(QRectF(-pw * 0.22, -ph / 2 + ph * 0.07, pw * 0.14, ph * 0.1))
        painter.drawRect(QRectF(pw * 0.08, -ph / 2 + ph * 0.07, pw * 0.14, ph * 0.1))

    def _draw_bath(self, painter, pw, ph, fixture):
        self._outline(painter, '#90b8d8')
        painter.drawRect(QRectF(-pw / 2 + pw * 0.04, -ph / 2 + ph * 0.1, pw * 0.92, ph * 0.8))
        self._outline(painter, '#90b8d8', 0.8)
        painter.drawEllipse(QPointF(pw / 2 - pw * 0.07, 0), ph * 0.08, ph * 0.08)
        self._fill(painter, '#b0c8d8')
        painter.drawRect(QRectF(pw / 2 - pw * 0.14, -ph * 0.14, pw * 0.09, ph * 0.1))
        painter.drawRect(QRectF(pw / 2 - pw * 0.14, ph * 0.04, pw * 0.09, ph * 0.1))

    def _draw_shower(self, painter, pw, ph, fixture):
        r = min(pw, ph) * 0.28
        self._outline(painter, '#80c0d8')
        painter.drawEllipse(QPointF(0, 0), r, r)
        self._fill(painter, '#80c0d8')
        for k in range(8):
            a = k * math.pi / 4
            painter.drawEllipse(QPointF(math.cos(a) * r * 0.65, math.sin(a) * r * 0.65), 2, 2)
        painter.drawEllipse(QPointF(0, 0), 2, 2)

    def _draw_vanity(self, painter, pw, ph, fixture):
        self._outline(painter, '#c0a078')
        painter.drawLine(QPointF(-pw / 2 + 1, 0), QPointF(pw / 2 - 1, 0))
        painter.drawLine(QPointF(0, -ph / 2 + 1), QPointF(0, ph / 2 - 1))
        self._fill(painter, '#909090')
        for hx, hy in ((-pw * 0.22, -ph * 0.25), (pw * 0.22, -ph * 0.25),
                       (-pw * 0.22, ph * 0.25), (pw * 0.22, ph * 0.25)):
            painter.drawRect(QRectF(hx - pw * 0.07, hy - 2, pw * 0.14, 4))

    def _draw_door(self, painter, pw, ph, fixture):
        hinge = QPointF(-pw / 2, ph / 2)
        pen = QPen(QColor('#b09820'), 1)
        pen.setDashPattern([4, 4])
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        # Swing: quarter circle from straight up to the right of the hinge
        painter.drawLine(hinge, QPointF(-pw / 2, ph / 2 - pw))
        painter.drawArc(QRectF(-pw / 2 - pw, ph / 2 - pw, pw * 2, pw * 2), 0, 90 * 16)
        self._fill(painter, '#c0a030')
        painter.drawEllipse(hinge, 3, 3)
        painter.drawEllipse(QPointF(pw / 2 - pw * 0.14, 0), 3, 3)

    def _draw_window(self, painter, pw, ph, fixture):
        self._outline(painter, '#70a8c8', 0.8)
        painter.drawRect(QRectF(-pw / 2 + 2, -ph / 2 + 2, pw - 4, ph - 4))
        self._outline(painter, '#70a8c8')
        painter.drawLine(QPointF(-pw / 4, -ph / 2), QPointF(-pw / 4, ph / 2))
        painter.drawLine(QPointF(pw / 4, -ph / 2), QPointF(pw / 4, ph / 2))

    def _draw_soilstack(self, painter, pw, ph, fixture):
        r = min(pw, ph) / 2
        self._outline(painter, '#5a5048')
        painter.drawEllipse(QPointF(0, 0), r * 0.42, r * 0.42)
        self._fill(painter, '#5a5048')
        painter.drawEllipse(QPointF(0, 0), 2, 2)

    def _draw_light(self, painter, pw, ph, fixture):
        r = min(pw, ph) / 2
        painter.setPen(QPen(QColor(180, 160, 0, 153), 0.8))
        for k in range(8):
            a = k * math.pi / 4
            painter.drawLine(QPointF(math.cos(a) * r * 0.55, math.sin(a) * r * 0.55),
                             QPointF(math.cos(a) * r * 0.9, math.sin(a) * r * 0.9))
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(200, 180, 0, 204)))
        painter.drawEllipse(QPointF(0, 0), r * 0.22, r * 0.22)

    FIXTURE_DETAILS = {
        'toilet': _draw_toilet,
        'sink': _draw_sink,
        'bath': _draw_bath,
        'shower': _draw_shower,
        'vanity': _draw_vanity,
        'door': _draw_door,
        'window': _draw_window,
        'soilstack': _draw_soilstack,
        'light': _draw_light,
    }

    # ---------------------- Handles ----------------------
    def draw_handles(self, painter: QPainter, fixture: Fixture):
        pw, ph, cx, cy = fixture_frame(fixture, self.cell_pixels)
        painter.save()
        try:
            painter.translate(cx, cy)
            painter.rotate(math.degrees(fixture.rotation or 0.0))
            painter.setPen(QPen(ACCENT_COLOR, 1.5))
            painter.setBrush(QBrush(QColor('white')))
            for handle in HANDLES:
                painter.drawRect(QRectF(handle.fx * pw - 6, handle.fy * ph - 6, 12, 12))

            rx, ry = rotate_handle_local(ph)
            painter.setPen(QPen(ROTATE_COLOR, 1.5))
            painter.drawLine(QPointF(0, -ph / 2), QPointF(rx, ry))
            painter.setPen(QPen(ROTATE_STROKE_COLOR, 1))
            painter.setBrush(QBrush(ROTATE_COLOR))
            painter.drawEllipse(QPointF(rx, ry), 7, 7)
        finally:
            painter.restore()

    # ---------------------- Footer ----------------------
    def footer_text(self, tab: SceneTab, sketch_name: str = '') -> str:
        name = sketch_name or DEFAULT_SKETCH_NAME
        return f"{name} · {tab.value.upper()} · {self.scale_manager.short_scale_string}"

    def draw_footer(self, painter: QPainter, width: int, height: int, tab: SceneTab, sketch_name: str = ''):
        painter.setFont(mono_font(11, bold=True))
        painter.setPen(QPen(FOOTER_COLOR))
        painter.drawText(QRectF(0, 0, width - 8, height - 8), Qt.AlignRight | Qt.AlignBottom,
                         self.footer_text(tab, sketch_name))
