"""
Scale Manager - Grid scale and real-world length conversions
"""

import math

from sketch.geometry import round_half_up
from sketch.sketch_constants import CELL_PIXELS, MM_PER_CELL


class ScaleManager:
    """Grid scale shared by the engine, its tools and the renderer"""

    def __init__(self, cell_pixels: float = CELL_PIXELS, mm_per_cell: float = MM_PER_CELL):
        self.cell_pixels = cell_pixels
        self.mm_per_cell = mm_per_cell

    @property
    def scale_string(self) -> str:
        """Display string, e.g. '1 grid cell = 200mm'"""
        return f"1 grid cell = {self.mm_per_cell:g}mm"

    @property
    def short_scale_string(self) -> str:
        """Compact form used in image footers"""
        return f"1 sq={self.mm_per_cell:g}mm"

    def cells_to_mm(self, cells) -> int:
        """Real-world length rounded to whole millimetres"""
        return int(round_half_up(cells * self.mm_per_cell))

    def calculate_distance(self, a, b) -> int:
        """Real-world distance (mm) between two grid points"""
        return self.cells_to_mm(math.hypot(b.x - a.x, b.y - a.y))

    def format_distance(self, mm) -> str:
        return f"{int(mm)}mm"
