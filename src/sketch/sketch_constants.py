"""
Sketch Constants - Centralized definition of the sketch engine's fixed numbers
Grid scale, hit-test thresholds and gesture limits shared by every component
"""

import math

# =============================================================================
# GRID / SCALE
# =============================================================================

# Pixels per grid cell on the sketch surface
CELL_PIXELS: int = 30

# Real-world length of one grid cell
MM_PER_CELL: int = 200

# Major grid line every N cells
MAJOR_GRID_EVERY: int = 5

SCALE_STRING: str = f"1 grid cell = {MM_PER_CELL}mm"

# =============================================================================
# UNDO
# =============================================================================

MAX_UNDO: int = 50

# =============================================================================
# HIT TESTING (pixels)
# =============================================================================

# Rotate handle sits this far above the fixture's top edge
ROTATE_HANDLE_OFFSET: float = 28.0

# Squared pick radius of the rotate handle (12 px)
ROTATE_HANDLE_HIT_D2: float = 144.0

# Squared pick radius of a resize handle (10 px)
RESIZE_HANDLE_HIT_D2: float = 100.0

# Extra margin around a fixture body
FIXTURE_HIT_MARGIN: float = 4.0

# Tap within this radius of the first wall vertex closes the room
WALL_CLOSE_RADIUS: float = 22.0

# =============================================================================
# GESTURES
# =============================================================================

# Interactive rotation is quantized to 15 degree steps
ROTATION_STEP: float = math.pi / 12

# Smallest width/height a resize may produce (grid cells)
MIN_FIXTURE_EXTENT: float = 0.5

# Where a fixture sits before the first pointer move while placing (grid cells)
PLACEMENT_SPAWN_X: float = 2.0
PLACEMENT_SPAWN_Y: float = 2.0

# Wall segments shorter than this (grid cells) get no measurement label
MIN_MEASURE_CELLS: float = 0.3

# =============================================================================
# DOCUMENT
# =============================================================================

DOCUMENT_VERSION: int = 2
DEFAULT_SKETCH_NAME: str = "BathPlan"
