"""
User interface components for the Bathroom Sketch Tool
"""

from .sketch_window import SketchWindow

__all__ = ['SketchWindow']
