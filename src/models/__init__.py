"""
Data models for the Bathroom Sketch Tool
"""

from .database import Base, initialize_database, get_session, session_scope, close_database
from .scene import Point, Fixture, Scene, SceneContainer, SceneTab
from .sketch_record import SketchRecord, SketchRecordManager

__all__ = [
	'Base',
	'initialize_database',
	'get_session',
	'session_scope',
	'close_database',
	'Point',
	'Fixture',
	'Scene',
	'SceneContainer',
	'SceneTab',
	'SketchRecord',
	'SketchRecordManager'
]
