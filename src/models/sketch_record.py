"""
Sketch Records - Saved sketches (plan JSON plus before/after images)
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from utils.debug_logger import debug_logger
from .database import Base, session_scope


class SketchRecord(Base):
	"""One save of a sketch"""
	__tablename__ = 'sketch_records'

	id = Column(Integer, primary_key=True)
	sketch_name = Column(String(255), default='')

	# Output document and base64 PNG data URLs
	plan_json = Column(Text, nullable=False)
	before_png = Column(Text, default='')
	after_png = Column(Text, default='')

	# Metadata
	created_date = Column(DateTime, default=datetime.utcnow)
	modified_date = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	def __repr__(self):
		return f"<SketchRecord(id={self.id}, name='{self.sketch_name}')>"

	def to_dict(self):
		return {
			'id': self.id,
			'sketch_name': self.sketch_name,
			'json': self.plan_json,
			'before_png': self.before_png,
			'after_png': self.after_png,
			'created_date': self.created_date.isoformat() if self.created_date else None,
			'modified_date': self.modified_date.isoformat() if self.modified_date else None,
		}

	@classmethod
	def from_saved_sketch(cls, saved):
		"""Create a record from a SavedSketch"""
		return cls(
			sketch_name=saved.sketch_name or '',
			plan_json=saved.json,
			before_png=saved.before_png or '',
			after_png=saved.after_png or '',
		)


class SketchRecordManager:
	"""Manager class for saving/loading sketch records"""

	def __init__(self, session_factory):
		self.get_session = session_factory

	def save_sketch(self, saved):
		"""Store a SavedSketch and return the new record id"""
		with session_scope(self.get_session) as session:
			record = SketchRecord.from_saved_sketch(saved)
			session.add(record)
			session.flush()
			record_id = record.id
		debug_logger.info('SketchRecordManager', "Sketch stored",
						  {'id': record_id, 'sketch_name': saved.sketch_name})
		return record_id

	def load_latest(self, sketch_name=None):
		"""Most recent record, optionally for one sketch name; None when nothing is stored"""
		with session_scope(self.get_session) as session:
			query = session.query(SketchRecord)
			if sketch_name is not None:
				query = query.filter(SketchRecord.sketch_name == sketch_name)
			return query.order_by(SketchRecord.created_date.desc(), SketchRecord.id.desc()).first()

	def list_sketches(self):
		"""All records, newest first"""
		with session_scope(self.get_session) as session:
			return session.query(SketchRecord).order_by(
				SketchRecord.created_date.desc(), SketchRecord.id.desc()
			).all()

	def delete_sketch(self, record_id):
		"""Delete a record; returns False when it does not exist"""
		with session_scope(self.get_session) as session:
			record = session.query(SketchRecord).filter(SketchRecord.id == record_id).first()
			if record is None:
				return False
			session.delete(record)
			return True
