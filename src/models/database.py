"""
Database setup and configuration using SQLAlchemy
Saved sketches live in a SQLite file in the user data directory
"""

import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from utils.debug_logger import debug_logger
from utils.general_utils import ensure_user_data_directory, is_bundled_executable

# Create base class for declarative models
Base = declarative_base()

# Global session factory
SessionLocal = None
engine = None

DEFAULT_DATABASE_NAME = "bathroom_sketches.db"


def initialize_database(db_path=None):
	"""Initialize the database connection and create tables

	Without db_path the custom path from settings is used, falling back to
	the user data directory.
	"""
	global engine, SessionLocal

	if db_path is None:
		# Check for custom database path from settings
		try:
			from utils.settings_manager import get_settings_manager
			custom_path = get_settings_manager().get_database_path()
			if custom_path:
				db_path = custom_path
				debug_logger.info('Database', "Using custom database path from settings", {'path': db_path})
		except RuntimeError as e:
			debug_logger.warning('Database', "Could not load custom database path from settings", {'error': str(e)})

		if db_path is None:
			db_path = os.path.join(ensure_user_data_directory(), DEFAULT_DATABASE_NAME)

	debug_logger.info('Database', "Initializing database",
					  {'path': db_path, 'bundled': is_bundled_executable()})

	# If engine already exists and is using the same path, don't reinitialize
	new_url = f'sqlite:///{db_path}'
	if engine is not None:
		if str(engine.url) == new_url:
			return db_path
		debug_logger.warning('Database', "Database path changed, reinitializing",
							 {'old': str(engine.url), 'new': new_url})
		engine.dispose()

	engine = create_engine(new_url, echo=False)

	# expire_on_commit=False keeps loaded records usable after the session closes
	SessionLocal = sessionmaker(
		autocommit=False,
		autoflush=False,
		expire_on_commit=False,
		bind=engine,
	)

	# Import all models to ensure they're registered
	from . import sketch_record  # noqa: F401

	Base.metadata.create_all(bind=engine)
	return db_path


def get_session():
	"""Get a new database session"""
	if SessionLocal is None:
		raise RuntimeError("Database not initialized. Call initialize_database() first.")
	return SessionLocal()


@contextmanager
def session_scope(session_factory=None):
	"""Commit on success, roll back and re-raise on error, always close

	Usage:
		with session_scope() as session:
			session.add(record)
	"""
	session = (session_factory or get_session)()
	try:
		yield session
		session.commit()
	except Exception as e:
		session.rollback()
		debug_logger.error('Database', "Session rolled back", e)
		raise
	finally:
		session.close()


def close_database():
	"""Close the database connection"""
	global engine, SessionLocal
	if engine:
		engine.dispose()
		engine = None
	SessionLocal = None
