"""
Settings Manager - Handles application settings persistence using QSettings
"""

import os
from PySide6.QtCore import QSettings

from sketch.sketch_constants import MAX_UNDO


class SettingsManager:
    """Manages application settings using QSettings"""

    ORGANIZATION = "BathPlan"
    APPLICATION = "Bathroom Sketch Tool"

    # Settings keys
    KEY_DATABASE_CUSTOM_PATH = "database/custom_path"
    KEY_DATABASE_USE_CUSTOM_PATH = "database/use_custom_path"
    KEY_LAST_SKETCH_NAME = "sketch/last_name"
    KEY_UNDO_DEPTH = "sketch/undo_depth"

    def __init__(self, settings=None):
        """Initialize the settings manager; tests may pass their own QSettings"""
        self.settings = settings or QSettings(SettingsManager.ORGANIZATION, SettingsManager.APPLICATION)

    def get_database_path(self):
        """
        Get the custom database path from settings, or None if not set

        Returns:
            str or None: Custom database path, or None if using default
        """
        use_custom = self.settings.value(self.KEY_DATABASE_USE_CUSTOM_PATH, False, type=bool)
        if use_custom:
            custom_path = self.settings.value(self.KEY_DATABASE_CUSTOM_PATH, None, type=str)
            if custom_path and os.path.exists(os.path.dirname(custom_path)):
                return custom_path
        return None

    def set_database_path(self, db_path):
        """
        Set the custom database path in settings

        Args:
            db_path (str): Full path to the database file; empty reverts to default
        """
        if db_path:
            self.settings.setValue(self.KEY_DATABASE_CUSTOM_PATH, db_path)
            self.settings.setValue(self.KEY_DATABASE_USE_CUSTOM_PATH, True)
        else:
            self.settings.remove(self.KEY_DATABASE_CUSTOM_PATH)
            self.settings.setValue(self.KEY_DATABASE_USE_CUSTOM_PATH, False)
        self.settings.sync()

    def get_last_sketch_name(self):
        return self.settings.value(self.KEY_LAST_SKETCH_NAME, "", type=str)

    def set_last_sketch_name(self, name):
        self.settings.setValue(self.KEY_LAST_SKETCH_NAME, name or "")
        self.settings.sync()

    def get_undo_depth(self):
        """Undo history depth; invalid stored values fall back to the default"""
        depth = self.settings.value(self.KEY_UNDO_DEPTH, MAX_UNDO, type=int)
        if depth is None or depth < 1:
            return MAX_UNDO
        return depth

    def set_undo_depth(self, depth):
        if depth is None or int(depth) < 1:
            raise ValueError(f"Undo depth must be at least 1, got {depth}")
        self.settings.setValue(self.KEY_UNDO_DEPTH, int(depth))
        self.settings.sync()


# Global instance
_settings_manager = None


def get_settings_manager():
    """Get the global settings manager instance"""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager
