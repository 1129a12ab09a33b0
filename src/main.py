#!/usr/bin/env python3
"""
Bathroom Sketch Tool - Main Application Entry Point
Desktop application for before/after bathroom floor-plan sketches
"""

import sys
import os
from PySide6.QtWidgets import QApplication, QStyleFactory

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models import get_session, initialize_database, SketchRecordManager
from sketch import SketchEngine
from ui import SketchWindow
from utils.general_utils import APPLICATION_NAME, APPLICATION_VERSION, log_environment_info
from utils.settings_manager import get_settings_manager


class SketchApp(QApplication):
    """Main application class"""

    def __init__(self, argv):
        super().__init__(argv)
        self.setApplicationName(APPLICATION_NAME)
        self.setApplicationVersion(APPLICATION_VERSION)
        self.setOrganizationName("BathPlan")

        # Set application style
        self.setStyle(QStyleFactory.create('Fusion'))

        self.window = None

    def start(self):
        """Start the application"""
        log_environment_info()
        initialize_database()

        settings_manager = get_settings_manager()
        record_manager = SketchRecordManager(get_session)

        # Reopen the most recent save of the last sketch
        sketch_name = settings_manager.get_last_sketch_name()
        latest = record_manager.load_latest(sketch_name or None)
        engine = SketchEngine(
            latest.plan_json if latest else None,
            sketch_name=sketch_name,
            max_undo=settings_manager.get_undo_depth(),
        )
        engine.record_manager = record_manager

        self.window = SketchWindow(engine, settings_manager)
        self.window.show()

        return self.exec()


def main():
    """Application entry point"""
    app = SketchApp(sys.argv)
    return app.start()


if __name__ == '__main__':
    sys.exit(main())
