"""
Debug logging framework for the sketch engine
Centralizes and standardizes debug output across tools, gestures and persistence
"""

import os
import json
import logging
from typing import Any, Dict, Optional


class SketchDebugLogger:
    """Centralized debug logger for the sketch engine"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._setup_logger()
            SketchDebugLogger._initialized = True

    def _setup_logger(self):
        """Initialize the logging configuration"""
        # Check environment variable for debug output
        env_val = str(os.environ.get("SKETCH_DEBUG", "")).strip().lower()
        self.debug_enabled = env_val in {"1", "true", "yes", "on"}

        debug_level = os.environ.get("SKETCH_DEBUG_LEVEL", "INFO").upper()

        self.logger = logging.getLogger('sketch_debug')
        self.logger.setLevel(getattr(logging, debug_level, logging.INFO))

        # Clear existing handlers
        self.logger.handlers.clear()

        # Only add handlers if debug is enabled
        if self.debug_enabled:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG)

            # Format with timestamp and component
            formatter = logging.Formatter(
                '%(asctime)s [SKETCH-%(levelname)s] %(component)s: %(message)s',
                datefmt='%H:%M:%S'
            )
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            if os.environ.get("SKETCH_DEBUG_FILE"):
                file_handler = logging.FileHandler(os.environ["SKETCH_DEBUG_FILE"])
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

    def _compose(self, message: str, data: Optional[Dict[str, Any]]) -> str:
        if data:
            return f"{message} {self._format_debug_data(data)}"
        return message

    def debug(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log debug message with component context"""
        if not self.debug_enabled:
            return
        self.logger.debug(self._compose(message, data), extra={'component': component})

    def info(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log info message with component context"""
        if not self.debug_enabled:
            return
        self.logger.info(self._compose(message, data), extra={'component': component})

    def warning(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log warning message with component context"""
        if not self.debug_enabled:
            return
        self.logger.warning(self._compose(message, data), extra={'component': component})

    def error(self, component: str, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        """Log error message with component context"""
        if not self.debug_enabled:
            return

        full_message = message
        if error:
            full_message += f" Error: {str(error)}"
        if data:
            full_message += f" {self._format_debug_data(data)}"

        self.logger.error(full_message, extra={'component': component})

    def _format_debug_data(self, data: Dict[str, Any]) -> str:
        """Format debug data for logging"""
        try:
            formatted = {}
            for key, value in data.items():
                if key in ('rotation', 'start_rotation'):
                    # Radians are hard to read in logs
                    if isinstance(value, (int, float)):
                        formatted[key] = f"{float(value) * 57.29577951308232:.1f}deg"
                    else:
                        formatted[key] = value
                elif isinstance(value, float):
                    formatted[key] = round(value, 3)
                elif key in ('index', 'selected_index', 'count'):
                    formatted[key] = int(value) if value is not None else None
                else:
                    formatted[key] = value

            return json.dumps(formatted, separators=(',', ':'), default=str)
        except (TypeError, ValueError):
            # Fallback to string representation
            return str(data)

    def log_gesture_start(self, component: str, mode: str, index: int, snapshot: Optional[Dict] = None):
        """Log the start of a drag/rotate/resize gesture"""
        data = {'mode': mode, 'index': index}
        if snapshot:
            data.update(snapshot)
        self.debug(component, "Gesture started", data)

    def log_gesture_end(self, component: str, mode: str, cancelled: bool):
        """Log the end of a gesture"""
        status = "cancelled" if cancelled else "completed"
        self.debug(component, "Gesture finished", {'mode': mode, 'status': status})


# Global logger instance
debug_logger = SketchDebugLogger()
