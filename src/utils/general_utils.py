"""
Utility functions for the Bathroom Sketch Tool
Includes deployment detection and user data paths
"""

import os
import sys
from pathlib import Path

from utils.debug_logger import debug_logger

APPLICATION_NAME = "Bathroom Sketch Tool"
APPLICATION_VERSION = "1.0.0"


def is_bundled_executable():
    """
    Detect if running as a bundled executable (PyInstaller)
    Returns True if bundled, False if running from source
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


def get_application_directory():
    """
    Get the directory containing the application executable or the project root

    Returns:
        str: Absolute path to application directory
    """
    if is_bundled_executable():
        return os.path.dirname(sys.executable)
    # src/utils/general_utils.py -> project root
    return str(Path(__file__).resolve().parent.parent.parent)


def get_user_data_directory():
    """
    Get the user data directory for the sketch database
    SKETCH_DATA_DIR overrides the default location
    """
    override = os.environ.get('SKETCH_DATA_DIR')
    if override:
        return os.path.expanduser(override)
    return os.path.expanduser("~/Documents/BathroomSketches")


def ensure_user_data_directory():
    """
    Ensure the user data directory exists

    Returns:
        str: Absolute path to created user data directory
    """
    user_dir = get_user_data_directory()
    os.makedirs(user_dir, exist_ok=True)
    return user_dir


def get_application_title():
    return f"{APPLICATION_NAME} v{APPLICATION_VERSION}"


def log_environment_info():
    """Log environment information for troubleshooting deployment issues"""
    debug_logger.info('Environment', "Startup", {
        'bundled': is_bundled_executable(),
        'python': sys.executable,
        'application_directory': get_application_directory(),
        'user_data_directory': get_user_data_directory(),
        'version': APPLICATION_VERSION,
    })
