"""
Utils package - Utility modules for the Bathroom Sketch Tool
"""

from .debug_logger import debug_logger
from .general_utils import (
    is_bundled_executable,
    get_application_directory,
    get_user_data_directory,
    ensure_user_data_directory,
    get_application_title,
    log_environment_info
)

__all__ = [
    'debug_logger',
    'is_bundled_executable',
    'get_application_directory',
    'get_user_data_directory',
    'ensure_user_data_directory',
    'get_application_title',
    'log_environment_info'
]
