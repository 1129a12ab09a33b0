"""
Standard data libraries for the Bathroom Sketch Tool
"""

from .fixtures import STANDARD_FIXTURES, FIXTURE_ORDER, get_fixture_defaults, get_fixture_shape

__all__ = [
    'STANDARD_FIXTURES',
    'FIXTURE_ORDER',
    'get_fixture_defaults',
    'get_fixture_shape'
]
