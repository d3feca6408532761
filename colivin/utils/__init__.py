"""
Utilities Package

This package contains utility functions and helper modules.
"""

from . import auth_utils
from . import validators
from . import error_handlers
from . import house_utils
from . import expense_utils
from . import points_utils
from . import calendar_utils

__all__ = [
    'auth_utils',
    'validators',
    'error_handlers',
    'house_utils',
    'expense_utils',
    'points_utils',
    'calendar_utils'
]
