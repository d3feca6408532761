"""
Routes Package

This package contains all Flask route blueprints.
"""

from .auth import auth_bp
from .main import main_bp
from .houses import houses_bp
from .chat import chat_bp
from .tasks import tasks_bp
from .expenses import expenses_bp
from .rules import rules_bp
from .calendar import calendar_bp

# Blueprints mounted under /api/houses
HOUSE_BLUEPRINTS = [houses_bp, chat_bp, tasks_bp, expenses_bp, rules_bp, calendar_bp]

__all__ = [
    'auth_bp',
    'main_bp',
    'houses_bp',
    'chat_bp',
    'tasks_bp',
    'expenses_bp',
    'rules_bp',
    'calendar_bp',
    'HOUSE_BLUEPRINTS'
]
