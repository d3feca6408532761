"""
Database Models Package

FLOW OVERVIEW
- Centralizes SQLAlchemy DB instance and model imports for convenient usage.
- Exposes: db, User, House, HouseMember, ChatMessage, HouseTask, HouseExpense,
  HouseExpensePayment, SharedExpense, SharedExpensePayment, HouseRules,
  CalendarEvent, MemberPoints.
"""

from .database import db
from .user import User
from .house import House, HouseMember
from .chat import ChatMessage
from .task import HouseTask
from .expense import HouseExpense, HouseExpensePayment, SharedExpense, SharedExpensePayment
from .rules import HouseRules
from .calendar_event import CalendarEvent
from .points import MemberPoints

__all__ = [
    'db',
    'User',
    'House',
    'HouseMember',
    'ChatMessage',
    'HouseTask',
    'HouseExpense',
    'HouseExpensePayment',
    'SharedExpense',
    'SharedExpensePayment',
    'HouseRules',
    'CalendarEvent',
    'MemberPoints'
]
