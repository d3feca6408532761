"""
House Task Model

FLOW OVERVIEW
- Tasks have a deadline expressed in days from creation.
- deadline_date / is_overdue derive the due date and late state.
- complete(user) closes the task; completed tasks leave the active list.
"""

from datetime import datetime, timedelta
from .database import db
from .utils import isoformat_or_none


class HouseTask(db.Model):
    """A household task"""
    __tablename__ = 'house_tasks'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    deadline_days = db.Column(db.Integer, nullable=False, default=7)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    is_completed = db.Column(db.Boolean, default=False, nullable=False)
    completed_at = db.Column(db.DateTime)
    completed_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    creator = db.relationship('User', foreign_keys=[created_by])
    completer = db.relationship('User', foreign_keys=[completed_by])

    def __repr__(self):
        return f'<HouseTask {self.id}: {self.title}>'

    @property
    def deadline_date(self):
        """Due date: creation time plus the deadline in days"""
        return (self.created_at or datetime.utcnow()) + timedelta(days=self.deadline_days)

    def is_overdue(self, now=None):
        """Active task whose deadline already passed"""
        now = now or datetime.utcnow()
        return not self.is_completed and self.deadline_date < now

    def complete(self, user):
        """Mark the task as completed by `user`"""
        self.is_completed = True
        self.completed_at = datetime.utcnow()
        self.completed_by = user.id

    def to_dict(self, now=None):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'house_id': self.house_id,
            'title': self.title,
            'deadline_days': self.deadline_days,
            'deadline_date': isoformat_or_none(self.deadline_date),
            'is_overdue': self.is_overdue(now),
            'created_by': self.creator.user_id,
            'creator': self.creator.display_name,
            'created_at': isoformat_or_none(self.created_at),
            'is_completed': self.is_completed,
            'completed_at': isoformat_or_none(self.completed_at),
            'completed_by': self.completer.display_name if self.completer else None
        }

    @classmethod
    def get_active_tasks(cls, house_id):
        """Pending tasks, newest first"""
        return (
            cls.query
            .filter_by(house_id=house_id, is_completed=False)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .all()
        )

    @classmethod
    def get_completed_tasks(cls, house_id, limit=50):
        """Completed tasks, most recently completed first"""
        return (
            cls.query
            .filter_by(house_id=house_id, is_completed=True)
            .order_by(cls.completed_at.desc(), cls.id.desc())
            .limit(limit)
            .all()
        )
