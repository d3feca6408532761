"""
Calendar Event Model

FLOW OVERVIEW
- Activities pinned to a date and, optionally, a time of day.
- get_events_between(house_id, start, end): inclusive date range used by the weekly view.
"""

from datetime import datetime
from .database import db
from .utils import isoformat_or_none


class CalendarEvent(db.Model):
    """An activity on the house calendar"""
    __tablename__ = 'calendar_events'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    event_date = db.Column(db.Date, nullable=False)
    event_time = db.Column(db.Time, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    creator = db.relationship('User')

    __table_args__ = (
        db.Index('idx_calendar_events_house_date', 'house_id', 'event_date'),
    )

    def __repr__(self):
        return f'<CalendarEvent {self.id}: {self.title} on {self.event_date}>'

    def sort_key(self):
        """Untimed (all-day) events first, then by time of day"""
        return (self.event_time is not None, self.event_time or datetime.min.time(), self.id)

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'house_id': self.house_id,
            'title': self.title,
            'description': self.description,
            'event_date': self.event_date.isoformat(),
            'event_time': self.event_time.strftime('%H:%M') if self.event_time else None,
            'created_by': self.creator.user_id,
            'creator': self.creator.display_name,
            'created_at': isoformat_or_none(self.created_at)
        }

    @classmethod
    def get_events_between(cls, house_id, start_date, end_date):
        """Events of a house between two dates (inclusive)"""
        return (
            cls.query
            .filter(cls.house_id == house_id,
                    cls.event_date >= start_date,
                    cls.event_date <= end_date)
            .order_by(cls.event_date.asc(), cls.id.asc())
            .all()
        )
