"""
House Rules Model

One rules document per house, written by the house creator.
"""

from datetime import datetime
from .database import db
from .utils import isoformat_or_none


class HouseRules(db.Model):
    """Rules every member of a house should follow"""
    __tablename__ = 'house_rules'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), unique=True, nullable=False)
    content = db.Column(db.Text, nullable=False, default='')
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = db.relationship('User')

    def __repr__(self):
        return f'<HouseRules for house {self.house_id}>'

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'house_id': self.house_id,
            'content': self.content,
            'created_by': self.author.user_id,
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at)
        }
