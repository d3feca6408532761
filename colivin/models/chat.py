"""
Chat Message Model

Messages posted to a house chat. Authors may edit their own messages, which
flags them as edited.
"""

from datetime import datetime
from .database import db
from .utils import isoformat_or_none


class ChatMessage(db.Model):
    """A message in the house chat"""
    __tablename__ = 'chat_messages'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    is_edited = db.Column(db.Boolean, default=False, nullable=False)

    author = db.relationship('User')

    def __repr__(self):
        return f'<ChatMessage {self.id} in house {self.house_id}>'

    def edit(self, content):
        """Replace the content and flag the message as edited"""
        self.content = content
        self.is_edited = True
        self.updated_at = datetime.utcnow()

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'house_id': self.house_id,
            'user_id': self.author.user_id,
            'author': self.author.display_name,
            'content': self.content,
            'created_at': isoformat_or_none(self.created_at),
            'updated_at': isoformat_or_none(self.updated_at),
            'is_edited': self.is_edited
        }

    @classmethod
    def get_house_messages(cls, house_id, after_id=None, limit=200):
        """Messages of a house, oldest first.

        `after_id` returns up to `limit` messages following that id, so a
        polling client never skips any. Without a cursor the most recent
        `limit` messages are returned.
        """
        query = cls.query.filter_by(house_id=house_id)
        if after_id is not None:
            return query.filter(cls.id > after_id).order_by(cls.id.asc()).limit(limit).all()

        recent = query.order_by(cls.created_at.desc(), cls.id.desc()).limit(limit).all()
        return list(reversed(recent))
