"""
User Model

This module contains the User model. Members are identified publicly by
`username#tag`; the email is only used to sign in.
"""

from datetime import datetime
from .database import db
from .utils import generate_user_id, isoformat_or_none


class User(db.Model):
    """User model for identity and profile"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(12), unique=True, nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False)
    username = db.Column(db.String(30), nullable=False)
    tag = db.Column(db.String(4), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    __table_args__ = (
        db.UniqueConstraint('username', 'tag', name='unique_username_tag'),
    )

    # Relationships
    memberships = db.relationship('HouseMember', backref='user', lazy=True,
                                  cascade='all, delete-orphan')

    def __init__(self, email, username, tag, password_hash):
        """Initialize a new user, validating every identity field"""
        # Import validators here to avoid circular imports
        from ..utils.validators import (
            validate_email, validate_username, validate_tag, validate_password_hash
        )

        for result in (validate_email(email), validate_username(username),
                       validate_tag(tag), validate_password_hash(password_hash)):
            if not result.is_valid:
                raise ValueError(result.error_message)

        self.email = validate_email(email).sanitized_value
        self.username = validate_username(username).sanitized_value
        self.tag = validate_tag(tag).sanitized_value
        self.password_hash = validate_password_hash(password_hash).sanitized_value
        self.user_id = generate_user_id()

    def __repr__(self):
        return f'<User {self.display_name}>'

    @property
    def display_name(self):
        """Public handle shown to other members"""
        return f'{self.username}#{self.tag}'

    def update_last_login(self):
        """Update the last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()

    def to_dict(self, include_email=False):
        """Convert model to dictionary."""
        data = {
            'user_id': self.user_id,
            'username': self.username,
            'tag': self.tag,
            'display_name': self.display_name,
            'created_at': isoformat_or_none(self.created_at)
        }
        if include_email:
            data['email'] = self.email
            data['last_login'] = isoformat_or_none(self.last_login)
        return data

    @classmethod
    def find_by_handle(cls, username, tag):
        """Find a user by `username` and `tag` (tag is case-insensitive)"""
        return cls.query.filter_by(username=username, tag=tag.upper()).first()

    @classmethod
    def find_by_public_id(cls, user_id):
        """Find a user by the public 12-character id"""
        return cls.query.filter_by(user_id=user_id).first()
