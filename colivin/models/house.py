"""
House Models

FLOW OVERVIEW
- House: a shared household, joined through an 8-character invite code.
- HouseMember: membership row; the creator is always the first member.
- Query helpers: membership lookup, member listing, houses of a user.
"""

from datetime import datetime
from .database import db
from .utils import isoformat_or_none


class House(db.Model):
    """Shared household"""
    __tablename__ = 'houses'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    invite_code = db.Column(db.String(8), unique=True, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    creator = db.relationship('User', foreign_keys=[created_by])
    members = db.relationship('HouseMember', backref='house', lazy=True,
                              cascade='all, delete-orphan',
                              order_by='HouseMember.joined_at')
    messages = db.relationship('ChatMessage', backref='house', lazy=True, cascade='all, delete-orphan')
    tasks = db.relationship('HouseTask', backref='house', lazy=True, cascade='all, delete-orphan')
    expenses = db.relationship('HouseExpense', backref='house', lazy=True, cascade='all, delete-orphan')
    shared_expenses = db.relationship('SharedExpense', backref='house', lazy=True, cascade='all, delete-orphan')
    rules = db.relationship('HouseRules', backref='house', uselist=False, cascade='all, delete-orphan')
    events = db.relationship('CalendarEvent', backref='house', lazy=True, cascade='all, delete-orphan')
    points = db.relationship('MemberPoints', backref='house', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<House {self.id}: {self.name}>'

    def is_creator(self, user):
        """Check whether the user currently owns the house"""
        return user is not None and self.created_by == user.id

    def get_membership(self, user):
        """Return the membership row of `user` in this house, if any"""
        if user is None:
            return None
        return HouseMember.query.filter_by(house_id=self.id, user_id=user.id).first()

    def is_member(self, user):
        """Check whether the user belongs to this house"""
        return self.get_membership(user) is not None

    def member_count(self):
        """Number of current members"""
        return HouseMember.query.filter_by(house_id=self.id).count()

    def ordered_members(self):
        """Memberships ordered by join time (oldest first)"""
        return (
            HouseMember.query
            .filter_by(house_id=self.id)
            .order_by(HouseMember.joined_at.asc(), HouseMember.id.asc())
            .all()
        )

    def to_dict(self, include_invite_code=True):
        """Convert model to dictionary."""
        data = {
            'id': self.id,
            'name': self.name,
            'created_by': self.creator.user_id if self.creator else None,
            'created_at': isoformat_or_none(self.created_at)
        }
        if include_invite_code:
            data['invite_code'] = self.invite_code
        return data

    @classmethod
    def find_by_invite_code(cls, invite_code):
        """Find a house by invite code (stored uppercase)"""
        return cls.query.filter_by(invite_code=invite_code.upper()).first()

    @classmethod
    def invite_code_exists(cls, invite_code):
        """Check whether an invite code is already taken"""
        return cls.query.filter_by(invite_code=invite_code).first() is not None

    @classmethod
    def get_user_houses(cls, user_id):
        """Houses the user belongs to, newest first"""
        return (
            cls.query
            .join(HouseMember, HouseMember.house_id == cls.id)
            .filter(HouseMember.user_id == user_id)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .all()
        )


class HouseMember(db.Model):
    """Membership of a user in a house"""
    __tablename__ = 'house_members'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    joined_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('house_id', 'user_id', name='unique_house_member'),
    )

    def __repr__(self):
        return f'<HouseMember user={self.user_id} house={self.house_id}>'

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'user_id': self.user.user_id,
            'display_name': self.user.display_name,
            'joined_at': isoformat_or_none(self.joined_at),
            'is_creator': self.house.created_by == self.user_id
        }
