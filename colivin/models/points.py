"""
Member Points Model

Running point total of a member inside a house. Rows are created lazily the
first time a member earns points; members without a row have 0 points.
"""

from datetime import datetime
from .database import db


class MemberPoints(db.Model):
    """Leaderboard points of a member in a house"""
    __tablename__ = 'member_points'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    points = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('house_id', 'user_id', name='unique_house_member_points'),
    )

    def __repr__(self):
        return f'<MemberPoints user={self.user_id} house={self.house_id}: {self.points}>'

    @classmethod
    def get_or_create(cls, house_id, user_id):
        """Fetch the points row of a member, adding an empty one if missing"""
        row = cls.query.filter_by(house_id=house_id, user_id=user_id).first()
        if row is None:
            row = cls(house_id=house_id, user_id=user_id, points=0)
            db.session.add(row)
        return row

    @classmethod
    def points_by_user(cls, house_id):
        """Map of users.id -> points for a house"""
        return {row.user_id: row.points for row in cls.query.filter_by(house_id=house_id).all()}
