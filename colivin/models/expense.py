"""
Expense Models

FLOW OVERVIEW
- HouseExpense: a house bill, either 'fixed' (owed by its creator alone) or
  'floating' (split across the members present when it was created).
- HouseExpensePayment: one share of a house expense owed by one member.
- SharedExpense: a purchase one member made for everybody; every other
  member owes the creator a share.
- SharedExpensePayment: one debt towards the creator of a shared expense.
"""

from datetime import datetime, timedelta
from .database import db
from .utils import format_money, isoformat_or_none

EXPENSE_TYPE_FIXED = 'fixed'
EXPENSE_TYPE_FLOATING = 'floating'
EXPENSE_TYPES = (EXPENSE_TYPE_FIXED, EXPENSE_TYPE_FLOATING)


class PaymentMixin:
    """Columns and behaviour shared by both payment tables"""

    id = db.Column(db.Integer, primary_key=True)
    amount_owed = db.Column(db.Numeric(10, 2), nullable=False)
    is_paid = db.Column(db.Boolean, default=False, nullable=False)
    paid_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def mark_paid(self):
        """Record the payment as settled"""
        self.is_paid = True
        self.paid_at = datetime.utcnow()

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'expense_id': self.expense_id,
            'user_id': self.debtor.user_id,
            'debtor': self.debtor.display_name,
            'amount_owed': format_money(self.amount_owed),
            'is_paid': self.is_paid,
            'paid_at': isoformat_or_none(self.paid_at),
            'created_at': isoformat_or_none(self.created_at)
        }


class HouseExpense(db.Model):
    """A fixed or floating house expense"""
    __tablename__ = 'house_expenses'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    expense_type = db.Column(db.String(20), nullable=False, default=EXPENSE_TYPE_FLOATING)
    recurrence_days = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    creator = db.relationship('User')
    payments = db.relationship('HouseExpensePayment', backref='expense', lazy=True,
                               cascade='all, delete-orphan',
                               order_by='HouseExpensePayment.id')

    def __repr__(self):
        return f'<HouseExpense {self.id}: {self.title} ({self.expense_type})>'

    @property
    def is_floating(self):
        return self.expense_type == EXPENSE_TYPE_FLOATING

    @property
    def next_due_date(self):
        """Next occurrence of a recurring expense"""
        if not self.recurrence_days:
            return None
        return (self.created_at or datetime.utcnow()) + timedelta(days=self.recurrence_days)

    def payment_for(self, user):
        """Share owed by `user`, if any"""
        for payment in self.payments:
            if payment.user_id == user.id:
                return payment
        return None

    def all_paid(self):
        """True once every share is settled (and at least one exists)"""
        return len(self.payments) > 0 and all(p.is_paid for p in self.payments)

    def paid_count(self):
        return sum(1 for p in self.payments if p.is_paid)

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'house_id': self.house_id,
            'title': self.title,
            'amount': format_money(self.amount),
            'expense_type': self.expense_type,
            'recurrence_days': self.recurrence_days,
            'next_due_date': isoformat_or_none(self.next_due_date),
            'created_by': self.creator.user_id,
            'creator': self.creator.display_name,
            'created_at': isoformat_or_none(self.created_at)
        }


class HouseExpensePayment(PaymentMixin, db.Model):
    """A member's share of a house expense"""
    __tablename__ = 'house_expense_payments'

    expense_id = db.Column(db.Integer, db.ForeignKey('house_expenses.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    debtor = db.relationship('User')

    def __repr__(self):
        return f'<HouseExpensePayment {self.id}: expense={self.expense_id} user={self.user_id}>'


class SharedExpense(db.Model):
    """A purchase made by one member and split with the rest of the house"""
    __tablename__ = 'shared_expenses'

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey('houses.id'), nullable=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    creator = db.relationship('User')
    payments = db.relationship('SharedExpensePayment', backref='expense', lazy=True,
                               cascade='all, delete-orphan',
                               order_by='SharedExpensePayment.id')

    def __repr__(self):
        return f'<SharedExpense {self.id}: {self.title}>'

    def unpaid_payments(self):
        return [p for p in self.payments if not p.is_paid]

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'house_id': self.house_id,
            'title': self.title,
            'total_amount': format_money(self.total_amount),
            'created_by': self.creator.user_id,
            'creator': self.creator.display_name,
            'created_at': isoformat_or_none(self.created_at)
        }


class SharedExpensePayment(PaymentMixin, db.Model):
    """What one member owes the creator of a shared expense"""
    __tablename__ = 'shared_expense_payments'

    expense_id = db.Column(db.Integer, db.ForeignKey('shared_expenses.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    debtor = db.relationship('User')

    def __repr__(self):
        return f'<SharedExpensePayment {self.id}: expense={self.expense_id} user={self.user_id}>'
