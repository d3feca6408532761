"""
Expense Utilities

FLOW OVERVIEW
- split_amount(total, parts)
  • Cent-exact split: shares are rounded down to cents and the leftover cents go
    one each to the leading shares, so the shares always add up to `total`.

- House expenses (fixed / floating)
  • create_house_expense → floating: one payment per current member from the split;
    fixed: one payment for the creator owing the whole amount.
  • update_house_expense / delete_house_expense → creator only.
  • pay_house_expense → the caller settles their own share and earns points.
  • list_house_expenses → what is still open for the caller, grouped by type.

- Shared expenses
  • create_shared_expense → split over all N members; the creator keeps the first
    share and every other member gets a payment towards the creator.
  • update_shared_expense → payments recalculated over the current member count.
  • pay_shared_expense → only the debtor can settle; earns points.
  • get_my_debts / get_credits_owed → the two sides of the ledger for a member.

All functions raise ActionError for invalid input or forbidden actions and
commit on success.
"""

import logging
from decimal import Decimal, ROUND_DOWN

from flask import current_app

from ..models import (
    db, HouseExpense, HouseExpensePayment, SharedExpense, SharedExpensePayment
)
from ..models.expense import EXPENSE_TYPES, EXPENSE_TYPE_FIXED, EXPENSE_TYPE_FLOATING
from ..models.utils import format_money
from .error_handlers import ActionError
from .points_utils import award_points
from .prom_metrics import observe_action
from .validators import validate_text, validate_amount, validate_positive_int

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def split_amount(total, parts):
    """Split `total` into `parts` cent-rounded shares that add up exactly"""
    if parts < 1:
        raise ValueError('parts must be at least 1')

    total = Decimal(str(total)).quantize(CENT)
    base = (total / parts).quantize(CENT, rounding=ROUND_DOWN)
    leftover_cents = int((total - base * parts) / CENT)

    return [base + CENT if index < leftover_cents else base for index in range(parts)]


def _validated_title(title):
    result = validate_text(title, 'Title', max_length=200)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value


def _validated_amount(amount):
    result = validate_amount(amount)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value


def _validated_recurrence(recurrence_days):
    if recurrence_days is None or recurrence_days == '':
        return None
    result = validate_positive_int(recurrence_days, 'number of days', max_value=365)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value


def _get_house_expense(house, expense_id):
    expense = HouseExpense.query.filter_by(id=expense_id, house_id=house.id).first()
    if expense is None:
        raise ActionError.not_found('Expense not found')
    return expense


def _get_shared_expense(house, expense_id):
    expense = SharedExpense.query.filter_by(id=expense_id, house_id=house.id).first()
    if expense is None:
        raise ActionError.not_found('Expense not found')
    return expense


# House expenses

def create_house_expense(house, user, title, amount, expense_type=EXPENSE_TYPE_FLOATING,
                         recurrence_days=None):
    """Create a fixed or floating expense and its payment rows"""
    title = _validated_title(title)
    amount = _validated_amount(amount)
    recurrence_days = _validated_recurrence(recurrence_days)

    expense_type = (expense_type or EXPENSE_TYPE_FLOATING).strip().lower()
    if expense_type not in EXPENSE_TYPES:
        raise ActionError("Expense type must be 'fixed' or 'floating'.")

    members = house.ordered_members()
    if not members:
        raise ActionError('There are no members in the house.')

    expense = HouseExpense(
        house_id=house.id,
        created_by=user.id,
        title=title,
        amount=amount,
        expense_type=expense_type,
        recurrence_days=recurrence_days
    )
    db.session.add(expense)

    if expense_type == EXPENSE_TYPE_FIXED:
        expense.payments.append(HouseExpensePayment(user_id=user.id, amount_owed=amount))
    else:
        shares = split_amount(amount, len(members))
        for membership, share in zip(members, shares):
            expense.payments.append(HouseExpensePayment(user_id=membership.user_id, amount_owed=share))

    db.session.commit()

    observe_action('expense_created')
    logger.info(f"Created {expense_type} expense {expense.id} in house {house.id} by {user.display_name}")
    return expense


def update_house_expense(house, user, expense_id, title=None, amount=None):
    """Edit title and amount; payments follow the new amount"""
    expense = _get_house_expense(house, expense_id)
    if expense.created_by != user.id:
        raise ActionError.forbidden('Only the creator of the expense can edit it.')

    if title is not None:
        expense.title = _validated_title(title)

    if amount is not None:
        expense.amount = _validated_amount(amount)
        if expense.is_floating:
            shares = split_amount(expense.amount, len(expense.payments)) if expense.payments else []
            for payment, share in zip(expense.payments, shares):
                payment.amount_owed = share
        else:
            for payment in expense.payments:
                payment.amount_owed = expense.amount

    db.session.commit()
    logger.info(f"Updated expense {expense.id} in house {house.id}")
    return expense


def delete_house_expense(house, user, expense_id):
    """Delete an expense and its payments"""
    expense = _get_house_expense(house, expense_id)
    if expense.created_by != user.id:
        raise ActionError.forbidden('Only the creator of the expense can delete it.')

    db.session.delete(expense)
    db.session.commit()
    logger.info(f"Deleted expense {expense_id} from house {house.id}")


def pay_house_expense(house, user, expense_id):
    """Mark the caller's share of an expense as paid"""
    expense = _get_house_expense(house, expense_id)
    payment = expense.payment_for(user)
    if payment is None:
        raise ActionError.not_found('You have no payment for this expense')
    if payment.is_paid:
        raise ActionError.conflict('This expense is already paid')

    payment.mark_paid()
    award_points(house, user, current_app.config.get('POINTS_EXPENSE_PAID', 5), 'expense_paid')
    db.session.commit()

    observe_action('expense_paid')
    logger.info(f"{user.display_name} paid expense {expense.id} in house {house.id}")
    return payment


def _expense_entry(expense, user):
    my_payment = expense.payment_for(user)
    data = expense.to_dict()
    data['payments'] = [p.to_dict() for p in expense.payments]
    data['my_payment'] = my_payment.to_dict() if my_payment else None
    data['paid_count'] = expense.paid_count()
    data['total_members'] = len(expense.payments)
    return data


def list_house_expenses(house, user):
    """Open expenses for `user`, split into fixed and floating, newest first"""
    expenses = (
        HouseExpense.query
        .filter_by(house_id=house.id)
        .order_by(HouseExpense.created_at.desc(), HouseExpense.id.desc())
        .all()
    )

    grouped = {EXPENSE_TYPE_FIXED: [], EXPENSE_TYPE_FLOATING: []}
    for expense in expenses:
        if expense.all_paid():
            continue
        if not expense.is_floating and expense.payment_for(user) is None:
            continue
        grouped.setdefault(expense.expense_type, []).append(_expense_entry(expense, user))
    return grouped


def outstanding_house_expenses(house, user):
    """Sum of the caller's unpaid house expense shares"""
    payments = (
        HouseExpensePayment.query
        .join(HouseExpense, HouseExpense.id == HouseExpensePayment.expense_id)
        .filter(HouseExpense.house_id == house.id,
                HouseExpensePayment.user_id == user.id,
                HouseExpensePayment.is_paid.is_(False))
        .all()
    )
    return sum((p.amount_owed for p in payments), Decimal('0'))


# Shared expenses

def create_shared_expense(house, user, title, total_amount):
    """Record a purchase and the debts of every other member"""
    title = _validated_title(title)
    total_amount = _validated_amount(total_amount)

    members = house.ordered_members()
    if len(members) <= 1:
        raise ActionError('There are no other members in the house to split the expense with.')

    # Creator keeps the first share
    others = [m for m in members if m.user_id != user.id]
    shares = split_amount(total_amount, len(members))

    expense = SharedExpense(
        house_id=house.id,
        created_by=user.id,
        title=title,
        total_amount=total_amount
    )
    db.session.add(expense)
    for membership, share in zip(others, shares[1:]):
        expense.payments.append(SharedExpensePayment(user_id=membership.user_id, amount_owed=share))

    db.session.commit()

    observe_action('shared_expense_created')
    logger.info(f"Created shared expense {expense.id} in house {house.id} by {user.display_name}")
    return expense


def update_shared_expense(house, user, expense_id, title=None, total_amount=None):
    """Edit a shared expense; debts are recalculated over the current member count"""
    expense = _get_shared_expense(house, expense_id)
    if expense.created_by != user.id:
        raise ActionError.forbidden('Only the creator of the expense can edit it.')

    if title is not None:
        expense.title = _validated_title(title)

    if total_amount is not None:
        expense.total_amount = _validated_amount(total_amount)
        member_count = house.member_count()
        if member_count > 0 and expense.payments:
            shares = split_amount(expense.total_amount, member_count)
            debtor_shares = shares[1:] or shares
            for index, payment in enumerate(expense.payments):
                payment.amount_owed = debtor_shares[min(index, len(debtor_shares) - 1)]

    db.session.commit()
    logger.info(f"Updated shared expense {expense.id} in house {house.id}")
    return expense


def delete_shared_expense(house, user, expense_id):
    """Delete a shared expense and its debts"""
    expense = _get_shared_expense(house, expense_id)
    if expense.created_by != user.id:
        raise ActionError.forbidden('Only the creator of the expense can delete it.')

    db.session.delete(expense)
    db.session.commit()
    logger.info(f"Deleted shared expense {expense_id} from house {house.id}")


def pay_shared_expense(house, user, payment_id):
    """Debtor confirms they paid the creator back"""
    payment = (
        SharedExpensePayment.query
        .join(SharedExpense, SharedExpense.id == SharedExpensePayment.expense_id)
        .filter(SharedExpensePayment.id == payment_id, SharedExpense.house_id == house.id)
        .first()
    )
    if payment is None:
        raise ActionError.not_found('Payment not found')
    if payment.user_id != user.id:
        raise ActionError.forbidden('Only the debtor can mark this payment as paid.')
    if payment.is_paid:
        raise ActionError.conflict('This debt is already paid')

    payment.mark_paid()
    award_points(house, user, current_app.config.get('POINTS_SHARED_EXPENSE_PAID', 5), 'shared_expense_paid')
    db.session.commit()

    observe_action('shared_expense_paid')
    logger.info(f"{user.display_name} settled shared payment {payment.id} in house {house.id}")
    return payment


def get_my_debts(house, user):
    """Unpaid shares the caller owes to other members"""
    payments = (
        SharedExpensePayment.query
        .join(SharedExpense, SharedExpense.id == SharedExpensePayment.expense_id)
        .filter(SharedExpense.house_id == house.id,
                SharedExpensePayment.user_id == user.id,
                SharedExpensePayment.is_paid.is_(False))
        .order_by(SharedExpense.created_at.desc(), SharedExpensePayment.id.desc())
        .all()
    )

    debts = []
    for payment in payments:
        data = payment.to_dict()
        data['title'] = payment.expense.title
        data['total_amount'] = format_money(payment.expense.total_amount)
        data['creditor'] = payment.expense.creator.display_name
        data['creditor_id'] = payment.expense.creator.user_id
        debts.append(data)
    return debts


def get_credits_owed(house, user):
    """Expenses created by the caller that still have unpaid debts"""
    expenses = (
        SharedExpense.query
        .filter_by(house_id=house.id, created_by=user.id)
        .order_by(SharedExpense.created_at.desc(), SharedExpense.id.desc())
        .all()
    )

    credits = []
    for expense in expenses:
        unpaid = expense.unpaid_payments()
        if not unpaid:
            continue
        data = expense.to_dict()
        data['payments'] = [p.to_dict() for p in unpaid]
        data['outstanding'] = format_money(sum((p.amount_owed for p in unpaid), Decimal('0')))
        credits.append(data)
    return credits
