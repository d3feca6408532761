"""
Expense Routes

FLOW OVERVIEW
- /api/houses/<id>/expenses [GET, POST]
  • Open fixed / floating expenses of the caller / create an expense.
- /api/houses/<id>/expenses/<expense_id> [PATCH, DELETE]
  • Creator edits (payments follow) or deletes.
- /api/houses/<id>/expenses/<expense_id>/pay [POST]
  • Caller pays their share.
- /api/houses/<id>/shared-expenses [GET, POST]
  • My debts and credits owed / record a shared purchase.
- /api/houses/<id>/shared-expenses/<expense_id> [PATCH, DELETE]
- /api/houses/<id>/shared-expenses/payments/<payment_id>/pay [POST]
  • Debtor settles a debt.
"""

from flask import Blueprint, jsonify
from ..utils.auth_utils import get_current_user, house_member_required
from ..utils.api_utils import request_validator
from ..utils import expense_utils

expenses_bp = Blueprint('expenses', __name__)

@expenses_bp.route('/<int:house_id>/expenses', methods=['GET'])
@house_member_required
def list_expenses(house):
    """Open expenses for the caller"""
    return jsonify(expense_utils.list_house_expenses(house, get_current_user()))

@expenses_bp.route('/<int:house_id>/expenses', methods=['POST'])
@house_member_required
def create_expense(house):
    """Create a fixed or floating expense"""
    data = request_validator.require_json_object()
    expense = expense_utils.create_house_expense(
        house, get_current_user(),
        data.get('title'), data.get('amount'),
        expense_type=data.get('expense_type'),
        recurrence_days=data.get('recurrence_days')
    )
    return jsonify({
        'expense': expense.to_dict(),
        'payments': [p.to_dict() for p in expense.payments]
    }), 201

@expenses_bp.route('/<int:house_id>/expenses/<int:expense_id>', methods=['PATCH'])
@house_member_required
def update_expense(house, expense_id):
    """Edit title and/or amount"""
    data = request_validator.require_json_object()
    expense = expense_utils.update_house_expense(
        house, get_current_user(), expense_id,
        title=data.get('title'), amount=data.get('amount')
    )
    return jsonify({
        'expense': expense.to_dict(),
        'payments': [p.to_dict() for p in expense.payments]
    })

@expenses_bp.route('/<int:house_id>/expenses/<int:expense_id>', methods=['DELETE'])
@house_member_required
def delete_expense(house, expense_id):
    """Delete an expense"""
    expense_utils.delete_house_expense(house, get_current_user(), expense_id)
    return jsonify({'message': 'Expense deleted'})

@expenses_bp.route('/<int:house_id>/expenses/<int:expense_id>/pay', methods=['POST'])
@house_member_required
def pay_expense(house, expense_id):
    """Pay your share"""
    payment = expense_utils.pay_house_expense(house, get_current_user(), expense_id)
    return jsonify({'message': 'Payment registered', 'payment': payment.to_dict()})

@expenses_bp.route('/<int:house_id>/shared-expenses', methods=['GET'])
@house_member_required
def list_shared_expenses(house):
    """Both sides of the shared expense ledger"""
    user = get_current_user()
    return jsonify({
        'debts': expense_utils.get_my_debts(house, user),
        'credits': expense_utils.get_credits_owed(house, user)
    })

@expenses_bp.route('/<int:house_id>/shared-expenses', methods=['POST'])
@house_member_required
def create_shared_expense(house):
    """Split a purchase with the rest of the house"""
    data = request_validator.require_json_object()
    expense = expense_utils.create_shared_expense(
        house, get_current_user(), data.get('title'), data.get('total_amount')
    )
    return jsonify({
        'expense': expense.to_dict(),
        'payments': [p.to_dict() for p in expense.payments]
    }), 201

@expenses_bp.route('/<int:house_id>/shared-expenses/<int:expense_id>', methods=['PATCH'])
@house_member_required
def update_shared_expense(house, expense_id):
    """Edit title and/or total"""
    data = request_validator.require_json_object()
    expense = expense_utils.update_shared_expense(
        house, get_current_user(), expense_id,
        title=data.get('title'), total_amount=data.get('total_amount')
    )
    return jsonify({
        'expense': expense.to_dict(),
        'payments': [p.to_dict() for p in expense.payments]
    })

@expenses_bp.route('/<int:house_id>/shared-expenses/<int:expense_id>', methods=['DELETE'])
@house_member_required
def delete_shared_expense(house, expense_id):
    """Delete a shared expense"""
    expense_utils.delete_shared_expense(house, get_current_user(), expense_id)
    return jsonify({'message': 'Expense deleted'})

@expenses_bp.route('/<int:house_id>/shared-expenses/payments/<int:payment_id>/pay', methods=['POST'])
@house_member_required
def pay_shared_expense(house, payment_id):
    """Confirm you paid the creator back"""
    payment = expense_utils.pay_shared_expense(house, get_current_user(), payment_id)
    return jsonify({'message': 'Payment registered', 'payment': payment.to_dict()})
