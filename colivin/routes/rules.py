"""
House Rules Routes

FLOW OVERVIEW
- /api/houses/<id>/rules [GET]
  • Rules text plus whether the caller may edit it.
- /api/houses/<id>/rules [PUT]
  • Creator saves the rules (created on first save).
"""

from flask import Blueprint, jsonify, current_app
from ..models import db, HouseRules
from ..models.utils import isoformat_or_none
from ..utils.auth_utils import get_current_user, house_member_required
from ..utils.api_utils import request_validator
from ..utils.error_handlers import ActionError
from ..utils.validators import validate_text

rules_bp = Blueprint('rules', __name__)

MAX_RULES_LENGTH = 10000

def _rules_payload(house, user):
    rules = house.rules
    return {
        'content': rules.content if rules else '',
        'updated_at': isoformat_or_none(rules.updated_at) if rules else None,
        'created_by': rules.author.user_id if rules else None,
        'can_edit': house.is_creator(user)
    }

@rules_bp.route('/<int:house_id>/rules', methods=['GET'])
@house_member_required
def get_rules(house):
    """House rules"""
    return jsonify(_rules_payload(house, get_current_user()))

@rules_bp.route('/<int:house_id>/rules', methods=['PUT'])
@house_member_required
def save_rules(house):
    """Create or replace the house rules"""
    user = get_current_user()
    if not house.is_creator(user):
        raise ActionError.forbidden('Only the house creator can edit the rules.')

    data = request_validator.require_json_object()
    result = validate_text(data.get('content'), 'Rules', max_length=MAX_RULES_LENGTH, required=False)
    if not result.is_valid:
        raise ActionError(result.error_message)
    content = result.sanitized_value or ''

    if house.rules is None:
        db.session.add(HouseRules(house_id=house.id, created_by=user.id, content=content))
    else:
        house.rules.content = content
        house.rules.created_by = user.id
    db.session.commit()

    current_app.logger.info(f"Rules of house {house.id} saved by {user.display_name}")
    return jsonify(_rules_payload(house, user))
