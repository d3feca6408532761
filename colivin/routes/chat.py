"""
Chat Routes

FLOW OVERVIEW
- /api/houses/<id>/messages [GET]
  • Oldest first; `after` (message id) for polling, `limit` for the most recent N.
- /api/houses/<id>/messages [POST]
  • Send a message.
- /api/houses/<id>/messages/<message_id> [PATCH, DELETE]
  • Author edits (flagged as edited) or deletes their message.
"""

from flask import Blueprint, jsonify, current_app
from ..models import db, ChatMessage
from ..utils.auth_utils import get_current_user, house_member_required
from ..utils.api_utils import request_validator, parse_int_arg
from ..utils.error_handlers import ActionError
from ..utils.prom_metrics import observe_action
from ..utils.validators import validate_text

chat_bp = Blueprint('chat', __name__)

MAX_MESSAGE_LENGTH = 2000
DEFAULT_MESSAGE_LIMIT = 200
MAX_MESSAGE_LIMIT = 500

def _validated_content(content):
    result = validate_text(content, 'Message', max_length=MAX_MESSAGE_LENGTH)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value

def _own_message(house, message_id, user):
    message = ChatMessage.query.filter_by(id=message_id, house_id=house.id).first()
    if message is None:
        raise ActionError.not_found('Message not found')
    if message.user_id != user.id:
        raise ActionError.forbidden('You can only change your own messages.')
    return message

@chat_bp.route('/<int:house_id>/messages', methods=['GET'])
@house_member_required
def list_messages(house):
    """Messages of the house chat"""
    after_id = parse_int_arg('after')
    limit = parse_int_arg('limit', DEFAULT_MESSAGE_LIMIT, MAX_MESSAGE_LIMIT)
    messages = ChatMessage.get_house_messages(house.id, after_id=after_id, limit=limit)
    return jsonify({'messages': [m.to_dict() for m in messages]})

@chat_bp.route('/<int:house_id>/messages', methods=['POST'])
@house_member_required
def send_message(house):
    """Post a message to the house chat"""
    data = request_validator.require_json_object()
    user = get_current_user()

    message = ChatMessage(house_id=house.id, user_id=user.id, content=_validated_content(data.get('content')))
    db.session.add(message)
    db.session.commit()

    observe_action('message_sent')
    current_app.logger.info(f"Message {message.id} posted in house {house.id} by {user.display_name}")
    return jsonify({'message': message.to_dict()}), 201

@chat_bp.route('/<int:house_id>/messages/<int:message_id>', methods=['PATCH'])
@house_member_required
def edit_message(house, message_id):
    """Edit one of your messages"""
    data = request_validator.require_json_object()
    message = _own_message(house, message_id, get_current_user())

    message.edit(_validated_content(data.get('content')))
    db.session.commit()
    return jsonify({'message': message.to_dict()})

@chat_bp.route('/<int:house_id>/messages/<int:message_id>', methods=['DELETE'])
@house_member_required
def delete_message(house, message_id):
    """Delete one of your messages"""
    message = _own_message(house, message_id, get_current_user())

    db.session.delete(message)
    db.session.commit()
    return jsonify({'message': 'Message deleted'})
