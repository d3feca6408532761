"""
Calendar Routes

FLOW OVERVIEW
- /api/houses/<id>/events [GET]
  • Week view (Sunday to Saturday) around `week` (any ISO date, default today).
- /api/houses/<id>/events [POST]
  • Create an activity on a date, optionally at a time.
- /api/houses/<id>/events/<event_id> [GET, DELETE]
  • One event / creator deletes it.
"""

from flask import Blueprint, jsonify, request, current_app
from ..models import db, CalendarEvent
from ..utils.auth_utils import get_current_user, house_member_required
from ..utils.api_utils import request_validator
from ..utils.calendar_utils import build_week_view
from ..utils.error_handlers import ActionError
from ..utils.prom_metrics import observe_action
from ..utils.validators import validate_text, validate_date, validate_time

calendar_bp = Blueprint('calendar', __name__)

def _get_event(house, event_id):
    event = CalendarEvent.query.filter_by(id=event_id, house_id=house.id).first()
    if event is None:
        raise ActionError.not_found('Event not found')
    return event

def _checked(result):
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value

@calendar_bp.route('/<int:house_id>/events', methods=['GET'])
@house_member_required
def week(house):
    """Events of one week"""
    day = None
    if request.args.get('week'):
        day = _checked(validate_date(request.args.get('week'), 'week'))
    return jsonify(build_week_view(house, day))

@calendar_bp.route('/<int:house_id>/events', methods=['POST'])
@house_member_required
def create_event(house):
    """Add an activity to the calendar"""
    data = request_validator.require_json_object()
    user = get_current_user()

    event = CalendarEvent(
        house_id=house.id,
        created_by=user.id,
        title=_checked(validate_text(data.get('title'), 'Title', max_length=200)),
        description=_checked(validate_text(data.get('description'), 'Description', max_length=1000, required=False)),
        event_date=_checked(validate_date(data.get('event_date'), 'date')),
        event_time=_checked(validate_time(data.get('event_time')))
    )
    db.session.add(event)
    db.session.commit()

    observe_action('event_created')
    current_app.logger.info(f"Event {event.id} created in house {house.id} by {user.display_name}")
    return jsonify({'event': event.to_dict()}), 201

@calendar_bp.route('/<int:house_id>/events/<int:event_id>', methods=['GET'])
@house_member_required
def get_event(house, event_id):
    """One event"""
    return jsonify({'event': _get_event(house, event_id).to_dict()})

@calendar_bp.route('/<int:house_id>/events/<int:event_id>', methods=['DELETE'])
@house_member_required
def delete_event(house, event_id):
    """Delete an event you created"""
    event = _get_event(house, event_id)
    if event.created_by != get_current_user().id:
        raise ActionError.forbidden('Only the creator of the event can delete it.')

    db.session.delete(event)
    db.session.commit()
    return jsonify({'message': 'Event deleted'})
