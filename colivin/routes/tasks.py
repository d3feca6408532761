"""
Task Routes

FLOW OVERVIEW
- /api/houses/<id>/tasks [GET, POST]
  • Active tasks newest first (with deadline / overdue state) / create a task.
- /api/houses/<id>/tasks/completed [GET]
  • Completed history, newest completion first.
- /api/houses/<id>/tasks/<task_id> [PATCH, DELETE]
  • Any member edits title / deadline or deletes.
- /api/houses/<id>/tasks/<task_id>/complete [POST]
  • Any member completes; the completer earns points.
"""

from datetime import datetime
from flask import Blueprint, jsonify, current_app
from ..models import db, HouseTask
from ..utils.auth_utils import get_current_user, house_member_required
from ..utils.api_utils import request_validator, parse_int_arg
from ..utils.error_handlers import ActionError
from ..utils.points_utils import award_points
from ..utils.prom_metrics import observe_action
from ..utils.validators import validate_text, validate_positive_int

tasks_bp = Blueprint('tasks', __name__)

DEFAULT_DEADLINE_DAYS = 7
MAX_DEADLINE_DAYS = 365

def _validated_title(title):
    result = validate_text(title, 'Title', max_length=200)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value

def _validated_deadline(deadline_days):
    result = validate_positive_int(deadline_days, 'number of days', max_value=MAX_DEADLINE_DAYS)
    if not result.is_valid:
        raise ActionError(result.error_message)
    return result.sanitized_value

def _get_task(house, task_id):
    task = HouseTask.query.filter_by(id=task_id, house_id=house.id).first()
    if task is None:
        raise ActionError.not_found('Task not found')
    return task

@tasks_bp.route('/<int:house_id>/tasks', methods=['GET'])
@house_member_required
def list_tasks(house):
    """Pending tasks"""
    now = datetime.utcnow()
    return jsonify({'tasks': [t.to_dict(now) for t in HouseTask.get_active_tasks(house.id)]})

@tasks_bp.route('/<int:house_id>/tasks/completed', methods=['GET'])
@house_member_required
def completed_tasks(house):
    """Task history"""
    limit = parse_int_arg('limit', 50, 200)
    return jsonify({'tasks': [t.to_dict() for t in HouseTask.get_completed_tasks(house.id, limit)]})

@tasks_bp.route('/<int:house_id>/tasks', methods=['POST'])
@house_member_required
def create_task(house):
    """Create a task"""
    data = request_validator.require_json_object()
    user = get_current_user()

    deadline_days = data.get('deadline_days')
    task = HouseTask(
        house_id=house.id,
        created_by=user.id,
        title=_validated_title(data.get('title')),
        deadline_days=DEFAULT_DEADLINE_DAYS if deadline_days in (None, '') else _validated_deadline(deadline_days)
    )
    db.session.add(task)
    db.session.commit()

    observe_action('task_created')
    current_app.logger.info(f"Task {task.id} created in house {house.id} by {user.display_name}")
    return jsonify({'task': task.to_dict()}), 201

@tasks_bp.route('/<int:house_id>/tasks/<int:task_id>', methods=['PATCH'])
@house_member_required
def update_task(house, task_id):
    """Edit title and/or deadline"""
    data = request_validator.require_json_object()
    task = _get_task(house, task_id)

    if 'title' in data:
        task.title = _validated_title(data.get('title'))
    if 'deadline_days' in data:
        task.deadline_days = _validated_deadline(data.get('deadline_days'))

    db.session.commit()
    return jsonify({'task': task.to_dict()})

@tasks_bp.route('/<int:house_id>/tasks/<int:task_id>/complete', methods=['POST'])
@house_member_required
def complete_task(house, task_id):
    """Mark a task as done"""
    user = get_current_user()
    task = _get_task(house, task_id)
    if task.is_completed:
        raise ActionError.conflict('This task is already completed')

    task.complete(user)
    award_points(house, user, current_app.config.get('POINTS_TASK_COMPLETED', 10), 'task_completed')
    db.session.commit()

    observe_action('task_completed')
    current_app.logger.info(f"Task {task.id} completed by {user.display_name}")
    return jsonify({'task': task.to_dict()})

@tasks_bp.route('/<int:house_id>/tasks/<int:task_id>', methods=['DELETE'])
@house_member_required
def delete_task(house, task_id):
    """Delete a task"""
    task = _get_task(house, task_id)
    db.session.delete(task)
    db.session.commit()
    return jsonify({'message': 'Task deleted'})
