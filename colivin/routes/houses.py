"""
House Routes

FLOW OVERVIEW
- /api/houses [GET, POST]
  • Houses of the current user / create a house (caller becomes creator).
- /api/houses/join [POST]
  • Join by invite code.
- /api/houses/<id> [GET]
  • Dashboard summary.
- /api/houses/<id>/members [GET]
- /api/houses/<id>/leave [POST]
- /api/houses/<id>/members/<member_id> [DELETE]
  • Creator removes a member.
- /api/houses/<id>/members/<member_id>/promote [POST]
  • Creator hands the house over.
- /api/houses/<id>/invite [POST]
  • Email the invite code.
- /api/houses/<id>/leaderboard [GET]
"""

from flask import Blueprint, jsonify, current_app
from ..utils.auth_utils import get_current_user, login_required, house_member_required
from ..utils.api_utils import request_validator
from ..utils import house_utils
from ..utils.points_utils import get_leaderboard

houses_bp = Blueprint('houses', __name__)

@houses_bp.route('', methods=['GET'])
@login_required
def list_houses():
    """Houses the current user belongs to"""
    user = get_current_user()
    houses = house_utils.get_user_houses(user)
    return jsonify({
        'houses': [
            dict(house.to_dict(), is_creator=house.is_creator(user), member_count=house.member_count())
            for house in houses
        ]
    })

@houses_bp.route('', methods=['POST'])
@login_required
def create_house():
    """Create a house"""
    data = request_validator.require_json_object()
    house = house_utils.create_house(data.get('name'), get_current_user())
    return jsonify({'message': 'House created successfully', 'house': house.to_dict()}), 201

@houses_bp.route('/join', methods=['POST'])
@login_required
def join_house():
    """Join a house with its invite code"""
    data = request_validator.require_json_object()
    house = house_utils.join_house_by_invite_code(data.get('invite_code'), get_current_user())
    return jsonify({'message': f'You joined {house.name}', 'house': house.to_dict()})

@houses_bp.route('/<int:house_id>', methods=['GET'])
@house_member_required
def dashboard(house):
    """House dashboard"""
    return jsonify(house_utils.build_dashboard(house, get_current_user()))

@houses_bp.route('/<int:house_id>/members', methods=['GET'])
@house_member_required
def members(house):
    """Members of the house, oldest first"""
    return jsonify({'members': house_utils.get_house_members(house)})

@houses_bp.route('/<int:house_id>/leave', methods=['POST'])
@house_member_required
def leave(house):
    """Leave the house"""
    deleted = house_utils.leave_house(house, get_current_user())
    return jsonify({'message': 'You left the house', 'house_deleted': deleted})

@houses_bp.route('/<int:house_id>/members/<int:member_id>', methods=['DELETE'])
@house_member_required
def remove_member(house, member_id):
    """Remove a member (creator only)"""
    house_utils.remove_member(house, get_current_user(), member_id)
    return jsonify({'message': 'Member removed'})

@houses_bp.route('/<int:house_id>/members/<int:member_id>/promote', methods=['POST'])
@house_member_required
def promote_member(house, member_id):
    """Make another member the house creator"""
    membership = house_utils.promote_member(house, get_current_user(), member_id)
    return jsonify({'message': f'{membership.user.display_name} is now the house creator',
                    'member': membership.to_dict()})

@houses_bp.route('/<int:house_id>/invite', methods=['POST'])
@house_member_required
def invite(house):
    """Email the invite code to someone"""
    data = request_validator.require_json_object()
    mail = current_app.extensions['mail']
    sent = house_utils.send_house_invite(house, get_current_user(), data.get('email'), mail)
    return jsonify({'sent': sent, 'invite_code': house.invite_code})

@houses_bp.route('/<int:house_id>/leaderboard', methods=['GET'])
@house_member_required
def leaderboard(house):
    """Points ranking of the house"""
    return jsonify({'leaderboard': get_leaderboard(house, get_current_user())})
