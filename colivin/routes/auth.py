"""
Authentication Routes

FLOW OVERVIEW
- /auth/register [POST]
  • Validate + create user; returns the public profile.
- /auth/login [POST]
  • Authenticate with email or username#tag → set session.
- /auth/token [POST]
  • Same credentials → JWT bearer token for API clients.
- /auth/logout [POST]
  • Clear session.
- /auth/me [GET]
  • Current user profile.
- /auth/tag-availability [GET]
  • Is `username#tag` still free?
- /auth/generate-tag [GET]
  • Random tag, free for the given username when one is passed.
"""

from flask import Blueprint, request, jsonify, session, current_app
from ..utils.auth_utils import (
    register_user, authenticate_user, generate_jwt_token, get_current_user,
    check_tag_availability, suggest_available_tag, login_required
)
from ..utils.api_utils import request_validator
from ..utils.error_handlers import ActionError
from ..utils.validators import validate_username, validate_tag
from ..models.utils import generate_random_tag

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/register', methods=['POST'])
def register():
    """User registration endpoint"""
    data = request_validator.require_json_object()

    user = register_user(
        data.get('email') or '',
        data.get('username') or '',
        data.get('tag') or '',
        data.get('password') or ''
    )

    return jsonify({
        'message': 'Registration successful!',
        'user': user.to_dict(include_email=True)
    }), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    """User login endpoint"""
    data = request_validator.require_json_object()

    user = authenticate_user(data.get('identifier') or data.get('email'), data.get('password'))

    session.clear()
    session['user_id'] = user.user_id
    session.permanent = True
    user.update_last_login()

    current_app.logger.info(f"User {user.display_name} logged in")
    return jsonify({
        'message': f'Welcome back, {user.display_name}!',
        'user': user.to_dict(include_email=True)
    })

@auth_bp.route('/token', methods=['POST'])
def token():
    """Issue a JWT for API clients"""
    data = request_validator.require_json_object()

    user = authenticate_user(data.get('identifier') or data.get('email'), data.get('password'))
    user.update_last_login()

    expires_in = current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', 3600)
    return jsonify({
        'access_token': generate_jwt_token(user, expires_in),
        'token_type': 'Bearer',
        'expires_in': expires_in
    })

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout endpoint"""
    session.clear()
    return jsonify({'message': 'You have been logged out successfully.'})

@auth_bp.route('/me')
@login_required
def me():
    """Current user profile"""
    return jsonify({'user': get_current_user().to_dict(include_email=True)})

@auth_bp.route('/tag-availability')
def tag_availability():
    """Check whether a `username#tag` pair is free"""
    username = validate_username(request.args.get('username', ''))
    if not username.is_valid:
        raise ActionError(username.error_message)

    tag = validate_tag(request.args.get('tag', ''))
    if not tag.is_valid:
        raise ActionError(tag.error_message)

    return jsonify({
        'username': username.sanitized_value,
        'tag': tag.sanitized_value,
        'available': check_tag_availability(username.sanitized_value, tag.sanitized_value)
    })

@auth_bp.route('/generate-tag')
def generate_tag():
    """Random tag, free for `username` when given"""
    username = (request.args.get('username') or '').strip()
    if not username:
        return jsonify({'tag': generate_random_tag()})

    tag = suggest_available_tag(username)
    if tag is None:
        return jsonify({'error': 'Could not find a free tag. Please choose one manually.'}), 409
    return jsonify({'tag': tag})
