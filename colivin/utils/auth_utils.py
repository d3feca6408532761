"""
Authentication Utilities

This module contains utility functions for identity and access control:
password hashing, registration, login by email or `username#tag`, JWT
bearer tokens for API clients, and the decorators that guard routes.
"""

import logging
from datetime import datetime, timedelta
from functools import wraps

import bcrypt
import jwt
from flask import current_app, jsonify, request, session

from ..models import db, User, House
from ..models.utils import generate_random_tag
from .error_handlers import ActionError
from .validators import (
    validate_email, validate_username, validate_tag, validate_password_strength
)

logger = logging.getLogger(__name__)

def hash_password(password):
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=current_app.config.get('BCRYPT_LOG_ROUNDS', 12))
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

def verify_password(password, password_hash):
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False

def check_tag_availability(username, tag):
    """True when no user already has this `username#tag` pair"""
    return User.find_by_handle(username.strip(), tag.strip()) is None

def check_email_exists(email):
    """True when an account already uses this email"""
    return User.query.filter_by(email=email.strip().lower()).first() is not None

def suggest_available_tag(username, attempts=10):
    """Random tag not yet taken for `username`"""
    for _ in range(attempts):
        tag = generate_random_tag()
        if check_tag_availability(username, tag):
            return tag
    return None

def register_user(email, username, tag, password):
    """Create a new user after validating every field"""
    if not all(isinstance(value, str) for value in (email, username, tag, password)):
        raise ActionError('All fields must be text')

    email, username, tag = email.strip(), username.strip(), tag.strip()
    if not email or not username or not tag or not password:
        raise ActionError('All fields are required')

    for result in (validate_email(email), validate_username(username),
                   validate_tag(tag), validate_password_strength(password)):
        if not result.is_valid:
            raise ActionError(result.error_message)

    email = validate_email(email).sanitized_value
    username = validate_username(username).sanitized_value
    tag = validate_tag(tag).sanitized_value

    if check_email_exists(email):
        raise ActionError.conflict('Email is already in use')

    if not check_tag_availability(username, tag):
        raise ActionError.conflict('Tag is not available. Please choose another one.')

    user = User(email=email, username=username, tag=tag, password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()

    logger.info(f"Registered user {user.display_name}")
    return user

def resolve_login_email(identifier):
    """Turn a login identifier (email or `username#tag`) into an email"""
    if not isinstance(identifier, str):
        raise ActionError('Invalid format. Use email or username#tag')
    identifier = identifier.strip()
    if '@' in identifier:
        return identifier.lower()

    if '#' not in identifier:
        raise ActionError('Invalid format. Use email or username#tag')

    username, tag = identifier.rsplit('#', 1)
    user = User.find_by_handle(username, tag)
    if not user:
        raise ActionError('Invalid credentials', 401)
    return user.email

def authenticate_user(identifier, password):
    """Authenticate a user with email or `username#tag` and password"""
    if not identifier or not password:
        raise ActionError('All fields are required')
    if not isinstance(password, str):
        raise ActionError('Invalid credentials', 401)

    email = resolve_login_email(identifier)
    user = User.query.filter_by(email=email).first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {identifier}")
        raise ActionError('Invalid credentials', 401)

    return user

def generate_jwt_token(user, expires_in=None):
    """Generate a signed JWT carrying the public user id"""
    if expires_in is None:
        expires_in = current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', 3600)
    payload = {
        'user_id': user.user_id,
        'exp': datetime.utcnow() + timedelta(seconds=expires_in),
        'iat': datetime.utcnow()
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm='HS256')

def verify_jwt_token(token):
    """Verify a JWT and return its payload, or None when invalid or expired"""
    try:
        return jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

def get_current_user():
    """User behind the session cookie or the `Authorization: Bearer` header"""
    public_id = session.get('user_id')
    if not public_id:
        auth_header = (request.headers.get('Authorization') or '').strip()
        if auth_header.lower().startswith('bearer '):
            payload = verify_jwt_token(auth_header.split(' ', 1)[1].strip())
            if payload:
                public_id = payload.get('user_id')

    return User.find_by_public_id(public_id) if public_id else None

def login_required(f):
    """Decorator to require user login"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_user() is None:
            return jsonify({'error': 'Unauthorized. Please log in.'}), 401
        return f(*args, **kwargs)
    return decorated_function

def house_member_required(f):
    """Decorator that resolves `house_id` into `house` for members only"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return jsonify({'error': 'Unauthorized. Please log in.'}), 401

        house = db.session.get(House, kwargs.pop('house_id'))
        if house is None:
            return jsonify({'error': 'House not found'}), 404

        if not house.is_member(user):
            return jsonify({'error': 'You are not a member of this house'}), 403

        return f(*args, house=house, **kwargs)
    return decorated_function
