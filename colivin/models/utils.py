"""
Model Utilities

This module contains identifier and code generators for the models package.
"""

import secrets
import string

TAG_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits

TAG_LENGTH = 4
INVITE_CODE_LENGTH = 8

def generate_user_id():
    """Generate a unique 12-character public user ID"""
    return ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(12))

def generate_random_tag():
    """Generate a 4-character tag that disambiguates equal usernames"""
    return ''.join(secrets.choice(TAG_ALPHABET) for _ in range(TAG_LENGTH))

def generate_invite_code():
    """Generate an 8-character house invite code"""
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))

def format_money(value):
    """Render a Decimal money column for JSON output"""
    if value is None:
        return None
    return round(float(value), 2)

def isoformat_or_none(value):
    """ISO timestamp for JSON output, tolerating unset columns"""
    return value.isoformat() if value else None
