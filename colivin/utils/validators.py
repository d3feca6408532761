"""
Input Validation Utilities

FLOW OVERVIEW
- validate_email(email)
  • RFC-like syntax checks; returns sanitized lowercased value.
- validate_username(username) / validate_tag(tag)
  • Identity parts of `username#tag`; tags are normalized to uppercase.
- validate_password_hash(hash)
  • Enforce bcrypt hash format.
- validate_password_strength(password)
  • Length plus uppercase, digit and special character requirements.
- validate_text(value, field, max_length, required)
  • Titles, chat content, rules and descriptions.
- validate_amount(value) / validate_positive_int(value, field, max_value)
  • Money and day counts coming from JSON or form payloads.
- validate_invite_code(code), validate_date(value), validate_time(value)
- sanitize_input(input, max_length)
  • Trim, bound length, normalize, and remove null bytes.
"""

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Any
from dataclasses import dataclass


@dataclass
class ValidationResult:
    """Result of validation operation"""
    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[Any] = None


class InputValidator:
    """Input validation for identity and household records"""

    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9.!#$%&\'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$'
    )

    USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')
    TAG_PATTERN = re.compile(r'^[A-Za-z0-9]{4}$')
    INVITE_CODE_PATTERN = re.compile(r'^[A-Z0-9]{8}$')
    BCRYPT_PATTERN = re.compile(r'^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$')
    TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$')

    PASSWORD_SPECIAL_CHARACTERS = '!@#$%^&*'

    MAX_AMOUNT = Decimal('99999999.99')

    @classmethod
    def validate_email(cls, email: str) -> ValidationResult:
        """
        Validate email address

        Args:
            email: Email address to validate

        Returns:
            ValidationResult with validation status and sanitized value
        """
        if not email or not isinstance(email, str):
            return ValidationResult(False, "Email is required")

        email = email.strip()
        if email == "":
            return ValidationResult(False, "Email is required")

        # RFC 5321 limits
        if len(email) > 254:
            return ValidationResult(False, "Email address too long (max 254 characters)")

        if not cls.EMAIL_PATTERN.match(email):
            return ValidationResult(False, "Invalid email")

        local_part, domain = email.rsplit('@', 1)
        if len(local_part) > 64:
            return ValidationResult(False, "Email local part too long (max 64 characters)")

        if local_part.startswith('.') or local_part.endswith('.') or '..' in local_part:
            return ValidationResult(False, "Invalid email")

        return ValidationResult(True, sanitized_value=email.lower())

    @classmethod
    def validate_username(cls, username: str) -> ValidationResult:
        """Validate a username (the part before '#')"""
        if not username or not isinstance(username, str):
            return ValidationResult(False, "Username is required")

        username = username.strip()
        if len(username) < 3:
            return ValidationResult(False, "Username must be at least 3 characters long")

        if len(username) > 30:
            return ValidationResult(False, "Username too long (max 30 characters)")

        if not cls.USERNAME_PATTERN.match(username):
            return ValidationResult(False, "Username may only contain letters, numbers, '.', '-' and '_'")

        return ValidationResult(True, sanitized_value=username)

    @classmethod
    def validate_tag(cls, tag: str) -> ValidationResult:
        """Validate a 4-character tag; tags are stored uppercase"""
        if not tag or not isinstance(tag, str):
            return ValidationResult(False, "Tag is required")

        tag = tag.strip()
        if not cls.TAG_PATTERN.match(tag):
            return ValidationResult(False, "Tag must have exactly 4 characters (letters or numbers)")

        return ValidationResult(True, sanitized_value=tag.upper())

    @classmethod
    def validate_password_hash(cls, password_hash: str) -> ValidationResult:
        """
        Validate password hash format

        Args:
            password_hash: bcrypt hash to validate

        Returns:
            ValidationResult with validation status
        """
        if not password_hash or not isinstance(password_hash, str):
            return ValidationResult(False, "Password hash must be a non-empty string")

        password_hash = password_hash.strip()
        if not cls.BCRYPT_PATTERN.match(password_hash):
            return ValidationResult(False, "Invalid password hash format: expected a bcrypt hash")

        return ValidationResult(True, sanitized_value=password_hash)

    @classmethod
    def validate_password_strength(cls, password: str) -> ValidationResult:
        """
        Validate password strength requirements

        Args:
            password: Password to validate

        Returns:
            ValidationResult with validation status
        """
        if not password or not isinstance(password, str):
            return ValidationResult(False, "Password is required")

        if len(password) < 8:
            return ValidationResult(False, "Password must be at least 8 characters long")

        if len(password) > 128:
            return ValidationResult(False, "Password too long (max 128 characters)")

        if not re.search(r'[A-Z]', password):
            return ValidationResult(False, "Password must contain at least 1 uppercase letter")

        if not re.search(r'[0-9]', password):
            return ValidationResult(False, "Password must contain at least 1 number")

        if not any(c in cls.PASSWORD_SPECIAL_CHARACTERS for c in password):
            return ValidationResult(False, "Password must contain at least 1 special character (!@#$%^&*)")

        return ValidationResult(True)

    @classmethod
    def validate_text(cls, value: Any, field: str, max_length: int = 200, required: bool = True) -> ValidationResult:
        """
        Validate free text such as titles, chat content and descriptions

        Blank optional text is normalized to None.
        """
        if value is None:
            value = ''
        if not isinstance(value, str):
            return ValidationResult(False, f"{field} must be text")

        sanitized = cls.sanitize_input(value, max_length=None)
        if not sanitized:
            if required:
                return ValidationResult(False, f"{field} is required")
            return ValidationResult(True, sanitized_value=None)

        if len(sanitized) > max_length:
            return ValidationResult(False, f"{field} too long (max {max_length} characters)")

        return ValidationResult(True, sanitized_value=sanitized)

    @classmethod
    def validate_amount(cls, value: Any) -> ValidationResult:
        """Validate a money amount greater than 0; returns a Decimal rounded to cents"""
        if value is None or isinstance(value, bool) or value == '':
            return ValidationResult(False, "Please enter a valid amount greater than 0.")

        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ValidationResult(False, "Please enter a valid amount greater than 0.")

        if not amount.is_finite() or amount <= 0:
            return ValidationResult(False, "Please enter a valid amount greater than 0.")

        if amount > cls.MAX_AMOUNT:
            return ValidationResult(False, "Amount is too large.")

        try:
            amount = amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return ValidationResult(False, "Please enter a valid amount greater than 0.")
        if amount <= 0:
            return ValidationResult(False, "Please enter a valid amount greater than 0.")

        return ValidationResult(True, sanitized_value=amount)

    @classmethod
    def validate_positive_int(cls, value: Any, field: str, max_value: Optional[int] = None) -> ValidationResult:
        """Validate a whole number of at least 1 (e.g. deadline or recurrence days)"""
        if value is None or isinstance(value, bool) or value == '':
            return ValidationResult(False, f"Please enter a valid {field} (a number greater than 0).")

        if isinstance(value, float) and not value.is_integer():
            return ValidationResult(False, f"Please enter a valid {field} (a number greater than 0).")

        try:
            number = int(str(value).strip()) if not isinstance(value, (int, float)) else int(value)
        except ValueError:
            return ValidationResult(False, f"Please enter a valid {field} (a number greater than 0).")

        if number <= 0:
            return ValidationResult(False, f"Please enter a valid {field} (a number greater than 0).")

        if max_value is not None and number > max_value:
            return ValidationResult(False, f"{field.capitalize()} cannot exceed {max_value}.")

        return ValidationResult(True, sanitized_value=number)

    @classmethod
    def validate_invite_code(cls, code: Any) -> ValidationResult:
        """Validate an invite code; lookups are case-insensitive"""
        if not code or not isinstance(code, str) or len(code.strip()) != 8:
            return ValidationResult(False, "The invite code must have 8 characters")

        code = code.strip().upper()
        if not cls.INVITE_CODE_PATTERN.match(code):
            return ValidationResult(False, "Invalid invite code.")

        return ValidationResult(True, sanitized_value=code)

    @classmethod
    def validate_date(cls, value: Any, field: str = 'date') -> ValidationResult:
        """Validate an ISO date (YYYY-MM-DD)"""
        if isinstance(value, date) and not isinstance(value, datetime):
            return ValidationResult(True, sanitized_value=value)

        if not value or not isinstance(value, str):
            return ValidationResult(False, f"Please select a {field}.")

        try:
            parsed = date.fromisoformat(value.strip())
        except ValueError:
            return ValidationResult(False, f"Invalid {field}. Use the YYYY-MM-DD format.")

        return ValidationResult(True, sanitized_value=parsed)

    @classmethod
    def validate_time(cls, value: Any) -> ValidationResult:
        """Validate an optional time of day (HH:MM); blank means no time"""
        if value is None or (isinstance(value, str) and value.strip() == ''):
            return ValidationResult(True, sanitized_value=None)

        if not isinstance(value, str) or not cls.TIME_PATTERN.match(value.strip()):
            return ValidationResult(False, "Invalid time. Use the HH:MM format.")

        hours, minutes = value.strip().split(':')[:2]
        return ValidationResult(True, sanitized_value=time(int(hours), int(minutes)))

    @classmethod
    def sanitize_input(cls, input_string: str, max_length: Optional[int] = 1000) -> str:
        """
        Sanitize user input

        Args:
            input_string: Input string to sanitize
            max_length: Maximum allowed length (None keeps the full text)

        Returns:
            Sanitized string
        """
        if not input_string:
            return ""

        sanitized = str(input_string).strip()

        if max_length is not None and len(sanitized) > max_length:
            sanitized = sanitized[:max_length]

        # Remove null bytes
        sanitized = sanitized.replace('\x00', '')

        # Normalize line endings
        sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

        return sanitized


# Convenience functions for common validations
def validate_email(email: str) -> ValidationResult:
    """Validate email address"""
    return InputValidator.validate_email(email)


def validate_username(username: str) -> ValidationResult:
    """Validate username"""
    return InputValidator.validate_username(username)


def validate_tag(tag: str) -> ValidationResult:
    """Validate tag"""
    return InputValidator.validate_tag(tag)


def validate_password_hash(password_hash: str) -> ValidationResult:
    """Validate password hash"""
    return InputValidator.validate_password_hash(password_hash)


def validate_password_strength(password: str) -> ValidationResult:
    """Validate password strength"""
    return InputValidator.validate_password_strength(password)


def validate_text(value: Any, field: str, max_length: int = 200, required: bool = True) -> ValidationResult:
    """Validate free text"""
    return InputValidator.validate_text(value, field, max_length, required)


def validate_amount(value: Any) -> ValidationResult:
    """Validate a money amount"""
    return InputValidator.validate_amount(value)


def validate_positive_int(value: Any, field: str, max_value: Optional[int] = None) -> ValidationResult:
    """Validate a positive whole number"""
    return InputValidator.validate_positive_int(value, field, max_value)


def validate_invite_code(code: Any) -> ValidationResult:
    """Validate invite code"""
    return InputValidator.validate_invite_code(code)


def validate_date(value: Any, field: str = 'date') -> ValidationResult:
    """Validate ISO date"""
    return InputValidator.validate_date(value, field)


def validate_time(value: Any) -> ValidationResult:
    """Validate time of day"""
    return InputValidator.validate_time(value)


def sanitize_input(input_string: str, max_length: Optional[int] = 1000) -> str:
    """Sanitize user input"""
    return InputValidator.sanitize_input(input_string, max_length)
