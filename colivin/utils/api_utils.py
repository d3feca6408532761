"""
API Utilities Module

FLOW OVERVIEW
- APIRequestValidator
  • validate_json_request → parse/validate JSON and return (ok, data, error).
  • validate_request_size → enforce the 64KB body limit.
  • require_json_object → same checks, raising ActionError for route handlers.
- parse_int_arg(name, default, max_value) → bounded integer query argument.

Used by every house-scoped blueprint to avoid code duplication.
"""

import logging
from typing import Dict, Any, Tuple, Optional
from flask import request

from .error_handlers import ActionError

MAX_REQUEST_BYTES = 65536


class APIRequestValidator:
    """Handles common request validation logic."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def validate_json_request(self, client_ip: str = None) -> Tuple[bool, Optional[Dict[str, Any]], Optional[str]]:
        """
        Validate and parse JSON request.

        Args:
            client_ip: Client IP for logging

        Returns:
            Tuple of (is_valid, data, error_message)
        """
        data = request.get_json(silent=True)

        if data is None:
            self.logger.warning(f"Missing or invalid JSON from {client_ip}")
            return False, None, 'Invalid request format. JSON payload required.'

        if not isinstance(data, dict):
            self.logger.warning(f"Invalid data type from {client_ip}: {type(data)}")
            return False, None, 'Request data must be a JSON object.'

        return True, data, None

    def validate_request_size(self, client_ip: str = None) -> Tuple[bool, Optional[str]]:
        """
        Validate request size limits.

        Args:
            client_ip: Client IP for logging

        Returns:
            Tuple of (is_valid, error_message)
        """
        content_length = request.content_length or 0
        if content_length > MAX_REQUEST_BYTES:
            self.logger.warning(f"Large request blocked from {client_ip}: {content_length} bytes")
            return False, 'Request too large. Maximum 64KB allowed.'

        return True, None

    def require_json_object(self) -> Dict[str, Any]:
        """Parsed JSON body of the current request; raises ActionError otherwise"""
        client_ip = request.remote_addr

        ok, error = self.validate_request_size(client_ip)
        if not ok:
            raise ActionError(error, 413)

        ok, data, error = self.validate_json_request(client_ip)
        if not ok:
            raise ActionError(error)
        return data


def parse_int_arg(name: str, default: Optional[int] = None, max_value: Optional[int] = None) -> Optional[int]:
    """Integer query argument, bounded by `max_value`"""
    raw = request.args.get(name)
    if raw is None or raw.strip() == '':
        return default

    try:
        value = int(raw)
    except ValueError:
        raise ActionError(f"Invalid '{name}' parameter")

    if value < 0:
        raise ActionError(f"Invalid '{name}' parameter")
    if max_value is not None:
        value = min(value, max_value)
    return value


# Global instance
request_validator = APIRequestValidator()
