"""
Input validation and log-safety helpers
"""

from typing import Any, Dict, Optional

SENSITIVE_FIELDS = ['password', 'token', 'secret', 'key', 'authorization', 'cookie']


def validate_user_id(user_id: Any) -> tuple[bool, Optional[str]]:
    """
    Validate a profile id coming from a request
    Returns: (is_valid, error_message)
    """
    if not user_id or not isinstance(user_id, str):
        return False, "userId is required"
    if len(user_id) > 64:
        return False, "userId is too long"
    return True, None


def redact_sensitive(details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Copy a dict for logging, replacing values of sensitive keys with [REDACTED]
    """
    if not details:
        return {}

    safe_details = {}
    for key, value in details.items():
        key_lower = str(key).lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
            safe_details[key] = "[REDACTED]"
        else:
            safe_details[key] = value
    return safe_details
