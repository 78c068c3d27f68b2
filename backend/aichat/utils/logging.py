"""
Logging utilities that keep secrets out of agent logs.

Tool inputs and model output are logged verbatim at DEBUG/INFO, so anything that
looks like a credential is redacted first.
"""

import re
from typing import Any, Dict, Optional

REDACTED = '***REDACTED***'

# Patterns to detect potential secrets in free text
SECRET_PATTERNS = [
    # Double-quoted JSON style
    (re.compile(r'("(?:password|passphrase|token|api_?key|apiKey|secret)"\s*:\s*")[^"]*(")', re.IGNORECASE), r'\1' + REDACTED + r'\2'),
    # Single-quoted repr() style
    (re.compile(r"('(?:password|passphrase|token|api_?key|apiKey|secret)'\s*:\s*')[^']*(')", re.IGNORECASE), r"\1" + REDACTED + r"\2"),
    # Query string style
    (re.compile(r'((?:password|passphrase|token|api_key)=)[^\s&]+', re.IGNORECASE), r'\1' + REDACTED),
    # Bearer tokens and provider keys
    (re.compile(r'(Bearer\s+)[A-Za-z0-9._\-]+'), r'\1' + REDACTED),
    (re.compile(r'\bsk-[A-Za-z0-9_\-]{8,}'), REDACTED),
]

# Keys that are always redacted in structured data
SECRET_FIELDS = {
    'password', 'passphrase', 'token', 'api_key', 'apikey', 'secret',
    'private_key', 'privatekey', 'access_token', 'refresh_token', 'auth_token',
}


def sanitize_string(text: str) -> str:
    """
    Replace potential secrets in a string with placeholders.

    Args:
        text: String that may contain secrets

    Returns:
        Sanitized string
    """
    if not text:
        return text

    result = text
    for pattern, replacement in SECRET_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively sanitize a mapping by replacing secret values.

    Args:
        data: Mapping that may contain secrets

    Returns:
        New dictionary with secrets replaced by placeholders
    """
    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(secret_field in key_lower for secret_field in SECRET_FIELDS):
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        elif isinstance(value, list):
            result[key] = [sanitize_dict(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, str):
            result[key] = sanitize_string(value)
        else:
            result[key] = value
    return result


def sanitize_log_message(message: str, context: Optional[Dict[str, Any]] = None) -> str:
    """
    Sanitize a log message and an optional context mapping.
    """
    sanitized_msg = sanitize_string(message)
    if context:
        sanitized_msg = f"{sanitized_msg} | Context: {sanitize_dict(context)}"
    return sanitized_msg
