"""
Logging Sanitizer Utility

Redacts secrets (client secrets, bearer tokens, connection strings) from
dicts, request headers and exception messages before they are logged.
"""

import re
from typing import Any, Dict, Mapping

# Keys whose values should never be logged (compared lower-case)
SENSITIVE_FIELDS = {
    'password',
    'pwd',
    'secret',
    'client_secret',
    'azure_ad_client_secret',
    'azuread:clientsecret',
    'token',
    'access_token',
    'refresh_token',
    'id_token',
    'api_key',
    'apikey',
    'authorization',
    'cookie',
    'connection_string',
    'connectionstrings:defaultconnection',
    'database_url',
    'sqlalchemy_database_uri',
}

SENSITIVE_HEADERS = {'authorization', 'cookie', 'x-api-key'}

_BEARER_PATTERN = re.compile(r'(bearer\s+)[A-Za-z0-9\-_.~+/=]+', re.IGNORECASE)
_SECRET_ASSIGNMENT = re.compile(r'((?:client_secret|password|pwd)\s*[=:]\s*)[^\s&;,]+', re.IGNORECASE)


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Replace sensitive values with redaction text, recursing into nested dicts
    and lists of dicts.

    Example:
        >>> sanitize_dict({'client_id': 'abc', 'client_secret': 's3cret'})
        {'client_id': 'abc', 'client_secret': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        elif isinstance(value, list):
            sanitized[key] = [sanitize_dict(v, redact_text) if isinstance(v, dict) else v for v in value]
        else:
            sanitized[key] = value
    return sanitized


def sanitize_headers(headers: Mapping[str, str], redact_text: str = '[REDACTED]') -> Dict[str, str]:
    """Request headers as a dict with credentials removed"""
    return {key: (redact_text if key.lower() in SENSITIVE_HEADERS else value)
            for key, value in headers.items()}


def sanitize_exception_message(exception: Exception) -> str:
    """
    Exception text with bearer tokens and inline secrets masked.

    Upstream errors (token endpoint, ODBC drivers) sometimes echo the request,
    so the credential part is masked rather than the whole message dropped.
    """
    message = str(exception)
    message = _BEARER_PATTERN.sub(r'\1[REDACTED]', message)
    return _SECRET_ASSIGNMENT.sub(r'\1[REDACTED]', message)
