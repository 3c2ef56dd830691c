"""Security configuration constants for the PromptEnhancer API.

This module centralizes security-related configuration including:
- Sensitive keys that should be sanitized from logs
- Which diagnostic fields error responses may expose per environment
"""

# Sensitive keys matched case-insensitively as substrings of log field names.
# Credentials for the remote completion service must never reach a log line.
SENSITIVE_KEYS: set[str] = {
    # Credentials
    "api_key",
    "apikey",
    "secret",
    "password",
    "token",
    "authorization",
    "auth",
    "bearer",
    "credential",
    "jwt",
    "session_id",
    # Headers
    "set-cookie",
    "cookie",
    "x-api-key",
    "x-auth-token",
    # Contact data that may be pasted into free-form requests
    "email",
    "phone",
}

# In production, error responses carry no diagnostics beyond the message.
PRODUCTION_ERROR_FIELDS: set[str] = set()

# Development/test error responses may include debugging details.
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "correlation_id",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed diagnostic fields for error responses.

    Args:
        environment: The application environment (production, development, etc.)

    Returns:
        Set of field names that may appear under an error response's ``details``
    """
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    else:
        return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted.

    Args:
        key: The key name to check

    Returns:
        True if the key should be redacted, False otherwise
    """
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
