"""Redaction of credentials in logged URLs."""

import re

# Query parameters whose values never reach the logs
SENSITIVE_PARAMS = [
    "token",
    "refresh_token",
    "access_token",
    "client_secret",
    "api_key",
    "code",
    "authorization",
]


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    redacted = url
    for param in SENSITIVE_PARAMS:
        pattern = rf"([?&]){param}=([^&\s\"]+)"
        redacted = re.sub(pattern, rf"\g<1>{param}=***REDACTED***", redacted)
    return redacted
