"""Pattern-based secret redaction for free text.

Detects and masks common credential shapes:
- Private key blocks (PEM)
- API keys and tokens in JSON/object notation
- Environment variable assignments (API_KEY=...)
- GitHub tokens
- AWS access key ids and secret access keys
- Long base64/hex values in assignment position

Better to redact too much than to leak a secret. Passwords inside
connection-string URLs and secrets written as prose are not detected.
"""

import re

REDACTED = "[REDACTED]"
REDACTED_PRIVATE_KEY = "[REDACTED PRIVATE KEY]"

_PRIVATE_KEY_RE = re.compile(
    r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |ENCRYPTED )?PRIVATE KEY-----"
    r".*?"
    r"-----END (?:RSA |EC |DSA |OPENSSH |ENCRYPTED )?PRIVATE KEY-----",
    re.DOTALL,
)

# "api_key": "value", apiKey='value', token = "value"
_KEY_VALUE_RE = re.compile(
    r"""(["']?(?:api[_-]?key|apikey|access[_-]?key|secret[_-]?key|token|access[_-]?token"""
    r"""|auth[_-]?token|bearer[_-]?token)["']?\s*[=:]\s*)["']([^"'\s]{8,})["']""",
    re.IGNORECASE,
)

# API_KEY=abc123, SECRET_TOKEN=xyz789
_ENV_VAR_RE = re.compile(r"\b([A-Z_]+(?:KEY|TOKEN|SECRET|PASSWORD|AUTH)[A-Z_]*)\s*=\s*([^\s\"']{8,})")

# ghp_, ghs_, github_pat_
_GITHUB_TOKEN_RE = re.compile(r"\b(?:ghp_|ghs_|github_pat_)[a-zA-Z0-9]{30,}")

_AWS_ACCESS_KEY_ID_RE = re.compile(r"\bAKIA[A-Z0-9]{16}\b")
_AWS_SECRET_RE = re.compile(
    r"(aws[_-]?secret[_-]?access[_-]?key\s*[=:]\s*)[\"']?([^\s\"']{20,})[\"']?",
    re.IGNORECASE,
)

# Base64-like or hex value of 32+ chars, only after = or :
_LONG_VALUE_RE = re.compile(r"([=:]\s*)[\"']?([A-Za-z0-9+/]{32,}={0,2})[\"']?")


def _redact_long_value(match: re.Match) -> str:
    value = match.group(2)
    # More than one separator reads as a file path, not a secret.
    if value.count("/") > 1:
        return match.group(0)
    return match.group(1) + REDACTED


def redact_secrets(text: str) -> str:
    """Return text with credential-shaped substrings masked."""
    if not text:
        return text

    redacted = _PRIVATE_KEY_RE.sub(REDACTED_PRIVATE_KEY, text)
    redacted = _KEY_VALUE_RE.sub(lambda m: m.group(1) + '"' + REDACTED + '"', redacted)
    redacted = _ENV_VAR_RE.sub(lambda m: m.group(1) + "=" + REDACTED, redacted)
    redacted = _GITHUB_TOKEN_RE.sub(REDACTED, redacted)
    redacted = _AWS_ACCESS_KEY_ID_RE.sub(REDACTED, redacted)
    redacted = _AWS_SECRET_RE.sub(lambda m: m.group(1) + REDACTED, redacted)
    redacted = _LONG_VALUE_RE.sub(_redact_long_value, redacted)
    return redacted
