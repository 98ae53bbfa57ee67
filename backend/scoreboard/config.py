import os

def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val

API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

SESSION_COOKIE_NAME = "session"
SESSION_TTL_HOURS = 24
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "true").lower() != "false"

_WEAK_SECRETS = {"secret", "changeme", "default"}


def get_session_secret() -> str:
    """Return the HMAC secret used to sign session tokens.

    Raises ``RuntimeError`` when ``SESSION_SECRET`` is missing or weak so the
    application fails at startup instead of on the first authenticated call.
    """
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        raise RuntimeError("SESSION_SECRET environment variable is required")
    if len(secret) < 32 or secret.lower() in _WEAK_SECRETS:
        raise RuntimeError(
            "SESSION_SECRET must be at least 32 characters and not a common default"
        )
    return secret


def rate_limits_disabled() -> bool:
    return (os.getenv("DISABLE_RATE_LIMITS") or "").lower() == "true"
