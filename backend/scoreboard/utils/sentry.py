"""Optional Sentry error reporting, configured from ``SENTRY_*`` variables."""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from ..exceptions import DomainException

logger = logging.getLogger(__name__)


def _env_rate(env_var: str) -> float:
    """Sample rate in ``[0, 1]``; unset or unusable values disable sampling."""
    raw_value = (os.getenv(env_var) or "").strip()
    if not raw_value:
        return 0.0
    try:
        value = float(raw_value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", env_var, raw_value)
        return 0.0
    if not 0.0 <= value <= 1.0:
        logger.warning("Ignoring %s=%r: must be between 0 and 1", env_var, raw_value)
        return 0.0
    return value


def _drop_client_errors(event, hint):
    # Missing players, duplicate ids and the like are answered with a 4xx and
    # are not worth an alert; storage outages (503) still get reported.
    exc_info = hint.get("exc_info") if hint else None
    if exc_info:
        exc = exc_info[1]
        if isinstance(exc, DomainException) and exc.status_code < 500:
            return None
    return event


def init_sentry() -> bool:
    """Start the Sentry SDK when ``SENTRY_DSN`` is set; return whether it did."""

    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        logger.info("SENTRY_DSN not set; error reporting disabled")
        return False

    environment = (os.getenv("SENTRY_ENVIRONMENT") or "").strip() or None
    release = (os.getenv("SENTRY_RELEASE") or "").strip() or None

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FastApiIntegration()],
        environment=environment,
        release=release,
        traces_sample_rate=_env_rate("SENTRY_TRACES_SAMPLE_RATE"),
        profiles_sample_rate=_env_rate("SENTRY_PROFILES_SAMPLE_RATE"),
        before_send=_drop_client_errors,
        send_default_pii=False,
    )
    logger.info(
        "Error reporting enabled (environment=%s, release=%s)",
        environment or "-",
        release or "-",
    )
    return True
