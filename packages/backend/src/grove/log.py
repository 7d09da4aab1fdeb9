"""structlog configuration.

Learn: structlog processors run in order on every log call. The request id
bound by RequestIdMiddleware is merged from contextvars, credentials are
masked before rendering, and production gets one JSON object per line.
"""

import logging

import structlog

from grove.config import Settings

REDACTED = "***REDACTED***"
SENSITIVE_KEYS = frozenset(
    {"password", "password_hash", "token", "access_token", "authorization", "secret"}
)


def redact_sensitive(logger, method_name, event_dict):
    """Mask credential-looking keys anywhere at the top level of an event."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else logging.INFO
    if settings.is_production:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        renderers = [structlog.dev.ConsoleRenderer()]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
