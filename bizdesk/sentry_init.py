from __future__ import annotations

# Silence chatty bcrypt version probe from passlib in case Sentry imports it
import logging
logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

"""
Minimal Sentry bootstrap.

Why:
- Central place to configure Sentry (error monitoring).
- Safe no-op if SENTRY_DSN is not set, so local dev and tests are unaffected.
"""

from typing import Optional

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def init_sentry(settings: Optional[Settings] = None) -> bool:
    """
    Initialize Sentry only if a DSN is provided.

    Settings used:
    - SENTRY_DSN: project DSN (empty -> no-op)
    - SENTRY_ENV: environment name (e.g., 'development', 'production')
    - SENTRY_TRACES: traces sample rate (default 0.0)

    Returns:
        True if Sentry was initialized.
    """
    settings = settings or default_settings
    if not settings.SENTRY_DSN:
        # No DSN -> do nothing (keep the server and CLI silent in dev)
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENV,
            traces_sample_rate=settings.SENTRY_TRACES,
            integrations=[
                FlaskIntegration(),         # capture unhandled request errors
                SqlalchemyIntegration(),    # capture DB-level errors
                LoggingIntegration(level=None, event_level=None),
            ],
        )
    except Exception as exc:  # pragma: no cover
        # Never block the app if Sentry fails to initialize
        logger.warning("Sentry init skipped: %s", exc)
        return False

    return True
