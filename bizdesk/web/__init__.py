"""
Flask application factory.

create_app() wires the pieces together once per process: logging, Sentry,
the storage engine (an explicit Database object), the bootstrap data and
the /api blueprints.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask

from ..config import Settings, configure_logging, settings as default_settings
from ..db import Database
from ..security import configure_hashing
from ..seeds import bootstrap
from ..sentry_init import init_sentry
from .errors import register_error_handlers
from .session import DB_EXTENSION, SETTINGS_KEY, close_session

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> Flask:
    """
    Build a configured Flask application.

    Args:
        settings: Explicit configuration (tests pass their own).
        database: Storage engine to use; built from settings.DATABASE_URL
            when omitted.
    """
    settings = settings or default_settings

    configure_logging(settings.LOG_LEVEL)
    init_sentry(settings)
    configure_hashing(settings.BCRYPT_ROUNDS)

    database = database or Database(settings.DATABASE_URL)
    database.create_all()
    with database.get_db() as db:
        bootstrap(db, sample_data=settings.SEED_SAMPLE_DATA)

    app = Flask(__name__)
    app.config[SETTINGS_KEY] = settings
    app.config["DEBUG"] = settings.ENV == "development"
    app.extensions[DB_EXTENSION] = database
    app.json.sort_keys = False

    app.teardown_appcontext(close_session)
    register_error_handlers(app)

    from .routes import register_blueprints
    register_blueprints(app)

    logger.info("BizDesk app ready (storage=%s)", database.url)
    return app
