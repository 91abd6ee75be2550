"""REST blueprints, all mounted under /api."""

from flask import Flask

from .auth import auth_bp
from .leads import leads_bp
from .clients import clients_bp
from .quotations import quotations_bp
from .invoices import invoices_bp
from .tickets import tickets_bp
from .dashboard import dashboard_bp

BLUEPRINTS = (
    auth_bp,
    leads_bp,
    clients_bp,
    quotations_bp,
    invoices_bp,
    tickets_bp,
    dashboard_bp,
)


def register_blueprints(app: Flask) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix="/api")
