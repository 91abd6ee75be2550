"""
Authentication and permission decorators for the API views.

Usage:

    @bp.get("/leads")
    @require_permission("lead.read")
    def list_leads_view():
        ...

The authenticated user is available as ``g.principal`` inside the view.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import g, request

from ..auth import bearer_token, ensure_permission, principal_from_token
from ..exceptions import ValidationError
from ..principal import Principal
from ..rbac import get_user_permissions
from .session import get_session, get_settings


def _load_principal() -> Principal:
    token = bearer_token(request.headers.get("Authorization"))
    return principal_from_token(get_session(), token, get_settings().JWT_SECRET)


def login_required(view):
    """Reject the request with 401 unless it carries a valid bearer token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        g.principal = _load_principal()
        return view(*args, **kwargs)

    return wrapper


def require_permission(code: str):
    """Authenticate, then reject with 403 if the role lacks `code`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = _load_principal()
            ensure_permission(principal, code, get_user_permissions(principal))
            g.principal = principal
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    """Request body as a dict; empty or unparsable bodies become {}."""
    data = request.get_json(silent=True)
    return {} if data is None else data


def client_id_arg() -> Optional[int]:
    """
    The optional ``?clientId=`` list filter.

    Raises:
        ValidationError: If the parameter is present but not an integer.
    """
    raw = request.args.get("clientId")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("clientId must be an integer", field="clientId")
