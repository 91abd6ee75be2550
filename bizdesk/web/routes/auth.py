from flask import Blueprint, g, jsonify

from ...auth import authenticate, encode_token
from ...exceptions import ValidationError
from ...schemas import UserOut, dump
from ...services import get_user
from ..decorators import json_body, login_required
from ..session import get_session, get_settings

auth_bp = Blueprint("auth", __name__)


@auth_bp.get("/auth/check")
def health_check():
    """Liveness probe for deployment platforms."""
    return jsonify({"status": "ok", "message": "Server is running"})


@auth_bp.post("/auth/login")
def login():
    body = json_body()
    username = body.get("username") if isinstance(body, dict) else None
    password = body.get("password") if isinstance(body, dict) else None

    if not username or not password:
        raise ValidationError("Username and password required")

    user = authenticate(get_session(), username, password)
    settings = get_settings()

    payload = dump(UserOut, user)
    payload["token"] = encode_token(user, settings.JWT_SECRET, settings.jwt_exp_delta)
    return jsonify(payload)


@auth_bp.get("/auth/me")
@login_required
def me():
    return jsonify(dump(UserOut, get_user(get_session(), g.principal.id)))
