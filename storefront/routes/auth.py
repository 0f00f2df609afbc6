"""Account routes and the bearer-token guard shared by the API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, g, jsonify, request

from ..common.services.auth_service import TokenError


auth_bp = Blueprint("storefront_auth", __name__, url_prefix="/api")


def _components() -> Dict[str, Any]:
    return current_app.extensions["storefront_components"]


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def error_response(message: str, status: int, code: Optional[str] = None):
    body = {"message": message}
    if code:
        body["code"] = code
    return jsonify(body), status


def login_required(view):
    """Resolve the bearer token into g.user or answer 401 with a machine-readable code."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            g.user = _components()["auth_service"].resolve(_bearer_token())
        except TokenError as exc:
            return error_response(exc.message, 401, exc.code)
        return view(*args, **kwargs)

    return wrapper


@auth_bp.post("/auth/register")
def register():
    payload = request.get_json(silent=True) or {}
    service = _components()["auth_service"]
    try:
        # self-registration never grants admin
        user = service.register(
            username=str(payload.get("username", "")),
            email=str(payload.get("email", "")),
            password=str(payload.get("password", "")),
        )
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify({"token": service.issue_token(user), "user": user}), 201


@auth_bp.post("/auth/login")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        token, user = _components()["auth_service"].login(
            email=str(payload.get("email", "")),
            password=str(payload.get("password", "")),
        )
    except PermissionError as exc:
        return error_response(str(exc), 401, "INVALID_CREDENTIALS")
    return jsonify({"token": token, "user": user})


@auth_bp.post("/auth/logout")
def logout():
    try:
        _components()["auth_service"].revoke(_bearer_token())
    except TokenError as exc:
        return error_response(exc.message, 401, exc.code)
    return jsonify({"status": "ok"})


@auth_bp.get("/users/profile")
@login_required
def profile():
    return jsonify(g.user)


@auth_bp.put("/users/profile")
@login_required
def update_profile():
    payload = request.get_json(silent=True) or {}
    try:
        user = _components()["auth_service"].update_profile(user_id=g.user["id"], data=payload)
    except LookupError as exc:
        return error_response(str(exc), 404, "USER_NOT_FOUND")
    except ValueError as exc:
        return error_response(str(exc), 400, "VALIDATION_ERROR")
    return jsonify(user)
