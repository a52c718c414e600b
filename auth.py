"""
Session cookie handling and the route guards built on it.
"""
import secrets
from functools import wraps

from flask import current_app, g, jsonify, request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from models.User import ROLE_ADMIN

COOKIE_SALT = "letterly-session"


def get_session_store():
    return current_app.extensions["session_store"]


def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=COOKIE_SALT)


def _lifetime_seconds():
    return int(current_app.config["SESSION_LIFETIME"].total_seconds())


def current_session_id():
    """Session id from the request cookie, or None if absent, tampered or expired."""
    token = request.cookies.get(current_app.config["SESSION_COOKIE_NAME"])
    if not token:
        return None
    try:
        return _serializer().loads(token, max_age=_lifetime_seconds())
    except BadSignature:
        return None


def current_session_user():
    session_id = current_session_id()
    if not session_id:
        return None
    return get_session_store().get(session_id)


def start_session(response, user):
    """Store the user's identity server-side and attach the signed cookie."""
    previous = current_session_id()
    if previous:
        get_session_store().destroy(previous)

    session_id = secrets.token_urlsafe(32)
    identity = user.session_identity()
    get_session_store().set(session_id, identity)

    response.set_cookie(
        current_app.config["SESSION_COOKIE_NAME"],
        _serializer().dumps(session_id),
        max_age=_lifetime_seconds(),
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


def end_session(response):
    session_id = current_session_id()
    if session_id:
        get_session_store().destroy(session_id)
    response.delete_cookie(current_app.config["SESSION_COOKIE_NAME"])
    return response


def _unauthorized():
    return jsonify({"message": "Unauthorized"}), 401


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_session_user()
        if not user:
            return _unauthorized()
        g.user = user
        return view(*args, **kwargs)
    return wrapper


def admin_required(view):
    # Non-admins get 401 as well, there is no separate 403 tier
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_session_user()
        if not user or user.get("role") != ROLE_ADMIN:
            return _unauthorized()
        g.user = user
        return view(*args, **kwargs)
    return wrapper
