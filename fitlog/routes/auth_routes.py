# backend/fitlog/routes/auth_routes.py

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import (
    create_access_token,
    current_user,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)
from sqlalchemy import or_

from .. import db, jobs
from ..demo_data import setup_new_user
from ..errors import Conflict, TooManyRequests, Unauthorized
from ..models.stats import Stats
from ..models.user import User
from ..schemas import LoginRequest, RegisterRequest, SetPasswordRequest, parse_body

auth_bp = Blueprint("auth", __name__)


# -----------------------------
# Helpers
# -----------------------------
def _limiter(name: str):
    return current_app.extensions[f"fitlog_{name}_limiter"]


def _reset_at_iso(reset_at: float) -> str:
    return datetime.fromtimestamp(reset_at, tz=timezone.utc).isoformat()


def _check_limit(name: str, key: str) -> None:
    status = _limiter(name).check(key)
    if not status.allowed:
        current_app.logger.warning(f"[auth/{name}] rate limited key='{key}'")
        raise TooManyRequests(
            "Too many attempts. Please try again later.",
            reset_at=_reset_at_iso(status.reset_at),
        )


def _session_response(payload, status_code, user: User):
    resp = jsonify(payload)
    set_access_cookies(resp, create_access_token(identity=str(user.id)))
    return resp, status_code


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Body:
    {
      "username": "devlin",
      "password": "secret1",
      "name": "Devlin",            # optional, defaults to username
      "email": "d@example.com",    # optional
      "rehab_enabled": false       # optional
    }

    Returns 201 with { "user": {...}, "setup_job_id": "..." } and the
    session cookie. Demo history is generated in the background; poll
    /api/setup-status?job_id=... for progress.
    """
    data = parse_body(RegisterRequest)
    limit_key = data.username.lower()
    _check_limit("signup", limit_key)

    conflicts = (
        (User.username == data.username, "Username already taken"),
        (User.name == data.display_name, "Name already taken"),
    )
    if data.email:
        conflicts += ((User.email == data.email, "Email already registered"),)

    for clause, message in conflicts:
        if User.query.filter(clause).first():
            _limiter("signup").record(limit_key)
            raise Conflict(message)

    user = User(
        username=data.username,
        name=data.display_name,
        email=data.email,
        rehab_enabled=data.rehab_enabled,
    )
    user.set_password(data.password)
    db.session.add(user)
    db.session.flush()
    db.session.add(Stats(user_id=user.id))
    db.session.commit()

    payload = {"message": "Account created", "user": user.to_dict()}

    job_id = jobs.tracker.create_job(user.id)
    payload["setup_job_id"] = job_id
    current_app.logger.info(f"[auth/register] user_id={user.id} setup job {job_id} queued")
    jobs.submit(current_app._get_current_object(), setup_new_user, user.id, job_id)

    return _session_response(payload, 201, user)


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Accepts:
      - { "identifier": "...", "password": "..." }  # username, email or display name
      - { "username": "...", "password": "..." }
      - { "email": "...", "password": "..." }
    """
    data = parse_body(LoginRequest)
    identifier = data.identifier
    limit_key = identifier.lower()

    # do not log the password
    current_app.logger.info(f"[auth/login] identifier='{identifier}'")
    _check_limit("login", limit_key)

    user = User.query.filter(
        or_(
            User.username == identifier,
            User.email == identifier.lower(),
            User.name == identifier,
        )
    ).first()

    if not user or not user.check_password(data.password):
        _limiter("login").record(limit_key)
        current_app.logger.info(f"[auth/login] invalid credentials for '{identifier}'")
        raise Unauthorized("Invalid credentials")

    _limiter("login").reset(limit_key)
    return _session_response({"message": "Logged in", "user": user.to_dict()}, 200, user)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    resp = jsonify({"message": "Logged out"})
    unset_jwt_cookies(resp)
    return resp, 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = current_user
    data = user.to_dict()
    data["stats"] = user.stats.to_dict() if user.stats else None
    return jsonify({"user": data}), 200


@auth_bp.route("/set-password", methods=["POST"])
@jwt_required()
def set_password():
    """
    Body: { "password": "...", "current_password": "..." }
    current_password is only required when the account already has one.
    """
    data = parse_body(SetPasswordRequest)
    user = current_user

    if user.has_password and not user.check_password(data.current_password or ""):
        raise Unauthorized("Current password is incorrect")

    user.set_password(data.password)
    db.session.commit()
    current_app.logger.info(f"[auth/set-password] user_id={user.id}")

    return _session_response({"message": "Password updated", "user": user.to_dict()}, 200, user)
