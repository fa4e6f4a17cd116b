# backend/fitlog/routes/settings_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import current_user, get_jwt_identity, jwt_required

from .. import db
from ..models.social import PrivacySettings
from ..schemas import PrivacyUpdate, SettingsUpdate, WallpaperUpdate, parse_body

settings_bp = Blueprint("settings", __name__)


def _settings_dict(user):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "rehab_enabled": user.rehab_enabled,
    }


@settings_bp.route("", methods=["GET"])
@jwt_required()
def get_settings():
    return jsonify({"settings": _settings_dict(current_user)}), 200


@settings_bp.route("", methods=["PATCH"])
@jwt_required()
def update_settings():
    """Body: { "rehab_enabled": true }"""
    data = parse_body(SettingsUpdate)
    user = current_user

    user.rehab_enabled = data.rehab_enabled
    db.session.commit()
    return jsonify({"message": "Settings updated", "settings": _settings_dict(user)}), 200


# -----------------------------
# Privacy
# -----------------------------
@settings_bp.route("/privacy", methods=["GET"])
@jwt_required()
def get_privacy():
    user_id = int(get_jwt_identity())
    settings = PrivacySettings.get_or_create(user_id)
    db.session.commit()
    return jsonify({"privacy_settings": settings.to_dict()}), 200


@settings_bp.route("/privacy", methods=["PATCH"])
@jwt_required()
def update_privacy():
    """
    Body: any subset of
    {
      "show_workout_details": false,
      "show_exercise_names": false,
      "show_performance_trends": true,
      "show_workout_schedule": true
    }
    """
    user_id = int(get_jwt_identity())
    data = parse_body(PrivacyUpdate)

    settings = PrivacySettings.get_or_create(user_id)
    for flag, value in data.model_dump(exclude_none=True).items():
        setattr(settings, flag, value)
    db.session.commit()

    return jsonify({"message": "Privacy settings updated", "privacy_settings": settings.to_dict()}), 200


# -----------------------------
# Wallpaper (stored as-is)
# -----------------------------
@settings_bp.route("/wallpaper", methods=["GET"])
@jwt_required()
def get_wallpaper():
    return jsonify({"wallpaper": current_user.wallpaper}), 200


@settings_bp.route("/wallpaper", methods=["POST"])
@jwt_required()
def save_wallpaper():
    data = parse_body(WallpaperUpdate)
    user = current_user

    user.wallpaper = data.wallpaper
    db.session.commit()
    return jsonify({"message": "Wallpaper saved", "wallpaper": user.wallpaper}), 200
