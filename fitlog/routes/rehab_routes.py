# backend/fitlog/routes/rehab_routes.py
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import current_user, get_jwt_identity, jwt_required
from sqlalchemy import func

from .. import db
from ..activity_logger import SUCCESS, log_activity
from ..demo_data import create_rehab_exercises
from ..errors import Forbidden, NotFound
from ..models.rehab import RehabExercise
from ..schemas import RehabExerciseCreate, RehabExerciseUpdate, parse_body

rehab_bp = Blueprint("rehab", __name__)

UNCATEGORIZED = "Other"


def _get_owned_exercise(exercise_id: int, user_id: int) -> RehabExercise:
    exercise = db.session.get(RehabExercise, exercise_id)
    if not exercise or exercise.user_id != user_id:
        raise NotFound("Exercise not found")
    return exercise


def _ordered(user_id: int):
    return (
        RehabExercise.query.filter_by(user_id=user_id)
        .order_by(RehabExercise.order_index.asc(), RehabExercise.id.asc())
        .all()
    )


@rehab_bp.route("", methods=["GET"])
@jwt_required()
def list_rehab_exercises():
    user_id = int(get_jwt_identity())
    return jsonify({"exercises": [e.to_dict() for e in _ordered(user_id)]}), 200


@rehab_bp.route("", methods=["POST"])
@jwt_required()
def create_rehab_exercise():
    """Body: { "name": "...", "category": "...", "sets": 2, "reps": 10, ... }"""
    user_id = int(get_jwt_identity())
    data = parse_body(RehabExerciseCreate)

    last_index = (
        db.session.query(func.max(RehabExercise.order_index))
        .filter(RehabExercise.user_id == user_id)
        .scalar()
    )
    exercise = RehabExercise(
        user_id=user_id,
        order_index=0 if last_index is None else last_index + 1,
        **data.model_dump(),
    )
    db.session.add(exercise)
    db.session.commit()

    return jsonify({"message": "Exercise created", "exercise": exercise.to_dict()}), 201


@rehab_bp.route("/<int:exercise_id>", methods=["PATCH"])
@jwt_required()
def update_rehab_exercise(exercise_id: int):
    user_id = int(get_jwt_identity())
    data = parse_body(RehabExerciseUpdate)
    exercise = _get_owned_exercise(exercise_id, user_id)

    changes = data.model_dump(exclude_unset=True)
    completed = changes.pop("completed", None)
    for field, value in changes.items():
        setattr(exercise, field, value)

    if completed is not None:
        exercise.completed = completed
        exercise.completed_date = datetime.utcnow() if completed else None

    db.session.commit()
    return jsonify({"message": "Exercise updated", "exercise": exercise.to_dict()}), 200


@rehab_bp.route("/<int:exercise_id>", methods=["DELETE"])
@jwt_required()
def delete_rehab_exercise(exercise_id: int):
    user_id = int(get_jwt_identity())
    exercise = _get_owned_exercise(exercise_id, user_id)

    db.session.delete(exercise)
    db.session.commit()
    return jsonify({"message": "Exercise deleted"}), 200


@rehab_bp.route("/summary", methods=["GET"])
@jwt_required()
def rehab_summary():
    """
    Returns:
    {
      "total": 14,
      "completed": 3,
      "categories": [ { "category": "Warm-up", "exercises": [...] }, ... ]
    }
    """
    user_id = int(get_jwt_identity())
    exercises = _ordered(user_id)

    grouped = {}
    for e in exercises:
        grouped.setdefault(e.category or UNCATEGORIZED, []).append(e.to_summary_dict())

    return jsonify(
        {
            "total": len(exercises),
            "completed": sum(1 for e in exercises if e.completed),
            "categories": [
                {"category": category, "exercises": items}
                for category, items in grouped.items()
            ],
        }
    ), 200


@rehab_bp.route("/reset", methods=["POST"])
@jwt_required()
def reset_rehab_exercises():
    """Replace the caller's rehab list with the default prescription."""
    user = current_user
    if not user.rehab_enabled:
        raise Forbidden("Rehab is not enabled for this account")

    removed = RehabExercise.query.filter_by(user_id=user.id).delete()
    created = create_rehab_exercises(user.id)
    db.session.commit()

    current_app.logger.info(f"[rehab/reset] user_id={user.id} removed={removed} created={created}")
    log_activity(
        "REHAB", "reset_exercises", f"Reset rehab exercises for user {user.id}", SUCCESS,
        {"removed": removed, "created": created},
    )

    return jsonify(
        {
            "message": "Rehab exercises reset",
            "removed": removed,
            "created": created,
            "exercises": [e.to_dict() for e in _ordered(user.id)],
        }
    ), 200
