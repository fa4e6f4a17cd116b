# backend/fitlog/routes/dashboard_routes.py
import calendar
from datetime import date, timedelta
from typing import Optional

from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, get_jwt_identity, jwt_required
from sqlalchemy import desc, func

from .. import db, jobs
from ..errors import NotFound, ValidationError
from ..models.activity_log import ActivityLog
from ..models.workout import Workout, WorkoutExercise, WorkoutSet

dashboard_bp = Blueprint("dashboard", __name__)

STREAK_LOOKBACK_DAYS = 30
ACTIVITY_LOG_DEFAULT_LIMIT = 50
ACTIVITY_LOG_MAX_LIMIT = 200


# -------------------------
# Helpers
# -------------------------
def _int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(details=[{"field": name, "message": "must be an integer"}])


def _completed_sets_query(user_id: int):
    """Completed sets inside completed workouts."""
    return (
        db.session.query(WorkoutSet)
        .join(WorkoutExercise, WorkoutSet.exercise_id == WorkoutExercise.id)
        .join(Workout, WorkoutExercise.workout_id == Workout.id)
        .filter(
            Workout.user_id == user_id,
            Workout.completed.is_(True),
            WorkoutSet.completed.is_(True),
        )
    )


def _monthly_sets(user_id: int, today: date) -> int:
    start_of_month = today.replace(day=1)
    return (
        _completed_sets_query(user_id)
        .filter(Workout.date >= start_of_month)
        .with_entities(func.count(WorkoutSet.id))
        .scalar()
        or 0
    )


def _top_exercise(user_id: int):
    sets_count = func.count(WorkoutSet.id).label("sets")
    row = (
        _completed_sets_query(user_id)
        .with_entities(WorkoutExercise.name, sets_count)
        .group_by(WorkoutExercise.name)
        .order_by(desc("sets"), WorkoutExercise.name)
        .first()
    )
    if not row:
        return None
    return {"name": row[0], "sets": int(row[1])}


def _current_streak(user_id: int, today: date) -> int:
    """
    Consecutive days with a completed workout, counting back from today.
    A missing workout today does not break the streak.
    """
    since = today - timedelta(days=STREAK_LOOKBACK_DAYS - 1)
    rows = (
        db.session.query(Workout.date)
        .filter(
            Workout.user_id == user_id,
            Workout.completed.is_(True),
            Workout.date >= since,
            Workout.date <= today,
        )
        .distinct()
        .all()
    )
    workout_days = {r[0] for r in rows}

    streak = 0
    for i in range(STREAK_LOOKBACK_DAYS):
        if today - timedelta(days=i) in workout_days:
            streak += 1
        elif i > 0:
            break
    return streak


# -------------------------
# Routes
# -------------------------
@dashboard_bp.route("/dashboard", methods=["GET"])
@jwt_required()
def get_dashboard():
    """
    Returns:
    {
      "user": { "id", "name", "rehab_enabled", "setup_complete", "stats": {...} },
      "today_workout": { ...workout with exercises and sets... } | null
    }
    """
    user = current_user
    today_workout = (
        Workout.query.filter_by(user_id=user.id, date=date.today())
        .order_by(Workout.id.asc())
        .first()
    )

    return jsonify(
        {
            "user": {
                "id": user.id,
                "name": user.name,
                "rehab_enabled": user.rehab_enabled,
                "setup_complete": user.setup_complete,
                "stats": user.stats.to_dict() if user.stats else None,
            },
            "today_workout": today_workout.to_dict() if today_workout else None,
        }
    ), 200


@dashboard_bp.route("/stats", methods=["GET"])
@jwt_required()
def get_stats():
    user = current_user
    today = date.today()

    return jsonify(
        {
            "stats": user.stats.to_dict() if user.stats else None,
            "monthly_sets": _monthly_sets(user.id, today),
            "top_exercise": _top_exercise(user.id),
            "current_streak": _current_streak(user.id, today),
        }
    ), 200


@dashboard_bp.route("/calendar", methods=["GET"])
@jwt_required()
def get_calendar():
    """
    Query: ?year=2025&month=3   (month is 1-12, both default to the current month)
    """
    user_id = int(get_jwt_identity())
    today = date.today()
    year = _int_arg("year", today.year)
    month = _int_arg("month", today.month)

    if not 1 <= month <= 12:
        raise ValidationError(details=[{"field": "month", "message": "must be between 1 and 12"}])
    if not 1 <= year <= 9999:
        raise ValidationError(details=[{"field": "year", "message": "is out of range"}])

    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])

    workouts = (
        Workout.query.filter(
            Workout.user_id == user_id,
            Workout.date >= first,
            Workout.date <= last,
        )
        .order_by(Workout.date.asc(), Workout.id.asc())
        .all()
    )

    return jsonify(
        {"year": year, "month": month, "workouts": [w.to_dict() for w in workouts]}
    ), 200


@dashboard_bp.route("/activity-log", methods=["GET"])
@jwt_required()
def get_activity_log():
    """Operational events, newest first. Query: ?category=GYM_PLAN&limit=50"""
    limit = _int_arg("limit", ACTIVITY_LOG_DEFAULT_LIMIT)
    limit = max(1, min(limit, ACTIVITY_LOG_MAX_LIMIT))
    category = request.args.get("category")

    q = ActivityLog.query
    if category:
        q = q.filter(ActivityLog.category == category)
    rows = q.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc()).limit(limit).all()

    return jsonify({"activities": [r.to_dict() for r in rows]}), 200


@dashboard_bp.route("/setup-status", methods=["GET"])
@jwt_required()
def get_setup_status():
    """
    Poll the caller's account setup job.
    Returns { "job_id", "status", "progress", "error" }.
    """
    user_id = int(get_jwt_identity())
    job_id = request.args.get("job_id") or request.args.get("jobId")
    if not job_id:
        raise ValidationError(details=[{"field": "job_id", "message": "is required"}])

    job = jobs.tracker.get_job(job_id)
    if job is None or job.user_id != user_id:
        raise NotFound("Job not found")

    return jsonify(job.to_dict()), 200
