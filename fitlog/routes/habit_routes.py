# backend/fitlog/routes/habit_routes.py
from datetime import datetime, time, timedelta

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy import func

from .. import db
from ..enums import HabitType
from ..errors import NotFound
from ..models.habit import HabitLog
from ..schemas import HabitLogRequest, parse_body

habits_bp = Blueprint("habits", __name__)

# response key per habit type
COUNTER_KEYS = {
    HabitType.SMOKING: "smoking",
    HabitType.NICOTINE_POUCH: "nicotine_pouches",
}


def _day_bounds(now: datetime):
    """(start of today, start of this week) in the same clock as HabitLog.timestamp."""
    start_of_today = datetime.combine(now.date(), time.min)
    start_of_week = start_of_today - timedelta(days=now.weekday())
    return start_of_today, start_of_week


def _counts_since(user_id: int, since: datetime):
    rows = (
        db.session.query(HabitLog.type, func.count(HabitLog.id))
        .filter(HabitLog.user_id == user_id, HabitLog.timestamp >= since)
        .group_by(HabitLog.type)
        .all()
    )
    found = dict(rows)
    return {key: int(found.get(habit, 0)) for habit, key in COUNTER_KEYS.items()}


@habits_bp.route("", methods=["POST"])
@jwt_required()
def log_habit():
    """Body: { "type": "SMOKING" | "NICOTINE_POUCH" }"""
    user_id = int(get_jwt_identity())
    data = parse_body(HabitLogRequest)

    log = HabitLog(user_id=user_id, type=data.type, timestamp=datetime.utcnow())
    db.session.add(log)
    db.session.commit()

    return jsonify({"message": "Habit logged", "log": log.to_dict()}), 201


@habits_bp.route("", methods=["GET"])
@jwt_required()
def habit_stats():
    """
    Returns:
    {
      "today":     { "smoking": 2, "nicotine_pouches": 1 },
      "this_week": { "smoking": 9, "nicotine_pouches": 4 }
    }
    Weeks start on Monday.
    """
    user_id = int(get_jwt_identity())
    start_of_today, start_of_week = _day_bounds(datetime.utcnow())

    return jsonify(
        {
            "today": _counts_since(user_id, start_of_today),
            "this_week": _counts_since(user_id, start_of_week),
        }
    ), 200


@habits_bp.route("/undo", methods=["DELETE"])
@jwt_required()
def undo_last_habit():
    """Remove the most recent log from today."""
    user_id = int(get_jwt_identity())
    start_of_today, _ = _day_bounds(datetime.utcnow())

    log = (
        HabitLog.query.filter(
            HabitLog.user_id == user_id,
            HabitLog.timestamp >= start_of_today,
        )
        .order_by(HabitLog.timestamp.desc(), HabitLog.id.desc())
        .first()
    )
    if not log:
        raise NotFound("No habit logs found for today")

    removed = log.to_dict()
    db.session.delete(log)
    db.session.commit()

    return jsonify({"message": "Habit log removed", "log": removed}), 200
