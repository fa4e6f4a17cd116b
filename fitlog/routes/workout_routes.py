# backend/fitlog/routes/workout_routes.py

from datetime import date, datetime, timedelta
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from .. import db
from ..enums import ActivityType
from ..errors import NotFound, ValidationError
from ..models.social import FriendActivity
from ..models.stats import Stats
from ..models.workout import Workout, WorkoutExercise, WorkoutSet
from ..schemas import SetUpdateRequest, WorkoutCreateRequest, WorkoutImportRequest, parse_body
from ..stats_core import NO_CHANGE, compute_deltas
from ..template_parser import DAY_NAMES, day_of, parse_workout_template

workouts_bp = Blueprint("workouts", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            details=[{"field": "date", "message": "Date must be in YYYY-MM-DD format"}]
        ) from None


def _get_owned_workout(workout_id: int, user_id: int) -> Workout:
    workout = db.session.get(Workout, workout_id)
    if not workout or workout.user_id != user_id:
        raise NotFound("Workout not found")
    return workout


def _build_exercise(name: str, index: int, sets) -> WorkoutExercise:
    exercise = WorkoutExercise(name=name, order_index=index)
    for set_index, (reps, weight) in enumerate(sets):
        exercise.sets.append(WorkoutSet(reps=reps, weight=weight, order_index=set_index))
    return exercise


def _stats_dict(user_id: int):
    stats = Stats.query.filter_by(user_id=user_id).first()
    return stats.to_dict() if stats else None


def _completion_payload(workout: Workout, completed_at: datetime) -> Dict[str, Any]:
    """
    Friend-visible summary of a finished workout. The privacy filter keys
    on "exercises", "sets", "weights" and "topExercise".
    """
    per_exercise = []
    for e in workout.exercises:
        done = [s for s in e.sets if s.completed]
        per_exercise.append((e, done))

    sets_completed = sum(len(done) for _, done in per_exercise)
    top = max(per_exercise, key=lambda pair: len(pair[1]), default=None)

    return {
        "workoutDate": workout.date.isoformat(),
        "exerciseCount": len(per_exercise),
        "setsCompleted": sets_completed,
        "exercises": [e.name for e, _ in per_exercise],
        "sets": [
            {"exercise": e.name, "completed": len(done), "total": len(e.sets)}
            for e, done in per_exercise
        ],
        "weights": [
            {"exercise": e.name, "maxWeight": max((s.weight for s in e.sets), default=0)}
            for e, _ in per_exercise
        ],
        "topExercise": top[0].name if top and top[1] else None,
        "completedAt": completed_at.isoformat(),
    }


# ------------------------------
# Workouts
# ------------------------------
@workouts_bp.route("/workouts/<date_str>", methods=["GET"])
@jwt_required()
def get_workout_by_date(date_str: str):
    user_id = int(get_jwt_identity())
    day = _parse_day(date_str)

    workout = (
        Workout.query.filter_by(user_id=user_id, date=day)
        .order_by(Workout.id.asc())
        .first()
    )
    if not workout:
        raise NotFound("Workout not found")

    return jsonify(workout.to_dict()), 200


@workouts_bp.route("/workouts", methods=["POST"])
@jwt_required()
def create_workout():
    """
    Body:
    {
      "date": "2025-03-10",
      "name": "Push day",          # optional
      "exercises": [
        { "name": "Bench Press", "sets": [ { "reps": 10, "weight": 60 }, ... ] }
      ]
    }
    """
    user_id = int(get_jwt_identity())
    data = parse_body(WorkoutCreateRequest)

    workout = Workout(user_id=user_id, date=data.date, name=data.name, completed=False)
    for index, exercise in enumerate(data.exercises):
        workout.exercises.append(
            _build_exercise(
                exercise.name, index, [(s.reps, s.weight) for s in exercise.sets]
            )
        )

    db.session.add(workout)
    db.session.commit()

    return jsonify({"message": "Workout created", "workout": workout.to_dict()}), 201


@workouts_bp.route("/workouts/<int:workout_id>/complete", methods=["POST"])
@jwt_required()
def complete_workout(workout_id: int):
    """
    Marks the workout finished, stamps the user's last workout date and
    posts a WORKOUT_COMPLETED entry to the friends feed.
    Completing an already completed workout changes nothing.
    """
    user_id = int(get_jwt_identity())
    workout = _get_owned_workout(workout_id, user_id)

    if workout.completed:
        return jsonify({"message": "Workout already completed", "workout": workout.to_dict()}), 200

    now = datetime.utcnow()
    workout.completed = True
    Stats.increment(user_id, last_workout_date=now)
    db.session.add(
        FriendActivity(
            user_id=user_id,
            activity_type=ActivityType.WORKOUT_COMPLETED,
            data=_completion_payload(workout, now),
            created_at=now,
        )
    )
    db.session.commit()

    current_app.logger.info(f"[workouts/complete] user_id={user_id} workout_id={workout.id}")
    return jsonify({"message": "Workout completed", "workout": workout.to_dict()}), 200


@workouts_bp.route("/workouts/import", methods=["POST"])
@jwt_required()
def import_workouts():
    """
    Body:
    {
      "template": "Monday - Push\\nBench Press: 3x10 @ 60kg\\n...",
      "start_date": "2025-03-10",   # optional, defaults to today
      "weeks": 4                    # optional
    }

    Each template day is scheduled on every matching weekday.
    """
    user_id = int(get_jwt_identity())
    data = parse_body(WorkoutImportRequest)

    templates = {}
    for day_template in parse_workout_template(data.template):
        templates[day_of(day_template["day"])] = day_template

    if not templates:
        raise ValidationError(
            details=[{"field": "template", "message": "No workout days found in template"}]
        )

    start = data.start_date or date.today()
    created = 0

    for offset in range(data.weeks * 7):
        day = start + timedelta(days=offset)
        template = templates.get(DAY_NAMES[day.weekday()])
        if not template:
            continue

        workout = Workout(user_id=user_id, date=day, name=template["day"], completed=False)
        for index, exercise in enumerate(template["exercises"]):
            workout.exercises.append(
                _build_exercise(
                    exercise["name"],
                    index,
                    [(exercise["reps"], exercise["weight"])] * exercise["sets"],
                )
            )
        db.session.add(workout)
        created += 1

    db.session.commit()
    current_app.logger.info(f"[workouts/import] user_id={user_id} created={created}")

    return jsonify({"message": "Workouts imported", "count": created}), 201


# ------------------------------
# Sets
# ------------------------------
@workouts_bp.route("/sets/<int:set_id>", methods=["PATCH"])
@jwt_required()
def update_set(set_id: int):
    """
    Body: { "completed": true, "weight": 62.5, "reps": 8 }   (all optional)

    Toggling "completed" moves the user's totals by at most one set and one
    exercise, applied as an atomic increment.
    """
    user_id = int(get_jwt_identity())
    data = parse_body(SetUpdateRequest)

    workout_set = db.session.get(WorkoutSet, set_id)
    if not workout_set or workout_set.exercise.workout.user_id != user_id:
        raise NotFound("Set not found")

    previous_completed = bool(workout_set.completed)
    new_completed = previous_completed if data.completed is None else data.completed
    other_sets_completed = all(
        s.completed for s in workout_set.exercise.sets if s.id != workout_set.id
    )
    deltas = compute_deltas(previous_completed, new_completed, other_sets_completed)

    workout_set.completed = new_completed
    if data.weight is not None:
        workout_set.weight = data.weight
    if data.reps is not None:
        workout_set.reps = data.reps

    if deltas != NO_CHANGE:
        Stats.increment(
            user_id,
            sets_delta=deltas.sets_delta,
            exercises_delta=deltas.exercises_delta,
            last_workout_date=datetime.utcnow() if deltas.sets_delta > 0 else None,
        )

    db.session.commit()

    return jsonify(
        {
            "set": workout_set.to_dict(),
            "stats_delta": deltas._asdict(),
            "stats": _stats_dict(user_id),
        }
    ), 200
