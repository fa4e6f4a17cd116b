# backend/fitlog/routes/gym_plan_routes.py
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from .. import db
from ..activity_logger import ERROR, SUCCESS, log_activity
from ..enums import ActivityType, PlanStatus
from ..errors import Forbidden, InternalError, NotFound, ValidationError
from ..models.gym_plan import GymPlan
from ..models.social import FriendActivity
from ..plan_generator import PlanGenerationError, format_goal, generate_gym_plan
from ..schemas import GymPlanGenerateRequest, GymPlanUpdate, parse_body

gym_plan_bp = Blueprint("gym_plan", __name__)


def _get_plan(plan_id: int, user_id: int) -> GymPlan:
    plan = db.session.get(GymPlan, plan_id)
    if not plan:
        raise NotFound("Gym plan not found")
    if plan.user_id != user_id:
        raise Forbidden()
    return plan


@gym_plan_bp.route("", methods=["GET"])
@jwt_required()
def list_gym_plans():
    """Query: ?status=active|completed|archived  (default active)"""
    user_id = int(get_jwt_identity())
    raw_status = request.args.get("status") or PlanStatus.ACTIVE.value
    try:
        status = PlanStatus(raw_status)
    except ValueError:
        raise ValidationError(
            details=[{"field": "status", "message": "must be one of: active, completed, archived"}]
        ) from None

    plans = (
        GymPlan.query.filter_by(user_id=user_id, status=status)
        .order_by(GymPlan.created_at.desc(), GymPlan.id.desc())
        .all()
    )
    return jsonify({"plans": [p.to_dict() for p in plans]}), 200


@gym_plan_bp.route("/<int:plan_id>", methods=["GET"])
@jwt_required()
def get_gym_plan(plan_id: int):
    plan = _get_plan(plan_id, int(get_jwt_identity()))
    return jsonify(plan.to_dict()), 200


@gym_plan_bp.route("/<int:plan_id>", methods=["PATCH"])
@jwt_required()
def update_gym_plan(plan_id: int):
    """Body: { "status": "completed" }"""
    data = parse_body(GymPlanUpdate)
    plan = _get_plan(plan_id, int(get_jwt_identity()))

    plan.status = data.status
    db.session.commit()
    return jsonify(plan.to_dict()), 200


@gym_plan_bp.route("/<int:plan_id>", methods=["DELETE"])
@jwt_required()
def delete_gym_plan(plan_id: int):
    plan = _get_plan(plan_id, int(get_jwt_identity()))

    db.session.delete(plan)
    db.session.commit()
    return jsonify({"message": "Gym plan deleted"}), 200


@gym_plan_bp.route("/generate", methods=["POST"])
@jwt_required()
def generate_plan():
    """
    Body:
    {
      "fitness_goal": "muscle_gain",
      "fitness_level": "intermediate",
      "days_per_week": 4,
      "equipment_access": "gym"
    }

    The new plan becomes the only active one; earlier active plans are
    archived in the same commit, and only once generation has succeeded.
    """
    user_id = int(get_jwt_identity())
    data = parse_body(GymPlanGenerateRequest)
    req = data.model_dump()
    cfg = current_app.config

    current_app.logger.info(f"[gym-plan/generate] user_id={user_id} request={req}")
    try:
        generated = generate_gym_plan(
            req,
            api_key=cfg.get("OPENROUTER_API_KEY"),
            model=cfg.get("OPENROUTER_MODEL"),
            url=cfg.get("OPENROUTER_URL"),
            timeout=cfg.get("OPENROUTER_TIMEOUT", 60),
        )
    except PlanGenerationError as e:
        current_app.logger.error(f"[gym-plan/generate] failed for user_id={user_id}: {e}")
        log_activity(
            "GYM_PLAN", "generate_plan", "Failed to generate gym plan", ERROR,
            {"user_id": user_id, "error": str(e)},
        )
        raise InternalError("Failed to generate gym plan") from e

    GymPlan.query.filter_by(user_id=user_id, status=PlanStatus.ACTIVE).update(
        {GymPlan.status: PlanStatus.ARCHIVED}, synchronize_session=False
    )
    plan = GymPlan(
        user_id=user_id,
        status=PlanStatus.ACTIVE,
        plan_content=generated["plan_content"],
        weekly_schedule=generated["weekly_schedule"],
        **req,
    )
    db.session.add(plan)
    db.session.flush()

    db.session.add(
        FriendActivity(
            user_id=user_id,
            activity_type=ActivityType.GYM_PLAN_STARTED,
            data={
                "planId": plan.id,
                "goal": format_goal(plan.fitness_goal),
                "daysPerWeek": plan.days_per_week,
                "startedAt": datetime.utcnow().isoformat(),
            },
        )
    )
    db.session.commit()

    log_activity(
        "GYM_PLAN", "generate_plan",
        f"User {user_id} generated a {plan.days_per_week}-day {plan.fitness_goal} plan", SUCCESS,
        {"gym_plan_id": plan.id, **req},
    )
    return jsonify(plan.to_dict()), 201
