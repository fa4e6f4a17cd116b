# backend/fitlog/models/gym_plan.py
from datetime import datetime
from .. import db
from ..enums import PlanStatus, enum_values


class GymPlan(db.Model):
    __tablename__ = "gym_plans"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    fitness_goal = db.Column(db.String(50), nullable=False)
    fitness_level = db.Column(db.String(50), nullable=False)
    days_per_week = db.Column(db.Integer, nullable=False)
    equipment_access = db.Column(db.String(50), nullable=False)

    plan_content = db.Column(db.JSON, nullable=False)
    weekly_schedule = db.Column(db.JSON, nullable=False)
    status = db.Column(
        db.Enum(PlanStatus, name="gym_plan_status", values_callable=enum_values),
        nullable=False,
        default=PlanStatus.ACTIVE,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", backref=db.backref("gym_plans", cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "id": self.id,
            "fitness_goal": self.fitness_goal,
            "fitness_level": self.fitness_level,
            "days_per_week": self.days_per_week,
            "equipment_access": self.equipment_access,
            "plan_content": self.plan_content,
            "weekly_schedule": self.weekly_schedule,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
