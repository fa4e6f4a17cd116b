# backend/fitlog/models/habit.py
from datetime import datetime
from .. import db
from ..enums import HabitType, enum_values


class HabitLog(db.Model):
    __tablename__ = "habit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(
        db.Enum(HabitType, name="habit_type", values_callable=enum_values),
        nullable=False,
    )
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = db.relationship("User", backref=db.backref("habit_logs", cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
