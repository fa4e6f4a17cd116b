# backend/fitlog/models/stats.py
from datetime import datetime
from typing import Optional

from sqlalchemy import case

from .. import db


def _floored(column, delta: int):
    shifted = column + delta
    return case((shifted < 0, 0), else_=shifted)


class Stats(db.Model):
    """
    One row per user: running totals of completed sets and fully completed
    exercises. Totals move only through ``Stats.increment``.
    """
    __tablename__ = "stats"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    total_sets_completed = db.Column(db.Integer, default=0, nullable=False)
    total_exercises = db.Column(db.Integer, default=0, nullable=False)
    last_workout_date = db.Column(db.DateTime)

    user = db.relationship("User", back_populates="stats")

    @classmethod
    def increment(
        cls,
        user_id: int,
        sets_delta: int = 0,
        exercises_delta: int = 0,
        last_workout_date: Optional[datetime] = None,
    ) -> bool:
        """
        Apply deltas as one UPDATE statement so concurrent toggles for the
        same user cannot lose each other's writes. Totals floor at zero.

        Creates the stats row when the user has none. Returns True when a row
        was written. Does not commit.
        """
        values = {}
        if sets_delta:
            values[cls.total_sets_completed] = _floored(cls.total_sets_completed, sets_delta)
        if exercises_delta:
            values[cls.total_exercises] = _floored(cls.total_exercises, exercises_delta)
        if last_workout_date is not None:
            values[cls.last_workout_date] = last_workout_date

        if not values:
            return False

        updated = (
            db.session.query(cls)
            .filter(cls.user_id == user_id)
            .update(values, synchronize_session="fetch")
        )
        if updated:
            return True

        db.session.add(
            cls(
                user_id=user_id,
                total_sets_completed=max(sets_delta, 0),
                total_exercises=max(exercises_delta, 0),
                last_workout_date=last_workout_date,
            )
        )
        return True

    def to_dict(self):
        return {
            "total_sets_completed": int(self.total_sets_completed or 0),
            "total_exercises": int(self.total_exercises or 0),
            "last_workout_date": self.last_workout_date.isoformat()
            if self.last_workout_date
            else None,
        }
