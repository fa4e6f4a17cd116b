# backend/fitlog/models/workout.py
from datetime import datetime
from .. import db


class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(100))
    date = db.Column(db.Date, nullable=False, index=True)
    # user-facing label, not derived from the sets
    completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref=db.backref("workouts", cascade="all, delete-orphan"))
    exercises = db.relationship(
        "WorkoutExercise",
        back_populates="workout",
        order_by="WorkoutExercise.order_index",
        cascade="all, delete-orphan",
    )

    def to_summary_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat() if self.date else None,
            "completed": self.completed,
        }

    def to_dict(self):
        data = self.to_summary_dict()
        data["exercises"] = [e.to_dict() for e in self.exercises]
        return data


class WorkoutExercise(db.Model):
    __tablename__ = "workout_exercises"

    id = db.Column(db.Integer, primary_key=True)
    workout_id = db.Column(db.Integer, db.ForeignKey("workouts.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    workout = db.relationship("Workout", back_populates="exercises")
    sets = db.relationship(
        "WorkoutSet",
        back_populates="exercise",
        order_by="WorkoutSet.order_index",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "order_index": self.order_index,
            "sets": [s.to_dict() for s in self.sets],
        }


class WorkoutSet(db.Model):
    __tablename__ = "workout_sets"

    id = db.Column(db.Integer, primary_key=True)
    exercise_id = db.Column(
        db.Integer, db.ForeignKey("workout_exercises.id"), nullable=False, index=True
    )
    reps = db.Column(db.Integer, nullable=False, default=0)
    weight = db.Column(db.Float, nullable=False, default=0)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    exercise = db.relationship("WorkoutExercise", back_populates="sets")

    def to_dict(self):
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "reps": self.reps,
            "weight": self.weight,
            "completed": self.completed,
            "order_index": self.order_index,
        }
