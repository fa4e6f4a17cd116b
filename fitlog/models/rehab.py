# backend/fitlog/models/rehab.py
from datetime import datetime
from .. import db


class RehabExercise(db.Model):
    """A standalone rehab prescription item, independent of workouts."""
    __tablename__ = "rehab_exercises"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(100))

    sets = db.Column(db.Integer)
    sets_left = db.Column(db.Integer)
    sets_right = db.Column(db.Integer)
    reps = db.Column(db.Integer)
    hold = db.Column(db.Integer)          # seconds
    load = db.Column(db.String(50))       # e.g. "2 kg"
    band_color = db.Column(db.String(50))
    time = db.Column(db.String(50))       # e.g. "3-5 min"
    cues = db.Column(db.Text)

    completed = db.Column(db.Boolean, default=False, nullable=False)
    completed_date = db.Column(db.DateTime)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship(
        "User", backref=db.backref("rehab_exercises", cascade="all, delete-orphan")
    )

    def to_summary_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "completed": self.completed,
            "sets_left": self.sets_left,
            "sets_right": self.sets_right,
            "sets": self.sets,
            "reps": self.reps,
            "hold": self.hold,
            "load": self.load,
            "band_color": self.band_color,
            "time": self.time,
        }

    def to_dict(self):
        data = self.to_summary_dict()
        data.update(
            {
                "description": self.description,
                "category": self.category,
                "cues": self.cues,
                "completed_date": self.completed_date.isoformat()
                if self.completed_date
                else None,
                "order_index": self.order_index,
            }
        )
        return data
