# backend/fitlog/models/activity_log.py
from datetime import datetime
from .. import db


class ActivityLog(db.Model):
    """System-level operational log (plan generation, account setup, resets)."""
    __tablename__ = "activity_logs"

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(50), nullable=False, index=True)
    operation = db.Column(db.String(100), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    status = db.Column(db.String(20), nullable=False)
    details = db.Column(db.JSON)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "operation": self.operation,
            "message": self.message,
            "status": self.status,
            "details": self.details,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
