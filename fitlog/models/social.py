# backend/fitlog/models/social.py
from datetime import datetime
from sqlalchemy import and_, or_

from .. import db
from ..enums import ActivityType, FriendshipStatus, enum_values


# -----------------------------
# Friendships
# -----------------------------
class Friendship(db.Model):
    """
    Directed request row (requester -> addressee). Once accepted the
    relationship is undirected; at most one row exists per pair of users.
    """
    __tablename__ = "friendships"
    __table_args__ = (
        db.UniqueConstraint("requester_id", "addressee_id", name="uq_friendship_pair"),
    )

    id = db.Column(db.Integer, primary_key=True)
    requester_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    addressee_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    status = db.Column(
        db.Enum(FriendshipStatus, name="friendship_status", values_callable=enum_values),
        nullable=False,
        default=FriendshipStatus.PENDING,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    requester = db.relationship(
        "User", foreign_keys=[requester_id], backref="sent_friendships"
    )
    addressee = db.relationship(
        "User", foreign_keys=[addressee_id], backref="received_friendships"
    )

    @classmethod
    def between(cls, user_a: int, user_b: int):
        return cls.query.filter(
            or_(
                and_(cls.requester_id == user_a, cls.addressee_id == user_b),
                and_(cls.requester_id == user_b, cls.addressee_id == user_a),
            )
        ).first()

    def other_user(self, user_id: int):
        return self.addressee if self.requester_id == user_id else self.requester

    def to_dict(self):
        return {
            "id": self.id,
            "status": self.status.value,
            "requester": self.requester.to_public_dict() if self.requester else None,
            "addressee": self.addressee.to_public_dict() if self.addressee else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# -----------------------------
# Friend-visible activity
# -----------------------------
class FriendActivity(db.Model):
    __tablename__ = "friend_activities"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    activity_type = db.Column(
        db.Enum(ActivityType, name="friend_activity_type", values_callable=enum_values),
        nullable=False,
    )
    data = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    user = db.relationship(
        "User", backref=db.backref("friend_activities", cascade="all, delete-orphan")
    )


# -----------------------------
# Privacy settings
# -----------------------------
class PrivacySettings(db.Model):
    __tablename__ = "privacy_settings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    show_workout_details = db.Column(db.Boolean, nullable=False, default=True)
    show_exercise_names = db.Column(db.Boolean, nullable=False, default=True)
    show_performance_trends = db.Column(db.Boolean, nullable=False, default=True)
    show_workout_schedule = db.Column(db.Boolean, nullable=False, default=True)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = db.relationship("User", back_populates="privacy_settings")

    FLAGS = (
        "show_workout_details",
        "show_exercise_names",
        "show_performance_trends",
        "show_workout_schedule",
    )

    @classmethod
    def get_or_create(cls, user_id: int) -> "PrivacySettings":
        """Lazily create the all-visible defaults. Does not commit."""
        settings = cls.query.filter_by(user_id=user_id).first()
        if settings is None:
            settings = cls(
                user_id=user_id,
                show_workout_details=True,
                show_exercise_names=True,
                show_performance_trends=True,
                show_workout_schedule=True,
            )
            db.session.add(settings)
            db.session.flush()
        return settings

    def to_dict(self):
        return {flag: bool(getattr(self, flag)) for flag in self.FLAGS}
