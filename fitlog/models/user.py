# backend/fitlog/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True)
    password_hash = db.Column(db.String(255))

    rehab_enabled = db.Column(db.Boolean, default=False, nullable=False)
    setup_complete = db.Column(db.Boolean, default=False, nullable=False)
    wallpaper = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    stats = db.relationship(
        "Stats", uselist=False, back_populates="user", cascade="all, delete-orphan"
    )
    privacy_settings = db.relationship(
        "PrivacySettings", uselist=False, back_populates="user", cascade="all, delete-orphan"
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def to_public_dict(self):
        return {"id": self.id, "name": self.name, "username": self.username}

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "rehab_enabled": self.rehab_enabled,
            "setup_complete": self.setup_complete,
            "has_password": self.has_password,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
