# backend/fitlog/schemas.py
"""
Request bodies. Handlers call ``parse_body(Model)``; a pydantic
ValidationError propagates to the error handler and becomes a 400
with per-field details.
"""
import datetime
from typing import List, Literal, Optional

from flask import request
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .enums import HabitType, PlanStatus


def parse_body(model):
    return model.model_validate(request.get_json(silent=True) or {})


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# -----------------------------
# Auth
# -----------------------------
class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(min_length=6, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    rehab_enabled: bool = False

    @field_validator("username", "name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return _strip(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        value = _strip(value)
        if not value:
            return None
        if not isinstance(value, str) or "@" not in value or value.startswith("@"):
            raise ValueError("Invalid email format")
        return value.lower()

    @property
    def display_name(self) -> str:
        return self.name or self.username


class LoginRequest(BaseModel):
    # username or email
    identifier: str = Field(
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("identifier", "username", "email"),
    )
    password: str = Field(min_length=1)

    @field_validator("identifier", mode="before")
    @classmethod
    def strip_identifier(cls, value):
        return _strip(value)


class SetPasswordRequest(BaseModel):
    password: str = Field(min_length=6, max_length=100)
    current_password: Optional[str] = None


# -----------------------------
# Workouts
# -----------------------------
class SetUpdateRequest(BaseModel):
    completed: Optional[bool] = None
    reps: Optional[int] = Field(default=None, ge=0, le=1000)
    weight: Optional[float] = Field(default=None, ge=0, le=10000)


class SetInput(BaseModel):
    reps: int = Field(ge=0, le=1000)
    weight: float = Field(default=0, ge=0, le=10000)


class ExerciseInput(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    sets: List[SetInput] = Field(min_length=1)


class WorkoutCreateRequest(BaseModel):
    date: datetime.date
    name: Optional[str] = Field(default=None, max_length=100)
    exercises: List[ExerciseInput] = Field(default_factory=list)


class WorkoutImportRequest(BaseModel):
    template: str = Field(min_length=1)
    start_date: Optional[datetime.date] = Field(
        default=None, validation_alias=AliasChoices("start_date", "date")
    )
    weeks: int = Field(default=4, ge=1, le=12)


# -----------------------------
# Rehab
# -----------------------------
class RehabExerciseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=100)
    sets: Optional[int] = Field(default=None, ge=1, le=100)
    sets_left: Optional[int] = Field(default=None, ge=0, le=100)
    sets_right: Optional[int] = Field(default=None, ge=0, le=100)
    reps: Optional[int] = Field(default=None, ge=1, le=1000)
    hold: Optional[int] = Field(default=None, ge=0, le=600)
    load: Optional[str] = Field(default=None, max_length=50)
    band_color: Optional[str] = Field(default=None, max_length=50)
    time: Optional[str] = Field(default=None, max_length=50)
    cues: Optional[str] = Field(default=None, max_length=2000)


class RehabExerciseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=100)
    sets: Optional[int] = Field(default=None, ge=1, le=100)
    sets_left: Optional[int] = Field(default=None, ge=0, le=100)
    sets_right: Optional[int] = Field(default=None, ge=0, le=100)
    reps: Optional[int] = Field(default=None, ge=1, le=1000)
    hold: Optional[int] = Field(default=None, ge=0, le=600)
    load: Optional[str] = Field(default=None, max_length=50)
    band_color: Optional[str] = Field(default=None, max_length=50)
    time: Optional[str] = Field(default=None, max_length=50)
    cues: Optional[str] = Field(default=None, max_length=2000)
    order_index: Optional[int] = Field(default=None, ge=0)
    completed: Optional[bool] = None

    # may be omitted, but not cleared
    @field_validator("name", "order_index", "completed")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


# -----------------------------
# Habits / friends / settings
# -----------------------------
class HabitLogRequest(BaseModel):
    type: HabitType


class FriendRequestCreate(BaseModel):
    # username, display name or email of the other user
    identifier: Optional[str] = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("identifier", "friend_identifier", "username"),
    )
    user_id: Optional[int] = None

    @field_validator("identifier", mode="before")
    @classmethod
    def strip_identifier(cls, value):
        return _strip(value)

    @model_validator(mode="after")
    def one_target(self):
        if not self.identifier and self.user_id is None:
            raise ValueError("identifier or user_id is required")
        return self


class FriendshipAction(BaseModel):
    action: Literal["accept", "decline"]


class SettingsUpdate(BaseModel):
    rehab_enabled: bool


class PrivacyUpdate(BaseModel):
    show_workout_details: Optional[bool] = None
    show_exercise_names: Optional[bool] = None
    show_performance_trends: Optional[bool] = None
    show_workout_schedule: Optional[bool] = None

    @model_validator(mode="after")
    def at_least_one(self):
        if all(value is None for value in self.model_dump().values()):
            raise ValueError("At least one privacy flag is required")
        return self


class WallpaperUpdate(BaseModel):
    wallpaper: str = Field(min_length=1, max_length=5_000_000)


# -----------------------------
# Gym plans
# -----------------------------
class GymPlanGenerateRequest(BaseModel):
    fitness_goal: Literal["weight_loss", "muscle_gain", "strength", "endurance", "general_fitness"]
    fitness_level: Literal["beginner", "intermediate", "advanced"]
    days_per_week: int = Field(ge=1, le=7)
    equipment_access: Literal["gym", "home", "bodyweight"]


class GymPlanUpdate(BaseModel):
    status: PlanStatus
