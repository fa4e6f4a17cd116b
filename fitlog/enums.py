# backend/fitlog/enums.py
import enum


class FriendshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    BLOCKED = "BLOCKED"


class HabitType(str, enum.Enum):
    SMOKING = "SMOKING"
    NICOTINE_POUCH = "NICOTINE_POUCH"


class ActivityType(str, enum.Enum):
    WORKOUT_COMPLETED = "WORKOUT_COMPLETED"
    GYM_PLAN_STARTED = "GYM_PLAN_STARTED"


class PlanStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


def enum_values(enum_cls):
    """Column values for ``db.Enum(..., values_callable=enum_values)``."""
    return [member.value for member in enum_cls]
