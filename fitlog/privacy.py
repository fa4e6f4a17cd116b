# backend/fitlog/privacy.py
from typing import Any, Dict, Optional

# payload keys hidden by each flag
WORKOUT_DETAIL_FIELDS = ("exercises", "sets", "weights")
EXERCISE_NAME_FIELDS = ("exercises", "topExercise")

BASELINE_STAT_FIELDS = ("total_sets_completed", "total_exercises", "last_workout_date")


def _flag(settings, name: str) -> bool:
    if isinstance(settings, dict):
        return bool(settings.get(name, True))
    return bool(getattr(settings, name, True))


def filter_activity(data: Optional[Dict[str, Any]], settings) -> Dict[str, Any]:
    """
    Redact a friend's activity payload according to *their* privacy settings.

    ``settings`` may be a PrivacySettings row, a plain dict of flags, or None.
    No settings means the owner never configured anything, so the payload is
    returned as-is. The redactions are independent, idempotent and commute.
    """
    filtered = dict(data or {})
    if settings is None:
        return filtered

    if not _flag(settings, "show_workout_details"):
        for field in WORKOUT_DETAIL_FIELDS:
            filtered.pop(field, None)

    if not _flag(settings, "show_exercise_names"):
        for field in EXERCISE_NAME_FIELDS:
            filtered.pop(field, None)

    return filtered


def baseline_stats(stats: Optional[Dict[str, Any]], settings) -> Optional[Dict[str, Any]]:
    """
    Friend-facing stats. The baseline totals are always comparable between
    friends; anything beyond them is only shown when no settings exist.
    """
    if stats is None:
        return None
    if settings is None:
        return dict(stats)
    return {field: stats.get(field) for field in BASELINE_STAT_FIELDS}
