# backend/fitlog/template_parser.py
import re
from typing import Any, Dict, List, Optional

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_DAY_HEADER = re.compile(r"^(monday|tuesday|wednesday|thursday|friday|saturday|sunday)", re.I)
# "Bench Press: 3x10 @ 135lbs", weight optional
_EXERCISE_LINE = re.compile(
    r"^(.+?):\s*(\d+)x(\d+)\s*(?:@\s*(\d+(?:\.\d+)?)\s*(?:lbs?|kg)?)?", re.I
)


def day_of(header: str) -> Optional[str]:
    """Lower-case weekday name a template header starts with, if any."""
    match = _DAY_HEADER.match(header.strip())
    return match.group(1).lower() if match else None


def parse_workout_template(text: str) -> List[Dict[str, Any]]:
    """
    Parse a plain-text weekly template:

        Monday - Chest & Triceps
        Bench Press: 3x10 @ 135lbs
        Dips: 3x12

    Returns ``[{"day": "Monday - Chest & Triceps", "exercises": [...]}, ...]``.
    Lines that are neither headers nor exercises are ignored.
    """
    workouts = []
    current = None

    for raw_line in (text or "").strip().splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if day_of(line):
            if current:
                workouts.append(current)
            current = {"day": line, "exercises": []}
            continue

        if current is None:
            continue

        match = _EXERCISE_LINE.match(line)
        if match:
            name, sets, reps, weight = match.groups()
            current["exercises"].append(
                {
                    "name": name.strip(),
                    "sets": int(sets),
                    "reps": int(reps),
                    "weight": float(weight) if weight else 0.0,
                }
            )

    if current:
        workouts.append(current)

    return workouts
