# backend/fitlog/stats_core.py
"""
Incremental maintenance of the per-user workout totals.

Toggling one set changes at most one completed set and at most one fully
completed exercise, so the totals can be adjusted from three booleans
instead of re-scanning the user's history.
"""
from typing import Iterable, NamedTuple, Tuple


class StatsDelta(NamedTuple):
    sets_delta: int
    exercises_delta: int


NO_CHANGE = StatsDelta(0, 0)


def compute_deltas(
    previous_completed: bool,
    new_completed: bool,
    other_sets_completed: bool,
) -> StatsDelta:
    """
    previous_completed / new_completed: the toggled set before and after.
    other_sets_completed: whether every *other* set of the exercise is done.
    """
    if previous_completed == new_completed:
        return NO_CHANGE

    sets_delta = 1 if new_completed else -1

    exercise_was_complete = previous_completed and other_sets_completed
    exercise_is_complete = new_completed and other_sets_completed

    exercises_delta = 0
    if not exercise_was_complete and exercise_is_complete:
        exercises_delta = 1
    elif exercise_was_complete and not exercise_is_complete:
        exercises_delta = -1

    return StatsDelta(sets_delta, exercises_delta)


def apply_deltas(current_sets: int, current_exercises: int, deltas: StatsDelta) -> Tuple[int, int]:
    """Returns (total_sets, total_exercises), never below zero."""
    return (
        max(int(current_sets or 0) + deltas.sets_delta, 0),
        max(int(current_exercises or 0) + deltas.exercises_delta, 0),
    )


def exercise_is_complete(set_flags: Iterable[bool]) -> bool:
    """An exercise is complete iff it has sets and all of them are completed."""
    flags = list(set_flags)
    return bool(flags) and all(flags)
