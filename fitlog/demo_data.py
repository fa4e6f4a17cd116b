# backend/fitlog/demo_data.py
"""
Demo history for new accounts: a week of past workouts, two weeks of
scheduled ones, and a Stats row consistent with whatever got "completed".
"""
import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from . import db, jobs
from .activity_logger import ERROR, IN_PROGRESS, SUCCESS, log_activity
from .models.rehab import RehabExercise
from .models.stats import Stats
from .models.user import User
from .models.workout import Workout, WorkoutExercise, WorkoutSet

logger = logging.getLogger(__name__)

TRAILING_DAYS = 7
LEADING_DAYS = 15
# workouts at most this many days old are treated as not done yet
RECENT_DAYS = 2

# weekday (Monday=0) -> workout template
SPLIT_PROGRAM = {
    0: {
        "name": "Upper Body",
        "exercises": [
            {"name": "Bench Press", "sets": 3, "reps": 10, "weight": 43},
            {"name": "Dumbbell Rows", "sets": 3, "reps": 10, "weight": 14},
            {"name": "Overhead Press", "sets": 3, "reps": 8, "weight": 30},
            {"name": "Bicep Curls", "sets": 3, "reps": 12, "weight": 9},
            {"name": "Tricep Extensions", "sets": 3, "reps": 12, "weight": 7},
        ],
    },
    2: {
        "name": "Lower Body",
        "exercises": [
            {"name": "Squats", "sets": 3, "reps": 10, "weight": 43},
            {"name": "Walking Lunges", "sets": 3, "reps": 10, "weight": 0},
            {"name": "Leg Press", "sets": 3, "reps": 12, "weight": 82},
            {"name": "Calf Raises", "sets": 3, "reps": 15, "weight": 45},
            {"name": "Leg Curls", "sets": 3, "reps": 12, "weight": 23},
        ],
    },
    4: {
        "name": "Full Body",
        "exercises": [
            {"name": "Deadlifts", "sets": 3, "reps": 5, "weight": 61},
            {"name": "Pull-ups", "sets": 3, "reps": 5, "weight": 0},
            {"name": "Dumbbell Press", "sets": 3, "reps": 10, "weight": 18},
            {"name": "Plank", "sets": 3, "reps": 30, "weight": 0},
            {"name": "Face Pulls", "sets": 3, "reps": 15, "weight": 9},
        ],
    },
}

REHAB_SESSION = {
    "name": "Shoulder Rehab Session",
    "exercises": [
        {"name": "Warm-up | Rowing (3-5 min)", "sets": 1, "reps": 300, "weight": 0},
        {"name": "Sleeper Stretch (Left - hold 20s)", "sets": 1, "reps": 20, "weight": 0},
        {"name": "Sleeper Stretch (Right - hold 20s)", "sets": 2, "reps": 20, "weight": 0},
        {"name": "Lat Dorsi Stretch on Bench (hold 20s)", "sets": 2, "reps": 20, "weight": 0},
        {"name": "Pec Stretch Doorway (Left - hold 20s)", "sets": 1, "reps": 20, "weight": 0},
        {"name": "Pec Stretch Doorway (Right - hold 20s)", "sets": 2, "reps": 20, "weight": 0},
        {"name": "Shoulder Internal Rotation | Towel (Left - hold 20s)", "sets": 1, "reps": 20, "weight": 0},
        {"name": "Shoulder Internal Rotation | Towel (Right - hold 20s)", "sets": 2, "reps": 20, "weight": 0},
        {"name": "External Rotation | Band (Seated on Ball, hold 2s)", "sets": 1, "reps": 10, "weight": 0},
        {"name": "External Rotation | Band (Left - hold 2s)", "sets": 2, "reps": 8, "weight": 0},
        {"name": "External Rotation | Band (Right - hold 2s)", "sets": 1, "reps": 8, "weight": 0},
        {"name": "Abduction in Scapular Plane (Left)", "sets": 2, "reps": 10, "weight": 2},
        {"name": "Abduction in Scapular Plane (Right)", "sets": 1, "reps": 10, "weight": 2},
        {"name": "External Rotation | Dumbbell (Left)", "sets": 2, "reps": 10, "weight": 2},
        {"name": "External Rotation | Dumbbell (Right)", "sets": 1, "reps": 10, "weight": 2},
        {"name": "Horizontal Extension Prone | Dumbbell (Left)", "sets": 2, "reps": 10, "weight": 2},
        {"name": "Horizontal Extension Prone | Dumbbell (Right)", "sets": 1, "reps": 10, "weight": 2},
        {"name": "Supported Bent-over Row (Left)", "sets": 2, "reps": 8, "weight": 7.5},
        {"name": "Supported Bent-over Row (Right)", "sets": 1, "reps": 8, "weight": 7.5},
        {"name": "Seated Low Row (Neutral Grip)", "sets": 2, "reps": 10, "weight": 35},
        {"name": "Dumbbell Hammer Curls", "sets": 2, "reps": 10, "weight": 7.5},
        {"name": "Triceps Cable Pulldown (Standing)", "sets": 2, "reps": 10, "weight": 17.5},
    ],
}

PROGRAMS = {
    "split": SPLIT_PROGRAM,
    "rehab": {0: REHAB_SESSION, 2: REHAB_SESSION, 4: REHAB_SESSION},
}

COMPLETION_RATES = {
    "split": 0.85,
    "rehab": 0.95,
}

DEFAULT_PROGRAM = "split"

# default prescription list for rehab accounts
REHAB_EXERCISES = [
    {
        "name": "Rowing",
        "category": "Warm-up",
        "time": "3-5 min",
        "cues": "Long spine, shoulders level, initiate with legs, then back, then arms; return arms, body, legs.",
    },
    {
        "name": "Sleeper Stretch",
        "category": "Mobility & Stretching",
        "sets_left": 1,
        "sets_right": 2,
        "hold": 20,
        "cues": "Side-lying, shoulder & elbow at 90°, gently lower palm toward floor without lifting shoulder blade.",
    },
    {
        "name": "Lat Dorsi Stretch on Bench",
        "category": "Mobility & Stretching",
        "sets": 2,
        "hold": 20,
        "cues": "Kneel, elbows on bench, lower chest maintaining neutral spine.",
    },
    {
        "name": "Pec Stretch (Doorway/Frame)",
        "category": "Mobility & Stretching",
        "sets_left": 1,
        "sets_right": 2,
        "hold": 20,
        "cues": "Forearm vertical on frame, step forward to feel chest stretch.",
    },
    {
        "name": "Shoulder Internal Rotation (Towel Behind Back)",
        "category": "Mobility & Stretching",
        "sets_left": 1,
        "sets_right": 2,
        "hold": 20,
        "cues": "One hand over shoulder, other behind back holding towel; gently pull to stretch lower hand shoulder.",
    },
    {
        "name": "Shoulder External Rotation w/ Resistance Band",
        "category": "Band / Dumbbell / Machine Strength",
        "sets": 1,
        "reps": 10,
        "hold": 2,
        "band_color": "Green",
        "cues": "Seated on gym ball, elbows tucked at sides, rotate out then control back.",
    },
    {
        "name": "External Shoulder Rotation w/ Resistance Band",
        "category": "Band / Dumbbell / Machine Strength",
        "sets_left": 2,
        "sets_right": 1,
        "reps": 8,
        "hold": 2,
        "band_color": "Green",
        "cues": "Arm bent, elbow close to side, turn forearm outward, return across body with control.",
    },
    {
        "name": "Abduction in Plane of Scapula",
        "category": "Band / Dumbbell / Machine Strength",
        "sets_left": 2,
        "sets_right": 1,
        "reps": 10,
        "load": "2 kg",
        "cues": "Thumb up, raise arm 20-30° anterior to frontal plane to shoulder height; lower slowly.",
    },
    {
        "name": "Shoulder External Rotation w/ Dumbbell",
        "category": "Band / Dumbbell / Machine Strength",
        "sets_left": 2,
        "sets_right": 1,
        "reps": 10,
        "load": "2 kg",
        "cues": "Side-lying, elbow tucked, rotate to raise hand, lower with control.",
    },
    {
        "name": "Horizontal Extension (Prone) w/ Dumbbell",
        "category": "Band / Dumbbell / Machine Strength",
        "sets_left": 2,
        "sets_right": 1,
        "reps": 10,
        "load": "2 kg",
        "cues": "Prone, arm hangs off bed, raise out to side, lower down.",
    },
    {
        "name": "Supported Bent-Over Row",
        "category": "Band / Dumbbell / Machine Strength",
        "sets_left": 2,
        "sets_right": 1,
        "reps": 8,
        "load": "7.5 kg",
        "cues": "One hand braced on bench, row dumbbell to side, squeeze shoulder blade, lower slowly.",
    },
    {
        "name": "Seated Low Row (Neutral Grip)",
        "category": "Band / Dumbbell / Machine Strength",
        "sets": 2,
        "reps": 10,
        "load": "35 kg",
        "cues": "Shoulders down/back, pull handles to sides, control return.",
    },
    {
        "name": "Dumbbell Hammer Curls",
        "category": "Band / Dumbbell / Machine Strength",
        "sets": 2,
        "reps": 10,
        "load": "7.5 kg",
        "cues": "Palms facing in, elbows close to body, curl then lower.",
    },
    {
        "name": "Triceps Cable Pulldown (Standing)",
        "category": "Band / Dumbbell / Machine Strength",
        "sets": 2,
        "reps": 10,
        "load": "17.5 kg",
        "cues": "Tall posture, start elbows at 90°, extend fully to sides, return to 90°.",
    },
]

_REHAB_FIELDS = (
    "category", "sets", "sets_left", "sets_right", "reps", "hold",
    "load", "band_color", "time", "cues",
)


def program_for(user: User) -> str:
    return "rehab" if user.rehab_enabled else DEFAULT_PROGRAM


def plan_demo_schedule(program_name: str, today: date):
    """
    Returns [(day, template, completed, completion_rate), ...] in creation order:
    trailing days oldest first, then today and the following two weeks.
    """
    program = PROGRAMS.get(program_name, PROGRAMS[DEFAULT_PROGRAM])
    base_rate = COMPLETION_RATES.get(program_name, COMPLETION_RATES[DEFAULT_PROGRAM])

    schedule = []
    for days_ago in range(TRAILING_DAYS, 0, -1):
        day = today - timedelta(days=days_ago)
        template = program.get(day.weekday())
        if not template:
            continue
        completed = days_ago > RECENT_DAYS
        schedule.append((day, template, completed, base_rate if completed else 0.0))

    for days_ahead in range(LEADING_DAYS):
        day = today + timedelta(days=days_ahead)
        template = program.get(day.weekday())
        if not template:
            continue
        schedule.append((day, template, False, 0.0))

    return schedule


def create_demo_workouts(
    user_id: int,
    program_name: str = DEFAULT_PROGRAM,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
    on_progress: Optional[Callable[[float], None]] = None,
) -> int:
    """
    Write the demo schedule for ``user_id`` and bump their Stats once with the
    totals drawn along the way. Each workout is committed on its own; a crash
    part-way leaves the earlier workouts and no stats update.

    Returns the number of workouts created.
    """
    today = today or date.today()
    rng = rng or random.Random()
    schedule = plan_demo_schedule(program_name, today)

    total_sets_completed = 0
    total_exercises_completed = 0

    for position, (day, template, completed, completion_rate) in enumerate(schedule, start=1):
        workout = Workout(user_id=user_id, date=day, name=template["name"], completed=completed)

        for index, planned in enumerate(template["exercises"]):
            exercise = WorkoutExercise(name=planned["name"], order_index=index)
            flags = []
            for set_index in range(planned["sets"]):
                done = completed and rng.random() < completion_rate
                flags.append(done)
                exercise.sets.append(
                    WorkoutSet(
                        reps=planned["reps"],
                        weight=planned["weight"],
                        order_index=set_index,
                        completed=done,
                    )
                )
            total_sets_completed += sum(flags)
            if flags and all(flags):
                total_exercises_completed += 1
            workout.exercises.append(exercise)

        db.session.add(workout)
        db.session.commit()

        if on_progress:
            on_progress(position / len(schedule))

    last_workout = None
    if total_sets_completed:
        last_workout = datetime.combine(today - timedelta(days=RECENT_DAYS), time.min)

    if total_sets_completed or total_exercises_completed:
        Stats.increment(
            user_id,
            sets_delta=total_sets_completed,
            exercises_delta=total_exercises_completed,
            last_workout_date=last_workout,
        )
        db.session.commit()

    logger.info(
        "demo data for user %s: %d workouts, %d sets, %d exercises completed",
        user_id, len(schedule), total_sets_completed, total_exercises_completed,
    )
    return len(schedule)


def create_rehab_exercises(user_id: int) -> int:
    """Add the default rehab prescription list. Does not commit."""
    for index, item in enumerate(REHAB_EXERCISES):
        db.session.add(
            RehabExercise(
                user_id=user_id,
                name=item["name"],
                order_index=index,
                **{field: item.get(field) for field in _REHAB_FIELDS},
            )
        )
    return len(REHAB_EXERCISES)


def setup_new_user(user_id: int, job_id: str) -> None:
    """
    Account setup task, run detached from the registration request.
    Failures are recorded on the job and in the activity log.
    """
    tracker = jobs.tracker
    tracker.start_job(job_id)
    log_activity(
        "SYSTEM", "account_setup", f"Setting up account for user {user_id}", IN_PROGRESS,
        {"job_id": job_id},
    )

    try:
        user = db.session.get(User, user_id)
        if user is None:
            raise LookupError(f"user {user_id} does not exist")

        tracker.update_job_progress(job_id, 10)
        program = program_for(user)
        created = create_demo_workouts(
            user.id,
            program,
            on_progress=lambda fraction: tracker.update_job_progress(job_id, 10 + int(fraction * 75)),
        )

        if user.rehab_enabled and not RehabExercise.query.filter_by(user_id=user.id).count():
            create_rehab_exercises(user.id)

        tracker.update_job_progress(job_id, 90)
        user.setup_complete = True
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.exception("Setup job %s failed", job_id)
        tracker.fail_job(job_id, str(e))
        log_activity(
            "SYSTEM", "account_setup", f"Setup failed for user {user_id}", ERROR,
            {"job_id": job_id, "error": str(e)},
        )
        return

    tracker.complete_job(job_id)
    log_activity(
        "SYSTEM", "account_setup", f"Created {created} demo workouts for user {user_id}", SUCCESS,
        {"job_id": job_id, "program": program},
    )
