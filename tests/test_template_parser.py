from fitlog.template_parser import day_of, parse_workout_template

TEMPLATE = """
Monday - Chest & Triceps
Bench Press: 3x10 @ 135lbs
Dips: 3x12

notes nobody asked for
Thursday - Legs
Squats: 5x5 @ 100kg
Leg Press: 4x12 @ 82.5
"""


def test_parses_days_and_exercises():
    days = parse_workout_template(TEMPLATE)

    assert [d["day"] for d in days] == ["Monday - Chest & Triceps", "Thursday - Legs"]
    assert days[0]["exercises"] == [
        {"name": "Bench Press", "sets": 3, "reps": 10, "weight": 135.0},
        {"name": "Dips", "sets": 3, "reps": 12, "weight": 0.0},
    ]
    assert days[1]["exercises"][1] == {"name": "Leg Press", "sets": 4, "reps": 12, "weight": 82.5}


def test_lines_before_first_header_are_ignored():
    days = parse_workout_template("Squats: 3x5\nfriday\nRows: 3x8")
    assert days == [{"day": "friday", "exercises": [{"name": "Rows", "sets": 3, "reps": 8, "weight": 0.0}]}]


def test_empty_template():
    assert parse_workout_template("") == []
    assert parse_workout_template(None) == []


def test_day_of():
    assert day_of("  Wednesday - Pull") == "wednesday"
    assert day_of("SUNDAY") == "sunday"
    assert day_of("Leg day") is None
