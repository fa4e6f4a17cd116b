from datetime import date, timedelta

from conftest import get_stats, make_workout


def _set_ids(workout):
    return [s["id"] for e in workout["exercises"] for s in e["sets"]]


def test_toggle_sets_moves_stats_by_deltas(client):
    workout = make_workout(client, sets_per_exercise=(2,))
    first, second = _set_ids(workout)
    base = get_stats(client)

    def totals():
        s = get_stats(client)
        return (
            s["total_sets_completed"] - base["total_sets_completed"],
            s["total_exercises"] - base["total_exercises"],
        )

    resp = client.patch(f"/api/sets/{first}", json={"completed": True})
    assert resp.status_code == 200
    assert resp.get_json()["stats_delta"] == {"sets_delta": 1, "exercises_delta": 0}
    assert totals() == (1, 0)

    client.patch(f"/api/sets/{second}", json={"completed": True})
    assert totals() == (2, 1)

    resp = client.patch(f"/api/sets/{first}", json={"completed": False})
    assert resp.get_json()["stats_delta"] == {"sets_delta": -1, "exercises_delta": -1}
    assert totals() == (1, 0)

    client.patch(f"/api/sets/{second}", json={"completed": False})
    assert totals() == (0, 0)


def test_repeating_the_same_toggle_is_a_noop(client):
    workout = make_workout(client, sets_per_exercise=(1,))
    (set_id,) = _set_ids(workout)

    client.patch(f"/api/sets/{set_id}", json={"completed": True})
    after_first = get_stats(client)
    resp = client.patch(f"/api/sets/{set_id}", json={"completed": True})

    assert resp.get_json()["stats_delta"] == {"sets_delta": 0, "exercises_delta": 0}
    assert get_stats(client)["total_sets_completed"] == after_first["total_sets_completed"]
    assert get_stats(client)["total_exercises"] == after_first["total_exercises"]


def test_weight_only_update_keeps_stats(client):
    workout = make_workout(client)
    set_id = _set_ids(workout)[0]
    before = get_stats(client)

    resp = client.patch(f"/api/sets/{set_id}", json={"weight": 42.5})
    assert resp.get_json()["set"]["weight"] == 42.5
    assert get_stats(client)["total_sets_completed"] == before["total_sets_completed"]


def test_sets_of_other_users_are_not_found(client, make_client):
    workout = make_workout(client)
    bob, _ = make_client("bob")

    resp = bob.patch(f"/api/sets/{_set_ids(workout)[0]}", json={"completed": True})
    assert resp.status_code == 404


def test_invalid_set_body(client):
    workout = make_workout(client)
    resp = client.patch(f"/api/sets/{_set_ids(workout)[0]}", json={"weight": -1})
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["field"] == "weight"


def test_get_workout_by_date(client):
    make_workout(client, day="2030-01-07", name="Push")

    resp = client.get("/api/workouts/2030-01-07")
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Push"

    assert client.get("/api/workouts/2030-01-08").status_code == 404
    assert client.get("/api/workouts/not-a-date").status_code == 400


def test_complete_workout_is_idempotent(client):
    workout = make_workout(client)

    resp = client.post(f"/api/workouts/{workout['id']}/complete")
    assert resp.status_code == 200
    assert resp.get_json()["workout"]["completed"] is True
    assert get_stats(client)["last_workout_date"] is not None

    resp = client.post(f"/api/workouts/{workout['id']}/complete")
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Workout already completed"


def test_complete_other_users_workout(client, make_client):
    workout = make_workout(client)
    bob, _ = make_client("bob")
    assert bob.post(f"/api/workouts/{workout['id']}/complete").status_code == 404


def test_import_schedules_matching_weekdays(client):
    template = "Tuesday - Pull\nRows: 3x8 @ 50kg\nThursday - Push\nBench Press: 4x6 @ 80"
    # 2030-01-01 is a Tuesday
    resp = client.post("/api/workouts/import", json={"template": template, "start_date": "2030-01-01"})
    assert resp.status_code == 201
    assert resp.get_json()["count"] == 8

    workout = client.get("/api/workouts/2030-01-03").get_json()
    assert workout["name"] == "Thursday - Push"
    sets = workout["exercises"][0]["sets"]
    assert len(sets) == 4
    assert sets[0]["weight"] == 80


def test_import_without_days_is_rejected(client):
    resp = client.post("/api/workouts/import", json={"template": "just some text"})
    assert resp.status_code == 400


def test_calendar_month(client):
    make_workout(client, day="2030-01-07")
    make_workout(client, day="2030-01-31")
    make_workout(client, day="2030-02-01")

    resp = client.get("/api/calendar?year=2030&month=1")
    assert resp.status_code == 200
    assert [w["date"] for w in resp.get_json()["workouts"]] == ["2030-01-07", "2030-01-31"]

    assert client.get("/api/calendar?year=2030&month=13").status_code == 400
    assert client.get("/api/calendar?year=abc").status_code == 400


def test_current_streak_counts_back_from_today(client):
    today = date.today()
    for offset in (0, 1):
        workout = make_workout(client, day=(today - timedelta(days=offset)).isoformat())
        for set_id in _set_ids(workout):
            client.patch(f"/api/sets/{set_id}", json={"completed": True})
        client.post(f"/api/workouts/{workout['id']}/complete")

    body = client.get("/api/stats").get_json()
    # demo workouts from the last two days are never completed
    assert body["current_streak"] == 2
    assert body["top_exercise"]["sets"] >= 2
    assert body["monthly_sets"] >= 2


def test_dashboard(client):
    body = client.get("/api/dashboard").get_json()
    assert body["user"]["name"] == "alice"
    assert body["user"]["stats"] is not None
    assert "today_workout" in body
