import pytest

from config import TestConfig
from fitlog import create_app, db

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_client(app):
    """Returns register(username, **fields) -> (client, register response body)."""

    def register(username, **fields):
        client = app.test_client()
        body = {"username": username, "password": PASSWORD, **fields}
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 201, resp.get_json()
        return client, resp.get_json()

    return register


@pytest.fixture
def client(make_client):
    client, _ = make_client("alice")
    return client


def make_workout(client, day="2030-01-07", sets_per_exercise=(2,), name="Test day"):
    exercises = [
        {
            "name": f"Exercise {i + 1}",
            "sets": [{"reps": 10, "weight": 20 + i} for _ in range(count)],
        }
        for i, count in enumerate(sets_per_exercise)
    ]
    resp = client.post("/api/workouts", json={"date": day, "name": name, "exercises": exercises})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["workout"]


def get_stats(client):
    return client.get("/api/stats").get_json()["stats"]


def befriend(client_a, client_b, username_b):
    resp = client_a.post("/api/friends", json={"identifier": username_b})
    assert resp.status_code == 201, resp.get_json()
    friendship_id = resp.get_json()["friendship"]["id"]
    resp = client_b.patch(f"/api/friends/{friendship_id}", json={"action": "accept"})
    assert resp.status_code == 200, resp.get_json()
    return friendship_id
