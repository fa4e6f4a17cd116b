def test_log_and_count(client):
    assert client.post("/api/habits", json={"type": "SMOKING"}).status_code == 201
    assert client.post("/api/habits", json={"type": "SMOKING"}).status_code == 201
    assert client.post("/api/habits", json={"type": "NICOTINE_POUCH"}).status_code == 201

    body = client.get("/api/habits").get_json()
    assert body["today"] == {"smoking": 2, "nicotine_pouches": 1}
    assert body["this_week"] == {"smoking": 2, "nicotine_pouches": 1}


def test_invalid_habit_type(client):
    resp = client.post("/api/habits", json={"type": "VAPING"})
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["field"] == "type"


def test_undo_removes_most_recent(client):
    client.post("/api/habits", json={"type": "SMOKING"})
    client.post("/api/habits", json={"type": "NICOTINE_POUCH"})

    resp = client.delete("/api/habits/undo")
    assert resp.status_code == 200
    assert resp.get_json()["log"]["type"] == "NICOTINE_POUCH"
    assert client.get("/api/habits").get_json()["today"] == {"smoking": 1, "nicotine_pouches": 0}

    assert client.delete("/api/habits/undo").status_code == 200
    assert client.delete("/api/habits/undo").status_code == 404


def test_counts_are_per_user(client, make_client):
    client.post("/api/habits", json={"type": "SMOKING"})
    bob, _ = make_client("bob")
    assert bob.get("/api/habits").get_json()["today"] == {"smoking": 0, "nicotine_pouches": 0}
    assert bob.delete("/api/habits/undo").status_code == 404


def test_habits_require_login(app):
    assert app.test_client().get("/api/habits").status_code == 401
