from conftest import befriend, make_workout


def _complete(client, workout):
    for e in workout["exercises"]:
        for s in e["sets"]:
            client.patch(f"/api/sets/{s['id']}", json={"completed": True})
    assert client.post(f"/api/workouts/{workout['id']}/complete").status_code == 200


def test_request_accept_and_list(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")

    resp = alice.post("/api/friends", json={"identifier": "bob"})
    assert resp.status_code == 201
    friendship_id = resp.get_json()["friendship"]["id"]

    assert [r["id"] for r in alice.get("/api/friends/requests").get_json()["sent"]] == [friendship_id]
    assert [r["id"] for r in bob.get("/api/friends/requests").get_json()["received"]] == [friendship_id]

    # only the addressee can answer
    assert alice.patch(f"/api/friends/{friendship_id}", json={"action": "accept"}).status_code == 403
    assert bob.patch(f"/api/friends/{friendship_id}", json={"action": "accept"}).status_code == 200
    assert bob.patch(f"/api/friends/{friendship_id}", json={"action": "accept"}).status_code == 400

    friends = alice.get("/api/friends").get_json()["friends"]
    assert [f["name"] for f in friends] == ["bob"]
    assert set(friends[0]["stats"]) == {"total_sets_completed", "total_exercises", "last_workout_date"}
    # accepting initialises both users' privacy rows
    assert friends[0]["privacy_settings"]["show_exercise_names"] is True

    assert [f["name"] for f in bob.get("/api/friends").get_json()["friends"]] == ["alice"]


def test_duplicate_and_self_requests(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")

    assert alice.post("/api/friends", json={"identifier": "alice"}).status_code == 400
    assert alice.post("/api/friends", json={"identifier": "nobody"}).status_code == 404
    assert alice.post("/api/friends", json={}).status_code == 400

    alice.post("/api/friends", json={"identifier": "bob"})
    assert alice.post("/api/friends", json={"identifier": "bob"}).status_code == 409
    # the reverse direction is the same pair
    assert bob.post("/api/friends", json={"identifier": "alice"}).status_code == 409


def test_declined_request_can_be_resent(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")

    friendship_id = alice.post("/api/friends", json={"identifier": "bob"}).get_json()["friendship"]["id"]
    bob.patch(f"/api/friends/{friendship_id}", json={"action": "decline"})

    resp = bob.post("/api/friends", json={"identifier": "alice"})
    assert resp.status_code == 201
    body = resp.get_json()["friendship"]
    assert body["id"] == friendship_id
    assert body["status"] == "PENDING"
    assert body["requester"]["username"] == "bob"


def test_block_prevents_requests(make_client):
    alice, alice_body = make_client("alice")
    bob, _ = make_client("bob")

    assert bob.post(f"/api/friends/block/{alice_body['user']['id']}").status_code == 200
    assert alice.post("/api/friends", json={"identifier": "bob"}).status_code == 403
    assert bob.post("/api/friends/block/99999").status_code == 404


def test_remove_friendship(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")
    carol, _ = make_client("carol")
    friendship_id = befriend(alice, bob, "bob")

    assert carol.delete(f"/api/friends/{friendship_id}").status_code == 403
    assert bob.delete(f"/api/friends/{friendship_id}").status_code == 200
    assert alice.get("/api/friends").get_json()["friends"] == []
    assert alice.delete(f"/api/friends/{friendship_id}").status_code == 404


def test_search(make_client):
    alice, _ = make_client("alice")
    make_client("alicia")
    make_client("bob")

    assert alice.get("/api/friends/search?q=a").status_code == 400

    users = alice.get("/api/friends/search?q=ali").get_json()["users"]
    assert [u["username"] for u in users] == ["alicia"]
    assert users[0]["friendship_status"] is None


def test_feed_redacts_by_owner_privacy(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")
    befriend(alice, bob, "bob")

    resp = bob.patch("/api/settings/privacy", json={"show_exercise_names": False})
    assert resp.status_code == 200

    _complete(bob, make_workout(bob, sets_per_exercise=(2, 1)))

    body = alice.get("/api/friends/feed").get_json()
    assert body["has_more"] is False
    (activity,) = body["activities"]
    assert activity["type"] == "WORKOUT_COMPLETED"
    assert activity["user"]["username"] == "bob"

    data = activity["data"]
    assert "exercises" not in data
    assert "topExercise" not in data
    assert data["setsCompleted"] == 3
    assert data["exerciseCount"] == 2
    assert "completedAt" in data
    assert len(data["sets"]) == 2


def test_feed_hides_details(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")
    befriend(alice, bob, "bob")
    bob.patch("/api/settings/privacy", json={"show_workout_details": False})

    _complete(bob, make_workout(bob))

    data = alice.get("/api/friends/feed").get_json()["activities"][0]["data"]
    assert not {"exercises", "sets", "weights"} & data.keys()
    assert data["topExercise"] == "Exercise 1"


def test_feed_pagination_and_strangers(make_client):
    alice, _ = make_client("alice")
    bob, _ = make_client("bob")
    carol, _ = make_client("carol")
    befriend(bob, alice, "alice")

    for day in ("2030-01-07", "2030-01-08", "2030-01-09"):
        _complete(bob, make_workout(bob, day=day))
    _complete(carol, make_workout(carol))

    page = alice.get("/api/friends/feed?limit=2").get_json()
    assert len(page["activities"]) == 2
    assert page["has_more"] is True
    assert {a["user"]["username"] for a in page["activities"]} == {"bob"}

    rest = alice.get("/api/friends/feed?limit=2&offset=2").get_json()
    assert len(rest["activities"]) == 1
    assert rest["has_more"] is False

    assert carol.get("/api/friends/feed").get_json() == {"activities": [], "has_more": False}
