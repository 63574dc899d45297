"""HTTP tests for the tutor directory."""


def test_list_tutors_with_filters(client, make_tutor):
    make_tutor(name="Ada", email="ada@example.com", subjects=["Math"], rating=4.756)
    make_tutor(name="Bo", email="bo@example.com", subjects=["Chemistry"], rating=3.0)

    r = client.get("/tutors")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["count"] == 2
    assert [t["name"] for t in data["tutors"]] == ["Ada", "Bo"]
    assert data["tutors"][0]["rating"] == 4.76
    assert data["tutors"][0]["hourlyRate"] == 40.0

    r = client.get("/tutors", params={"subject": "math"})
    assert [t["name"] for t in r.json()["data"]["tutors"]] == ["Ada"]


def test_sort_by_total_sessions_snake_case(client, make_tutor):
    make_tutor(name="Ada", email="ada@example.com", rating=4.9, total_sessions=2)
    make_tutor(name="Bo", email="bo@example.com", rating=3.5, total_sessions=30)

    r = client.get("/tutors", params={"sort": "total_sessions"})
    assert r.status_code == 200
    assert [t["name"] for t in r.json()["data"]["tutors"]] == ["Bo", "Ada"]


def test_malformed_filters_are_400(client):
    assert client.get("/tutors", params={"min_rating": "abc"}).status_code == 400
    assert client.get("/tutors", params={"sort": "price"}).status_code == 400
    assert client.get("/tutors", params={"limit": 0}).status_code == 400


def test_get_tutor(client, test_tutor):
    r = client.get(f"/tutors/{test_tutor.id}")
    assert r.status_code == 200
    assert r.json()["data"]["tutor"]["subjects"] == ["Math", "Physics"]

    r = client.get("/tutors/01HZZZZZZZZZZZZZZZZZZZZZZZ")
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"
