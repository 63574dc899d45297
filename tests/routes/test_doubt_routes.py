"""HTTP tests for doubts."""


def test_ask_and_answer(client, student_headers, tutor_headers, test_tutor):
    r = client.post(
        "/doubts",
        json={
            "tutorId": test_tutor.id,
            "subject": "Physics",
            "question": "Why is the sky blue?",
            "urgency": "urgent",
        },
        headers=student_headers,
    )
    assert r.status_code == 201
    doubt = r.json()["data"]["doubt"]
    assert doubt["status"] == "open"
    assert doubt["urgency"] == "urgent"

    r = client.post(
        f"/doubts/{doubt['id']}/reply",
        json={"reply": "Rayleigh scattering"},
        headers=tutor_headers,
    )
    assert r.status_code == 200
    answered = r.json()["data"]["doubt"]
    assert answered["status"] == "answered"
    assert answered["reply"] == "Rayleigh scattering"

    r = client.post(f"/doubts/{doubt['id']}/reply", json={"reply": "Again"}, headers=tutor_headers)
    assert r.status_code == 409
    assert r.json()["code"] == "ALREADY_ANSWERED"

    r = client.get("/doubts", headers=student_headers)
    assert r.json()["data"]["count"] == 1


def test_tutor_cannot_ask(client, tutor_headers, test_tutor):
    r = client.post(
        "/doubts",
        json={"tutorId": test_tutor.id, "subject": "Math", "question": "?"},
        headers=tutor_headers,
    )
    assert r.status_code == 403


def test_student_cannot_reply(client, student_headers, test_tutor):
    doubt_id = client.post(
        "/doubts",
        json={"tutorId": test_tutor.id, "subject": "Math", "question": "What is 2+2?"},
        headers=student_headers,
    ).json()["data"]["doubt"]["id"]

    r = client.post(f"/doubts/{doubt_id}/reply", json={"reply": "4"}, headers=student_headers)
    assert r.status_code == 403
