"""HTTP tests for registration, login and /me."""


def test_register_then_login(client):
    r = client.post(
        "/register",
        json={
            "name": "Tara",
            "email": "tara@example.com",
            "password": "secret123",
            "role": "tutor",
            "subjects": "Math, Physics",
            "experience": 4,
            "hourlyRate": 30,
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["data"]["user"]["role"] == "tutor"
    assert "hashedPassword" not in body["data"]["user"]

    r = client.post("/login", json={"email": "TARA@example.com", "password": "secret123"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["email"] == "tara@example.com"

    r = client.get("/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert r.status_code == 200
    assert r.json()["data"]["user"]["name"] == "Tara"


def test_register_duplicate_email(client, test_student):
    r = client.post(
        "/register",
        json={
            "name": "Again",
            "email": test_student.email,
            "password": "secret123",
            "role": "student",
        },
    )
    assert r.status_code == 409
    assert r.json()["code"] == "DUPLICATE_EMAIL"


def test_register_validation_is_400(client):
    r = client.post(
        "/register",
        json={"name": "X", "email": "x@example.com", "password": "secret123", "role": "admin"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"

    r = client.post("/register", json={"name": "X", "email": "nope", "password": "p", "role": "x"})
    assert r.status_code == 400


def test_login_failure(client, test_student):
    r = client.post("/login", json={"email": test_student.email, "password": "wrong-password"})
    assert r.status_code == 401
    body = r.json()
    assert body == {
        "success": False,
        "message": "Invalid email or password",
        "code": "AUTH_ERROR",
    }


def test_me_requires_token(client):
    assert client.get("/me").status_code == 401
    r = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["code"] == "AUTH_ERROR"
