import jwt

def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "username": "alice",
        "email": "Alice@Example.com",
        "password": "wonderland"
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["is_premium"] is False
    assert "password_hash" not in data["user"]

    payload = jwt.decode(data["token"], "test-secret", algorithms=["HS256"])
    assert payload["sub"] == str(data["user"]["id"])

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wonderland"})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == data["user"]["id"]

def test_login_failures(client, register_user):
    register_user("bob")
    response = client.post("/api/auth/login", json={"email": "bob@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}

    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401

def test_duplicate_registration(client, register_user):
    register_user("carol")
    response = client.post("/api/auth/register", json={
        "username": "carol",
        "email": "other@example.com",
        "password": "secret123"
    })
    assert response.status_code == 409

    response = client.post("/api/auth/register", json={
        "username": "carol2",
        "email": "carol@example.com",
        "password": "secret123"
    })
    assert response.status_code == 409

def test_register_validation(client):
    response = client.post("/api/auth/register", json={"username": "ab", "email": "x@y.z", "password": "secret123"})
    assert response.status_code == 400
    response = client.post("/api/auth/register", json={"username": "dave", "email": "not-an-email", "password": "secret123"})
    assert response.status_code == 400
    response = client.post("/api/auth/register", json={"username": "dave", "email": "d@example.com", "password": "123"})
    assert response.status_code == 400

def test_invalid_tokens_are_rejected(client, settings, register_user):
    user_id, _ = register_user()

    response = client.get("/api/favorites", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"

    forged = jwt.encode({"sub": str(user_id)}, "wrong-secret", algorithm="HS256")
    response = client.get("/api/favorites", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401

    expired = jwt.encode({"sub": str(user_id), "exp": 1}, settings.JWT_SECRET, algorithm="HS256")
    response = client.get("/api/favorites", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
