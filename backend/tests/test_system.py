def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["message"]

def test_health_check(client):
    """APIが生存しているか確認"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "duckdb_version" in response.json()

def test_stats(client, register_user, make_song):
    user_id, headers = register_user()
    register_user()
    quiet = make_song(user_id, title="Quiet")
    loud = make_song(user_id, title="Loud")
    for _ in range(3):
        client.post(f"/media/{loud.id}/play")
    client.post(f"/media/{quiet.id}/play")
    client.post("/api/playlists", data={"name": "Stats"}, headers=headers)

    response = client.get("/api/stats", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_songs"] == 2
    assert data["total_playlists"] == 1
    assert data["total_users"] == 2
    assert [s["title"] for s in data["top_songs"]] == ["Loud", "Quiet"]

def test_stats_requires_auth(client):
    assert client.get("/api/stats").status_code == 401

def test_database_reopens_existing_file(settings):
    """同じデータディレクトリで再起動してもデータが残る"""
    from fastapi.testclient import TestClient
    from main import create_app

    with TestClient(create_app(settings)) as client:
        response = client.post("/api/auth/register", json={
            "username": "persist",
            "email": "persist@example.com",
            "password": "secret123"
        })
        assert response.status_code == 201

    with TestClient(create_app(settings)) as client:
        response = client.post("/api/auth/login", json={"email": "persist@example.com", "password": "secret123"})
        assert response.status_code == 200
