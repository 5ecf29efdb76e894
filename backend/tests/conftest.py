import io
import os
import sys
from typing import Generator, Optional

import pytest
from sqlmodel import Session

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from config import Settings
from domain.models.song import Song
from infra.database.connection import get_session
from infra.storage import AUDIO_DIR, IMAGE_DIR

@pytest.fixture(name="settings")
def settings_fixture(tmp_path) -> Settings:
    """テストごとに独立したデータディレクトリ (DB・アップロード先) を使う"""
    return Settings(
        USER_DATA_DIR=str(tmp_path / "data"),
        JWT_SECRET="test-secret",
        STREAM_CHUNK_SIZE=64,
    )

@pytest.fixture(name="app")
def app_fixture(settings: Settings):
    from main import create_app
    return create_app(settings)

@pytest.fixture(name="client")
def client_fixture(app) -> Generator:
    """FastAPIのTestClientを提供する (lifespan で DB とストレージが初期化される)"""
    from fastapi.testclient import TestClient
    with TestClient(app) as client:
        yield client

@pytest.fixture(name="database")
def database_fixture(client):
    return client.app.state.database

@pytest.fixture(name="storage")
def storage_fixture(client):
    return client.app.state.storage

@pytest.fixture(name="session")
def session_fixture(client, database) -> Generator[Session, None, None]:
    """テストとAPIで同じセッションを共有し、DBセッションをDIで差し替える"""
    with database.session() as session:
        client.app.dependency_overrides[get_session] = lambda: session
        yield session
    client.app.dependency_overrides.clear()

@pytest.fixture(autouse=True)
def mock_external_deps(mocker):
    """
    外部ライブラリをグローバルにモック化する。
    テスト用の音声ファイルはダミーバイト列なので、タグ読み取りは空の結果を返す。
    """
    tag = mocker.Mock(title=None, artist=None, album=None, genre=None, duration=None)
    return mocker.patch("tinytag.TinyTag.get", return_value=tag)

@pytest.fixture
def register_user(client):
    """ユーザーを登録し (user_id, Authorization ヘッダー) を返すファクトリ"""
    counter = {"n": 0}

    def _register(username: Optional[str] = None):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        response = client.post("/api/auth/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret123"
        })
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}

    return _register

@pytest.fixture
def make_song(session: Session, storage):
    """楽曲レコードを直接作成するファクトリ。audio/cover を渡すとストレージにも保存する"""
    def _make(owner_id: int, title: str = "Song", audio: Optional[bytes] = None, cover: Optional[bytes] = None, **fields):
        audio_path = storage.save(AUDIO_DIR, f"{title}.mp3", io.BytesIO(audio)) if audio is not None else None
        cover_path = storage.save(IMAGE_DIR, f"{title}.jpg", io.BytesIO(cover)) if cover is not None else None
        fields.setdefault("artist", "Artist")
        if audio_path is None:
            fields.setdefault("stream_url", "https://example.com/stream")
        song = Song(title=title, owner_id=owner_id, audio_path=audio_path, cover_path=cover_path, **fields)
        session.add(song)
        session.commit()
        session.refresh(song)
        return song

    return _make
