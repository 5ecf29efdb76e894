from concurrent.futures import ThreadPoolExecutor
from sqlmodel import select

from domain.models.playlist import PlaylistSong
from domain.models.song import Song
from domain.models.user import Favorite

THREADS = 4
ROUNDS = 20

def add_song_row(database, owner_id: int, title: str) -> int:
    with database.session() as s:
        song = Song(title=title, artist="Artist", stream_url="https://example.com/s", owner_id=owner_id)
        s.add(song)
        s.commit()
        s.refresh(song)
        return song.id

def run_concurrently(func, count: int):
    with ThreadPoolExecutor(max_workers=THREADS) as executor:
        return list(executor.map(func, range(count)))

def test_concurrent_favorite_adds(client, database, register_user):
    """同じお気に入りを同時に追加しても全リクエストが成功し、1件だけ残る"""
    user_id, headers = register_user()

    for round_no in range(ROUNDS):
        song_id = add_song_row(database, user_id, f"Fav {round_no}")
        statuses = run_concurrently(
            lambda _: client.post(f"/api/favorites/{song_id}", headers=headers).status_code,
            THREADS
        )
        assert statuses == [200] * THREADS

    with database.session() as s:
        rows = s.exec(select(Favorite).where(Favorite.user_id == user_id)).all()
        assert len(rows) == ROUNDS

def test_concurrent_playlist_adds(client, database, register_user):
    user_id, headers = register_user()
    playlist = client.post("/api/playlists", data={"name": "Race"}, headers=headers).json()
    url = f"/api/playlists/{playlist['id']}/songs"

    song_ids = [add_song_row(database, user_id, f"Track {i}") for i in range(ROUNDS)]
    for song_id in song_ids:
        statuses = run_concurrently(
            lambda _: client.post(url, json={"song_id": song_id}, headers=headers).status_code,
            THREADS
        )
        assert statuses == [200] * THREADS

    with database.session() as s:
        rows = s.exec(select(PlaylistSong).where(PlaylistSong.playlist_id == playlist["id"])).all()
    assert sorted(r.song_id for r in rows) == song_ids
    # 位置は重複せず連番
    assert sorted(r.position for r in rows) == list(range(ROUNDS))

def test_concurrent_edits_on_different_songs(client, database, register_user):
    user_id, headers = register_user()
    playlist = client.post("/api/playlists", data={"name": "Parallel"}, headers=headers).json()
    url = f"/api/playlists/{playlist['id']}/songs"
    song_ids = [add_song_row(database, user_id, f"Parallel {i}") for i in range(8)]

    statuses = run_concurrently(
        lambda i: client.post(url, json={"song_id": song_ids[i]}, headers=headers).status_code,
        len(song_ids)
    )
    assert statuses == [200] * len(song_ids)

    songs = client.get(f"/api/playlists/{playlist['id']}", headers=headers).json()["songs"]
    assert sorted(s["id"] for s in songs) == song_ids

def test_delete_while_plays_are_reported(client, database, register_user):
    """再生記録と所有者による削除が競合しても削除は失われない"""
    user_id, headers = register_user()

    for round_no in range(5):
        song_id = add_song_row(database, user_id, f"Doomed {round_no}")

        def act(i):
            if i == THREADS:
                return client.delete(f"/api/songs/{song_id}", headers=headers).status_code
            return client.post(f"/media/{song_id}/play").status_code

        statuses = run_concurrently(act, THREADS + 1)
        assert statuses[THREADS] == 200
        assert set(statuses[:THREADS]) <= {200, 404}
        assert client.get(f"/api/songs/{song_id}").status_code == 404
