from typing import Any, Dict, List, Optional
from sqlmodel import Session, select, desc, func
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from domain.models.playlist import Playlist, PlaylistSong
from domain.models.song import Song
from infra.database.connection import write_transaction

class PlaylistRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_owner(self, owner_id: int) -> List[Playlist]:
        query = (
            select(Playlist)
            .where(Playlist.owner_id == owner_id)
            .order_by(desc(Playlist.created_at), desc(Playlist.id))
        )
        return self.session.exec(query).all()

    def get_by_id(self, playlist_id: int) -> Optional[Playlist]:
        return self.session.get(Playlist, playlist_id)

    def create(self, playlist: Playlist) -> Playlist:
        with write_transaction(self.session):
            self.session.add(playlist)
            self.session.commit()
        self.session.refresh(playlist)
        return playlist

    def update(self, playlist: Playlist, changes: Dict[str, Any]) -> Playlist:
        with write_transaction(self.session):
            for key, value in changes.items():
                setattr(playlist, key, value)
            self.session.add(playlist)
            self.session.commit()
        self.session.refresh(playlist)
        return playlist

    def delete(self, playlist: Playlist):
        params = {"playlist_id": playlist.id}
        with write_transaction(self.session):
            conn = self.session.connection()
            conn.execute(text("DELETE FROM playlist_songs WHERE playlist_id = :playlist_id"), params)
            conn.execute(text("DELETE FROM playlists WHERE id = :playlist_id"), params)
            self.session.commit()
        self.session.expunge(playlist)

    def get_songs(self, playlist_id: int) -> List[Song]:
        query = (
            select(Song)
            .join(PlaylistSong, PlaylistSong.song_id == Song.id)
            .where(PlaylistSong.playlist_id == playlist_id)
            .order_by(PlaylistSong.position)
        )
        return self.session.exec(query).all()

    def add_song(self, playlist_id: int, song_id: int):
        """末尾に追加する。既に含まれている場合は何もしない"""
        with write_transaction(self.session):
            try:
                self.session.connection().execute(text("""
                    INSERT INTO playlist_songs (playlist_id, song_id, position)
                    SELECT :playlist_id, :song_id, COALESCE(MAX(position), -1) + 1
                    FROM playlist_songs WHERE playlist_id = :playlist_id
                    ON CONFLICT (playlist_id, song_id) DO NOTHING
                """), {"playlist_id": playlist_id, "song_id": song_id})
                self.session.commit()
            except IntegrityError:
                # 既に追加済み
                self.session.rollback()

    def remove_song(self, playlist_id: int, song_id: int):
        with write_transaction(self.session):
            self.session.connection().execute(
                text("DELETE FROM playlist_songs WHERE playlist_id = :playlist_id AND song_id = :song_id"),
                {"playlist_id": playlist_id, "song_id": song_id}
            )
            self.session.commit()

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(Playlist)).one()
