from typing import Any, Dict, List, Optional, Tuple
from sqlmodel import Session, select, or_, col, desc, func
from sqlalchemy import text

from domain.models.song import Song
from infra.database.connection import write_transaction

class SongRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, song_id: int) -> Optional[Song]:
        return self.session.get(Song, song_id)

    def exists(self, song_id: int) -> bool:
        return self.session.exec(select(Song.id).where(Song.id == song_id)).first() is not None

    def _apply_search_conditions(
        self,
        query,
        genre: Optional[str] = None,
        artist: Optional[str] = None,
        search: Optional[str] = None
    ):
        if genre:
            query = query.where(Song.genre == genre)
        if artist:
            query = query.where(col(Song.artist).ilike(f"%{artist}%"))
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                col(Song.title).ilike(pattern),
                col(Song.artist).ilike(pattern),
                col(Song.album).ilike(pattern)
            ))
        return query

    def search(
        self,
        genre: Optional[str] = None,
        artist: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Song], int]:
        query = self._apply_search_conditions(select(Song), genre, artist, search)
        query = query.order_by(desc(Song.created_at), desc(Song.id)).offset(offset).limit(limit)
        songs = self.session.exec(query).all()

        count_query = self._apply_search_conditions(select(func.count()).select_from(Song), genre, artist, search)
        total = self.session.exec(count_query).one()
        return songs, total

    def create(self, song: Song) -> Song:
        with write_transaction(self.session):
            self.session.add(song)
            self.session.commit()
        self.session.refresh(song)
        return song

    def update(self, song: Song, changes: Dict[str, Any]) -> Song:
        """changes はロック内で適用する (ロック前に変更すると古いスナップショットで書き込まれる)"""
        with write_transaction(self.session):
            for key, value in changes.items():
                setattr(song, key, value)
            self.session.add(song)
            self.session.commit()
        self.session.refresh(song)
        return song

    def delete(self, song: Song):
        """楽曲と、それを参照するプレイリスト・お気に入りの行を同一トランザクションで削除する"""
        params = {"song_id": song.id}
        with write_transaction(self.session):
            conn = self.session.connection()
            conn.execute(text("DELETE FROM playlist_songs WHERE song_id = :song_id"), params)
            conn.execute(text("DELETE FROM favorites WHERE song_id = :song_id"), params)
            conn.execute(text("DELETE FROM songs WHERE id = :song_id"), params)
            self.session.commit()
        self.session.expunge(song)

    def increment_plays(self, song_id: int) -> Optional[int]:
        """再生回数をアトミックに +1 し、更新後の値を返す。存在しない場合は None"""
        with write_transaction(self.session):
            row = self.session.connection().execute(
                text("UPDATE songs SET plays = plays + 1 WHERE id = :song_id RETURNING plays"),
                {"song_id": song_id}
            ).fetchone()
            self.session.commit()
        return row[0] if row else None

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(Song)).one()

    def top_by_plays(self, limit: int = 10) -> List[Song]:
        return self.session.exec(select(Song).order_by(desc(Song.plays), Song.id).limit(limit)).all()
