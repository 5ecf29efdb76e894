from typing import List, Dict, Any
from sqlmodel import Session

from app.services.song_app_service import song_to_dict
from domain.errors import NotFound
from infra.repositories.song_repository import SongRepository
from infra.repositories.user_repository import UserRepository

class FavoriteAppService:
    """お気に入りは認証済みユーザー自身の集合なので、所有者は常に呼び出し元"""

    def __init__(self, session: Session):
        self.session = session
        self.repository = UserRepository(session)
        self.song_repository = SongRepository(session)

    def get_favorites(self, user_id: int) -> List[Dict[str, Any]]:
        return [song_to_dict(s) for s in self.repository.get_favorite_songs(user_id)]

    def add_favorite(self, user_id: int, song_id: int):
        if not self.song_repository.exists(song_id):
            raise NotFound("Song not found")
        self.repository.add_favorite(user_id, song_id)

    def remove_favorite(self, user_id: int, song_id: int):
        self.repository.remove_favorite(user_id, song_id)
