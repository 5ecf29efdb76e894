from typing import Dict, Any
from sqlmodel import Session

from app.services.song_app_service import song_to_dict
from infra.repositories.playlist_repository import PlaylistRepository
from infra.repositories.song_repository import SongRepository
from infra.repositories.user_repository import UserRepository

class StatsAppService:
    def __init__(self, session: Session):
        self.session = session
        self.song_repository = SongRepository(session)
        self.playlist_repository = PlaylistRepository(session)
        self.user_repository = UserRepository(session)

    def get_stats(self, top_limit: int = 10) -> Dict[str, Any]:
        return {
            "total_songs": self.song_repository.count(),
            "total_playlists": self.playlist_repository.count(),
            "total_users": self.user_repository.count(),
            "top_songs": [song_to_dict(s) for s in self.song_repository.top_by_plays(top_limit)]
        }
