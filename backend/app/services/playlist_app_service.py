from typing import List, Optional, Dict, Any
from sqlmodel import Session

from api.schemas.playlist import PlaylistUpdate
from app.services.song_app_service import song_to_dict
from app.services.uploads import IncomingFile, store_image, discard
from domain.errors import Forbidden, NotFound
from domain.models.playlist import Playlist
from domain.services.ownership_guard import Decision, authorize, ensure_owner
from infra.repositories.playlist_repository import PlaylistRepository
from infra.repositories.song_repository import SongRepository
from infra.storage import MediaStorage
from utils.logger import get_logger

logger = get_logger(__name__)

class PlaylistAppService:
    def __init__(self, session: Session, storage: MediaStorage):
        self.session = session
        self.storage = storage
        self.repository = PlaylistRepository(session)
        self.song_repository = SongRepository(session)

    def _to_dict(self, playlist: Playlist) -> Dict[str, Any]:
        p_dict = playlist.model_dump(exclude={"cover_path"})
        p_dict["cover_url"] = f"/api/playlists/{playlist.id}/cover" if playlist.cover_path else None
        p_dict["songs"] = [song_to_dict(s) for s in self.repository.get_songs(playlist.id)]
        return p_dict

    def _get_owned(self, identity: int, playlist_id: int) -> Playlist:
        playlist = self.repository.get_by_id(playlist_id)
        if not playlist:
            raise NotFound("Playlist not found")
        ensure_owner(identity, playlist.owner_id)
        return playlist

    def get_playlists(self, owner_id: int) -> List[Dict[str, Any]]:
        return [self._to_dict(p) for p in self.repository.find_by_owner(owner_id)]

    def get_playlist(self, identity: Optional[int], playlist_id: int) -> Dict[str, Any]:
        playlist = self.repository.get_by_id(playlist_id)
        if not playlist:
            raise NotFound("Playlist not found")
        # 非公開プレイリストは所有者のみ閲覧可能
        if not playlist.is_public and authorize(identity, playlist.owner_id) is Decision.DENY:
            raise Forbidden()
        return self._to_dict(playlist)

    def create_playlist(
        self,
        owner_id: int,
        name: str,
        description: Optional[str] = None,
        is_public: bool = True,
        cover: Optional[IncomingFile] = None
    ) -> Dict[str, Any]:
        cover_path = store_image(self.storage, cover) if cover else None
        try:
            playlist = self.repository.create(Playlist(
                name=name,
                description=description,
                cover_path=cover_path,
                owner_id=owner_id,
                is_public=is_public
            ))
        except Exception:
            discard(self.storage, [cover_path])
            raise

        logger.info(f"User {owner_id} created playlist {playlist.id}")
        return self._to_dict(playlist)

    def update_playlist(self, identity: int, playlist_id: int, update: PlaylistUpdate) -> Dict[str, Any]:
        playlist = self._get_owned(identity, playlist_id)

        changes = {
            key: value for key, value in update.model_dump(exclude_unset=True).items()
            if not (key in ("name", "is_public") and value is None)
        }
        return self._to_dict(self.repository.update(playlist, changes))

    def delete_playlist(self, identity: int, playlist_id: int):
        playlist = self._get_owned(identity, playlist_id)
        cover_path = playlist.cover_path

        self.repository.delete(playlist)
        logger.info(f"User {identity} deleted playlist {playlist_id}")

        try:
            self.storage.delete(cover_path)
        except OSError as e:
            logger.error(f"Failed to release {cover_path} for playlist {playlist_id}: {e}")

    def add_song(self, identity: int, playlist_id: int, song_id: int) -> Dict[str, Any]:
        playlist = self._get_owned(identity, playlist_id)
        if not self.song_repository.exists(song_id):
            raise NotFound("Song not found")

        self.repository.add_song(playlist.id, song_id)
        self.session.refresh(playlist)
        return self._to_dict(playlist)

    def remove_song(self, identity: int, playlist_id: int, song_id: int) -> Dict[str, Any]:
        playlist = self._get_owned(identity, playlist_id)
        self.repository.remove_song(playlist.id, song_id)
        self.session.refresh(playlist)
        return self._to_dict(playlist)
