import math
from typing import List, Optional, Dict, Any
from sqlmodel import Session

from api.schemas.song import SongCreate, SongUpdate
from app.services.uploads import IncomingFile, store_audio, store_image, discard
from domain.errors import InvalidInput, NotFound
from domain.models.song import Song
from domain.services.ownership_guard import ensure_owner
from infra.repositories.song_repository import SongRepository
from infra.storage import MediaStorage
from utils.logger import get_logger
from utils.metadata import probe_audio, title_from_filename

logger = get_logger(__name__)

def song_to_dict(song: Song) -> Dict[str, Any]:
    s_dict = song.model_dump(exclude={"audio_path", "cover_path"})
    s_dict["audio_url"] = f"/media/{song.id}" if song.audio_path else None
    s_dict["cover_url"] = f"/media/{song.id}/cover" if song.cover_path else None
    return s_dict

class SongAppService:
    def __init__(self, session: Session, storage: MediaStorage):
        self.session = session
        self.storage = storage
        self.repository = SongRepository(session)

    def get_songs(
        self,
        page: int = 1,
        limit: int = 20,
        genre: Optional[str] = None,
        artist: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        songs, total = self.repository.search(
            genre=genre,
            artist=artist,
            search=search,
            limit=limit,
            offset=(page - 1) * limit
        )
        return {
            "songs": [song_to_dict(s) for s in songs],
            "total_pages": math.ceil(total / limit),
            "current_page": page,
            "total": total
        }

    def get_song(self, song_id: int) -> Dict[str, Any]:
        song = self.repository.get_by_id(song_id)
        if not song:
            raise NotFound("Song not found")
        return song_to_dict(song)

    def create_song(
        self,
        owner_id: int,
        data: SongCreate,
        audio: Optional[IncomingFile] = None,
        cover: Optional[IncomingFile] = None
    ) -> Dict[str, Any]:
        if audio is None and not data.stream_url:
            raise InvalidInput("Audio file or stream URL required")

        stored: List[Optional[str]] = []
        try:
            audio_path = store_audio(self.storage, audio) if audio else None
            stored.append(audio_path)
            cover_path = store_image(self.storage, cover) if cover else None
            stored.append(cover_path)

            # フォームで省略された項目は音声ファイルのタグから補完する
            tags = probe_audio(self.storage.path(audio_path)) if audio_path else {}
            title = data.title or tags.get("title") or (title_from_filename(audio.filename) if audio else None)
            artist = data.artist or tags.get("artist")
            if not title or not artist:
                raise InvalidInput("Title and artist are required")

            song = Song(
                title=title,
                artist=artist,
                album=data.album or tags.get("album"),
                genre=data.genre or tags.get("genre"),
                duration=data.duration if data.duration is not None else tags.get("duration"),
                audio_path=audio_path,
                stream_url=data.stream_url or None,
                cover_path=cover_path,
                is_offline=data.is_offline,
                owner_id=owner_id
            )
            song = self.repository.create(song)
        except Exception:
            discard(self.storage, stored)
            raise

        logger.info(f"User {owner_id} created song {song.id}")
        return song_to_dict(song)

    def update_song(self, identity: int, song_id: int, update: SongUpdate) -> Dict[str, Any]:
        song = self.repository.get_by_id(song_id)
        if not song:
            raise NotFound("Song not found")
        ensure_owner(identity, song.owner_id)

        changes = update.model_dump(exclude_unset=True)
        for key in ("title", "artist", "is_offline"):
            if key in changes and changes[key] is None:
                raise InvalidInput(f"{key} cannot be null")
        if "stream_url" in changes:
            changes["stream_url"] = changes["stream_url"] or None
            if not song.audio_path and not changes["stream_url"]:
                raise InvalidInput("Song must keep an audio file or a stream URL")

        return song_to_dict(self.repository.update(song, changes))

    def delete_song(self, identity: int, song_id: int):
        song = self.repository.get_by_id(song_id)
        if not song:
            raise NotFound("Song not found")
        ensure_owner(identity, song.owner_id)

        owned_files = [song.audio_path, song.cover_path]
        self.repository.delete(song)
        logger.info(f"User {identity} deleted song {song_id}")

        for name in owned_files:
            try:
                self.storage.delete(name)
            except OSError as e:
                logger.error(f"Failed to release {name} for song {song_id}: {e}")

    def record_play(self, song_id: int) -> int:
        plays = self.repository.increment_plays(song_id)
        if plays is None:
            raise NotFound("Song not found")
        logger.debug(f"Song {song_id} played ({plays})")
        return plays
