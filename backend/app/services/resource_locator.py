from dataclasses import dataclass
from sqlmodel import Session

from domain.errors import NotFound
from infra.repositories.playlist_repository import PlaylistRepository
from infra.repositories.song_repository import SongRepository
from infra.storage import MediaStorage
from utils.filesystem import guess_media_type

DEFAULT_AUDIO_TYPE = "audio/mpeg"
DEFAULT_IMAGE_TYPE = "image/jpeg"

@dataclass(frozen=True)
class MediaResource:
    path: str
    total_length: int
    media_type: str

class ResourceLocator:
    """
    楽曲・カバー画像の ID をディスク上のファイルとサイズに解決する。
    サイズはファイルのメタデータから取得し、中身は読まない。
    """

    def __init__(self, session: Session, storage: MediaStorage):
        self.storage = storage
        self.song_repository = SongRepository(session)
        self.playlist_repository = PlaylistRepository(session)

    def locate_song_audio(self, song_id: int) -> MediaResource:
        song = self.song_repository.get_by_id(song_id)
        if not song or not song.audio_path:
            raise NotFound("Audio file not found")
        return self._locate(song.audio_path, DEFAULT_AUDIO_TYPE, "Audio file not found")

    def locate_song_cover(self, song_id: int) -> MediaResource:
        song = self.song_repository.get_by_id(song_id)
        if not song or not song.cover_path:
            raise NotFound("Cover not found")
        return self._locate(song.cover_path, DEFAULT_IMAGE_TYPE, "Cover not found")

    def locate_playlist_cover(self, playlist_id: int) -> MediaResource:
        playlist = self.playlist_repository.get_by_id(playlist_id)
        if not playlist or not playlist.cover_path:
            raise NotFound("Cover not found")
        return self._locate(playlist.cover_path, DEFAULT_IMAGE_TYPE, "Cover not found")

    def _locate(self, name: str, default_type: str, message: str) -> MediaResource:
        # レコードはあるがファイルが消えている場合も 404 として扱う
        path = self.storage.resolve(name)
        if path is None:
            raise NotFound(message)
        try:
            size = self.storage.size(name)
        except FileNotFoundError:
            raise NotFound(message)
        # 拡張子から推定した型が音声/画像でなければ既定の型を使う (.bin や .txt で保存された場合)
        media_type = guess_media_type(path, default_type)
        if media_type.split("/")[0] != default_type.split("/")[0]:
            media_type = default_type
        return MediaResource(path=path, total_length=size, media_type=media_type)
