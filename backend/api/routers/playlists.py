from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlmodel import Session

from api.dependencies import get_current_user_id, get_optional_user_id, get_storage
from api.routers.songs import to_incoming
from api.schemas.common import MessageResponse
from api.schemas.playlist import PlaylistRead, PlaylistSongAdd, PlaylistUpdate
from app.services.playlist_app_service import PlaylistAppService
from app.services.resource_locator import ResourceLocator
from infra.database.connection import get_session
from infra.storage import MediaStorage

router = APIRouter()

@router.get("/api/playlists", response_model=List[PlaylistRead])
def get_playlists(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    """ログインユーザーのプレイリスト一覧 (新しい順)"""
    service = PlaylistAppService(session, storage)
    return service.get_playlists(user_id)

@router.post("/api/playlists", response_model=PlaylistRead, status_code=201)
def create_playlist(
    name: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    is_public: bool = Form(True),
    cover: Optional[UploadFile] = File(None),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = PlaylistAppService(session, storage)
    return service.create_playlist(user_id, name, description, is_public, cover=to_incoming(cover))

@router.get("/api/playlists/{playlist_id}", response_model=PlaylistRead)
def get_playlist(
    playlist_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = PlaylistAppService(session, storage)
    return service.get_playlist(user_id, playlist_id)

@router.put("/api/playlists/{playlist_id}", response_model=PlaylistRead)
def update_playlist(
    playlist_id: int,
    update: PlaylistUpdate,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = PlaylistAppService(session, storage)
    return service.update_playlist(user_id, playlist_id, update)

@router.delete("/api/playlists/{playlist_id}", response_model=MessageResponse)
def delete_playlist(
    playlist_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = PlaylistAppService(session, storage)
    service.delete_playlist(user_id, playlist_id)
    return {"message": "Playlist deleted"}

@router.post("/api/playlists/{playlist_id}/songs", response_model=PlaylistRead)
def add_playlist_song(
    playlist_id: int,
    req: PlaylistSongAdd,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    """曲を末尾に追加する。既に含まれている曲は無視される"""
    service = PlaylistAppService(session, storage)
    return service.add_song(user_id, playlist_id, req.song_id)

@router.delete("/api/playlists/{playlist_id}/songs/{song_id}", response_model=PlaylistRead)
def remove_playlist_song(
    playlist_id: int,
    song_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = PlaylistAppService(session, storage)
    return service.remove_song(user_id, playlist_id, song_id)

@router.get("/api/playlists/{playlist_id}/cover")
def get_playlist_cover(
    playlist_id: int,
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    resource = ResourceLocator(session, storage).locate_playlist_cover(playlist_id)
    return FileResponse(resource.path, media_type=resource.media_type)
