from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlmodel import Session

from api.dependencies import get_current_user_id, get_storage
from api.schemas.common import MessageResponse
from api.schemas.song import SongCreate, SongPage, SongRead, SongUpdate
from app.services.song_app_service import SongAppService
from app.services.uploads import IncomingFile
from infra.database.connection import get_session
from infra.storage import MediaStorage

router = APIRouter()

def to_incoming(upload: Optional[UploadFile]) -> Optional[IncomingFile]:
    """multipart で空のファイル欄が送られた場合は None として扱う"""
    if upload is None or not upload.filename:
        return None
    return IncomingFile(filename=upload.filename, content_type=upload.content_type, stream=upload.file)

@router.get("/api/songs", response_model=SongPage)
def get_songs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    genre: Optional[str] = None,
    artist: Optional[str] = None,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = SongAppService(session, storage)
    return service.get_songs(page=page, limit=limit, genre=genre, artist=artist, search=search)

@router.get("/api/songs/{song_id}", response_model=SongRead)
def get_song(
    song_id: int,
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = SongAppService(session, storage)
    return service.get_song(song_id)

@router.post("/api/songs", response_model=SongRead, status_code=201)
def create_song(
    title: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    album: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    duration: Optional[int] = Form(None, ge=0),
    stream_url: Optional[str] = Form(None),
    is_offline: bool = Form(False),
    audio: Optional[UploadFile] = File(None),
    cover: Optional[UploadFile] = File(None),
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    """
    楽曲を登録する。音声ファイル (audio) か stream_url のどちらかが必須。
    タイトル等が省略された場合は音声ファイルのタグから補完する。
    """
    data = SongCreate(
        title=title,
        artist=artist,
        album=album,
        genre=genre,
        duration=duration,
        stream_url=stream_url,
        is_offline=is_offline
    )
    service = SongAppService(session, storage)
    return service.create_song(user_id, data, audio=to_incoming(audio), cover=to_incoming(cover))

@router.put("/api/songs/{song_id}", response_model=SongRead)
def update_song(
    song_id: int,
    update: SongUpdate,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = SongAppService(session, storage)
    return service.update_song(user_id, song_id, update)

@router.delete("/api/songs/{song_id}", response_model=MessageResponse)
def delete_song(
    song_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    service = SongAppService(session, storage)
    service.delete_song(user_id, song_id)
    return {"message": "Song deleted"}
