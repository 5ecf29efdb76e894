from typing import Optional
from fastapi import APIRouter, Depends, Header
from fastapi.responses import FileResponse
from sqlmodel import Session

from api.dependencies import get_settings, get_storage
from api.schemas.song import PlayReport
from api.streaming import MediaStreamResponse
from app.services.resource_locator import ResourceLocator
from app.services.song_app_service import SongAppService
from config import Settings
from domain.services.range_negotiator import negotiate
from infra.database.connection import get_session
from infra.storage import MediaStorage

router = APIRouter()

@router.get("/media/{song_id}")
def stream_media(
    song_id: int,
    range_header: Optional[str] = Header(None, alias="Range"),
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings)
):
    """
    音声ファイルをストリーム再生用に提供する。
    Range ヘッダーがあれば 206 で指定範囲のみを返す。
    """
    resource = ResourceLocator(session, storage).locate_song_audio(song_id)
    plan = negotiate(range_header, resource.total_length)
    return MediaStreamResponse(plan, resource, chunk_size=settings.STREAM_CHUNK_SIZE)

@router.get("/media/{song_id}/cover")
def get_song_cover(
    song_id: int,
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    resource = ResourceLocator(session, storage).locate_song_cover(song_id)
    return FileResponse(resource.path, media_type=resource.media_type)

@router.post("/media/{song_id}/play", response_model=PlayReport)
def record_play(
    song_id: int,
    session: Session = Depends(get_session),
    storage: MediaStorage = Depends(get_storage)
):
    """再生回数を記録する (認証不要)"""
    service = SongAppService(session, storage)
    plays = service.record_play(song_id)
    return {"message": "Play recorded", "plays": plays}
