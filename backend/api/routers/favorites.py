from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from api.dependencies import get_current_user_id
from api.schemas.common import MessageResponse
from api.schemas.song import SongRead
from app.services.favorite_app_service import FavoriteAppService
from infra.database.connection import get_session

router = APIRouter()

@router.get("/api/favorites", response_model=List[SongRead])
def get_favorites(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session)
):
    service = FavoriteAppService(session)
    return service.get_favorites(user_id)

@router.post("/api/favorites/{song_id}", response_model=MessageResponse)
def add_favorite(
    song_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session)
):
    service = FavoriteAppService(session)
    service.add_favorite(user_id, song_id)
    return {"message": "Added to favorites"}

@router.delete("/api/favorites/{song_id}", response_model=MessageResponse)
def remove_favorite(
    song_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session)
):
    service = FavoriteAppService(session)
    service.remove_favorite(user_id, song_id)
    return {"message": "Removed from favorites"}
