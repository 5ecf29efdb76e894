from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class SongRead(BaseModel):
    id: int
    title: str
    artist: str
    album: Optional[str] = None
    genre: Optional[str] = None
    duration: Optional[int] = None
    audio_url: Optional[str] = None
    stream_url: Optional[str] = None
    cover_url: Optional[str] = None
    is_offline: bool = False
    owner_id: int
    plays: int = 0
    created_at: datetime

class SongPage(BaseModel):
    songs: List[SongRead]
    total_pages: int
    current_page: int
    total: int

class SongCreate(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    stream_url: Optional[str] = None
    is_offline: bool = False

class SongUpdate(BaseModel):
    """更新可能なフィールドのみ。owner_id や plays などは受け付けない"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    artist: Optional[str] = Field(default=None, min_length=1)
    album: Optional[str] = None
    genre: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    stream_url: Optional[str] = None
    is_offline: Optional[bool] = None

class PlayReport(BaseModel):
    message: str
    plays: int
