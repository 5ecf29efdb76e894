from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.schemas.song import SongRead

class PlaylistRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    owner_id: int
    is_public: bool
    created_at: datetime
    songs: List[SongRead] = []

class PlaylistUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    is_public: Optional[bool] = None

class PlaylistSongAdd(BaseModel):
    song_id: int
