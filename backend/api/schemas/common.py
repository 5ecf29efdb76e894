from typing import List
from pydantic import BaseModel

from api.schemas.song import SongRead

class MessageResponse(BaseModel):
    message: str

class LibraryStats(BaseModel):
    total_songs: int
    total_playlists: int
    total_users: int
    top_songs: List[SongRead]
