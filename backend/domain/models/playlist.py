from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

class Playlist(SQLModel, table=True):
    __tablename__ = "playlists"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    cover_path: Optional[str] = None
    owner_id: int = Field(index=True)
    is_public: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.now)

class PlaylistSong(SQLModel, table=True):
    __tablename__ = "playlist_songs"
    playlist_id: int = Field(primary_key=True)
    song_id: int = Field(primary_key=True)
    position: int
    added_at: datetime = Field(default_factory=datetime.now)
