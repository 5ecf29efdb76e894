from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

class Song(SQLModel, table=True):
    __tablename__ = "songs"
    """
    楽曲モデル。
    audio_path (ローカル保存) か stream_url (外部参照) の少なくとも一方を持つ。
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # メタデータ
    title: str = Field(index=True)
    artist: str = Field(index=True)
    album: Optional[str] = None
    genre: Optional[str] = Field(default=None, index=True)
    duration: Optional[int] = None

    # 再生ソース (UPLOAD_DIR からの相対パス)
    audio_path: Optional[str] = None
    stream_url: Optional[str] = None
    cover_path: Optional[str] = None
    is_offline: bool = Field(default=False)

    owner_id: int = Field(index=True)
    plays: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.now, index=True)
