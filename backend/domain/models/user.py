from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    is_premium: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.now)

class Favorite(SQLModel, table=True):
    """ユーザーのお気に入り集合 (user_id, song_id) の組で重複なし"""
    __tablename__ = "favorites"
    user_id: int = Field(primary_key=True)
    song_id: int = Field(primary_key=True)
    created_at: datetime = Field(default_factory=datetime.now)
