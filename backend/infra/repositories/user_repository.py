from typing import List, Optional
from sqlmodel import Session, select, or_, func
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from domain.errors import Conflict
from domain.models.user import User, Favorite
from domain.models.song import Song
from infra.database.connection import write_transaction

class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.email == email)).first()

    def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        query = select(User).where(or_(User.username == username, User.email == email))
        return self.session.exec(query).first()

    def create(self, user: User) -> User:
        with write_transaction(self.session):
            if self.find_by_username_or_email(user.username, user.email):
                raise Conflict("Username or email already exists")
            self.session.add(user)
            try:
                self.session.commit()
            except IntegrityError:
                self.session.rollback()
                raise Conflict("Username or email already exists")
        self.session.refresh(user)
        return user

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(User)).one()

    # --- Favorites ---

    def get_favorite_songs(self, user_id: int) -> List[Song]:
        query = (
            select(Song)
            .join(Favorite, Favorite.song_id == Song.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at, Song.id)
        )
        return self.session.exec(query).all()

    def add_favorite(self, user_id: int, song_id: int):
        with write_transaction(self.session):
            try:
                self.session.connection().execute(text("""
                    INSERT INTO favorites (user_id, song_id) VALUES (:user_id, :song_id)
                    ON CONFLICT (user_id, song_id) DO NOTHING
                """), {"user_id": user_id, "song_id": song_id})
                self.session.commit()
            except IntegrityError:
                # 既に登録済み
                self.session.rollback()

    def remove_favorite(self, user_id: int, song_id: int):
        with write_transaction(self.session):
            self.session.connection().execute(
                text("DELETE FROM favorites WHERE user_id = :user_id AND song_id = :song_id"),
                {"user_id": user_id, "song_id": song_id}
            )
            self.session.commit()
