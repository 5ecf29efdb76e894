from typing import Dict, Any
from sqlmodel import Session

from app.services.identity_service import IdentityService
from domain.errors import Unauthenticated
from domain.models.user import User
from infra.repositories.user_repository import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)

class AuthAppService:
    def __init__(self, session: Session, identity: IdentityService):
        self.session = session
        self.identity = identity
        self.repository = UserRepository(session)

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        user = User(
            username=username,
            email=email,
            password_hash=self.identity.hash_password(password)
        )
        user = self.repository.create(user)
        logger.info(f"Registered user {user.id} ({user.username})")
        return self._auth_payload(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.repository.get_by_email(email)
        if not user or not self.identity.verify_password(user.password_hash, password):
            raise Unauthenticated("Invalid credentials")
        return self._auth_payload(user)

    def _auth_payload(self, user: User) -> Dict[str, Any]:
        return {
            "token": self.identity.issue_token(user.id),
            "user": {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "is_premium": user.is_premium
            }
        }
