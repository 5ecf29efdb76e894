from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from config import Settings
from domain.errors import Unauthenticated

class IdentityService:
    """パスワードのハッシュ化と Bearer トークンの発行・検証"""

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.ttl = timedelta(minutes=settings.TOKEN_TTL_MINUTES)

    def hash_password(self, password: str) -> str:
        return generate_password_hash(password)

    def verify_password(self, password_hash: str, password: str) -> bool:
        return check_password_hash(password_hash, password)

    def issue_token(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": str(user_id), "iat": now, "exp": now + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise Unauthenticated("Invalid token")

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise Unauthenticated("Invalid token")
