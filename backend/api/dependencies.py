from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.services.identity_service import IdentityService
from config import Settings
from domain.errors import Unauthenticated
from infra.storage import MediaStorage

bearer_scheme = HTTPBearer(auto_error=False)

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_storage(request: Request) -> MediaStorage:
    return request.app.state.storage

def get_identity_service(settings: Settings = Depends(get_settings)) -> IdentityService:
    return IdentityService(settings)

def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity_service)
) -> Optional[int]:
    """Bearer トークンがあれば検証してユーザー ID を返す。なければ None"""
    if credentials is None:
        return None
    return identity.verify_token(credentials.credentials)

def get_current_user_id(user_id: Optional[int] = Depends(get_optional_user_id)) -> int:
    if user_id is None:
        raise Unauthenticated("Token required")
    return user_id
