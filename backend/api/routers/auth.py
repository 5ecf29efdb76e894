from fastapi import APIRouter, Depends
from sqlmodel import Session

from api.dependencies import get_identity_service
from api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.services.auth_app_service import AuthAppService
from app.services.identity_service import IdentityService
from infra.database.connection import get_session

router = APIRouter()

@router.post("/api/auth/register", response_model=AuthResponse, status_code=201)
def register(
    req: RegisterRequest,
    session: Session = Depends(get_session),
    identity: IdentityService = Depends(get_identity_service)
):
    service = AuthAppService(session, identity)
    return service.register(req.username.strip(), req.email.strip().lower(), req.password)

@router.post("/api/auth/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    session: Session = Depends(get_session),
    identity: IdentityService = Depends(get_identity_service)
):
    service = AuthAppService(session, identity)
    return service.login(req.email.strip().lower(), req.password)
