from fastapi import APIRouter, Depends
from sqlmodel import Session
import duckdb

from api.dependencies import get_current_user_id
from api.schemas.common import LibraryStats
from app.services.stats_app_service import StatsAppService
from infra.database.connection import get_session

router = APIRouter()

@router.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "duckdb_version": duckdb.__version__
    }

@router.get("/api/stats", response_model=LibraryStats)
def get_stats(
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session)
):
    """
    ライブラリ全体の件数と再生回数の多い楽曲トップ10を返す。
    """
    service = StatsAppService(session)
    return service.get_stats()
