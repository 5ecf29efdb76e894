from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.errors import register_exception_handlers
from api.routers import (
    auth,
    favorites,
    media,
    playlists,
    songs,
    system
)
from config import Settings, settings as default_settings
from infra.database import Database
from infra.storage import MediaStorage
from utils.logger import get_logger

logger = get_logger(__name__)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    # Lifespan event to handle startup/shutdown
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.DB_PATH)
        database.init()  # DuckDBの初期化 (Raw SQLによるSequence/Table作成)
        storage = MediaStorage(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)
        storage.init()

        app.state.settings = settings
        app.state.database = database
        app.state.storage = storage
        logger.info(f"Uploads stored in {settings.UPLOAD_DIR}")
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="Medialib Backend API", lifespan=lifespan)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
    )

    register_exception_handlers(app)

    # Root endpoint for health check
    @app.get("/")
    async def root():
        return {"message": "Medialib Backend API is running"}

    # Include Routers
    app.include_router(auth.router)
    app.include_router(favorites.router)
    app.include_router(media.router)
    app.include_router(playlists.router)
    app.include_router(songs.router)
    app.include_router(system.router)
    return app

app = create_app()
