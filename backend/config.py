import os
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field
import platformdirs

APP_NAME = "Medialib"
APP_AUTHOR = "MedialibDev"

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Paths
    # 環境変数 DB_PATH / UPLOAD_DIR があればそれを優先し、なければ platformdirs 配下を使う
    USER_DATA_DIR: str = Field(default_factory=lambda: platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    DB_PATH: str | None = None
    UPLOAD_DIR: str | None = None

    # Network
    MEDIALIB_PORT: int = 3000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_MINUTES: int = 60 * 24 * 7

    # Media
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
    STREAM_CHUNK_SIZE: int = 64 * 1024

    # Logging
    MEDIALIB_LOG_DIR: str | None = None
    MEDIALIB_LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def model_post_init(self, __context):
        if not self.DB_PATH:
            self.DB_PATH = os.path.join(self.USER_DATA_DIR, "medialib.duckdb")

        if not self.UPLOAD_DIR:
            self.UPLOAD_DIR = os.path.join(self.USER_DATA_DIR, "uploads")

        if not self.MEDIALIB_LOG_DIR:
            self.MEDIALIB_LOG_DIR = os.path.join(self.USER_DATA_DIR, "logs")

    def setup_environment(self):
        """ロガーが参照する環境変数を設定する"""
        if self.MEDIALIB_LOG_DIR:
            os.environ["MEDIALIB_LOG_DIR"] = self.MEDIALIB_LOG_DIR
        os.environ["MEDIALIB_LOG_LEVEL"] = self.MEDIALIB_LOG_LEVEL

settings = Settings()
