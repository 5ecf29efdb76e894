import os
import threading
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlmodel import create_engine, Session

from infra.database.schema import init_raw_db
from utils.logger import get_logger

logger = get_logger(__name__)

WRITE_LOCK_KEY = "write_lock"


class Database:
    """
    DuckDB エンジンと書き込みロックを保持する永続化層。
    main.py の lifespan で生成・初期化し、終了時に close() する。
    """

    def __init__(self, db_path: str, pool_size: int = 5, max_overflow: int = 10):
        self.db_path = db_path
        self.url = f"duckdb:///{db_path}"
        # DuckDB はシングルライターのため、同一行への同時更新は競合エラーになる。
        # 書き込みはすべてこのロックで直列化する。
        self.write_lock = threading.RLock()
        self.engine = None
        self._pool_size = pool_size
        self._max_overflow = max_overflow

    def init(self):
        os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
        connect_args = {'config': {'access_mode': 'READ_WRITE'}}
        self.engine = create_engine(
            self.url,
            pool_size=self._pool_size,
            max_overflow=self._max_overflow,
            connect_args=connect_args
        )
        with self.write_lock:
            init_raw_db(self.engine)
        logger.info(f"Database ready: {self.db_path}")

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self.engine is None:
            raise RuntimeError("Database is not initialized")
        with Session(self.engine, info={WRITE_LOCK_KEY: self.write_lock}) as session:
            yield session


@contextmanager
def write_transaction(session: Session) -> Iterator[None]:
    """
    書き込みロックを取得し、新しいトランザクションで書き込む。

    DuckDB のトランザクションは開始時点のスナップショットを見るため、ロック取得前の
    読み取りで始まったトランザクションのまま書き込むと、他リクエストが先にコミットした
    行と衝突する (重複キーや "Conflict on tuple deletion")。ロック取得直後に一度
    コミットして読み取りトランザクションを閉じ、ロック内で最新の状態から書き込む。
    呼び出し側はこのブロックに入る前に ORM オブジェクトを変更してはならない。
    """
    with session.info[WRITE_LOCK_KEY]:
        session.commit()
        yield


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session(request: Request):
    with get_database(request).session() as session:
        yield session
