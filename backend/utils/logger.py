import logging
import os
from logging.handlers import RotatingFileHandler
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "medialib.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

def _log_dir() -> str:
    # server.py 経由の起動では Settings.setup_environment() が MEDIALIB_LOG_DIR を設定する
    # 未設定なら backend/logs (開発環境)
    configured = os.environ.get("MEDIALIB_LOG_DIR")
    if configured:
        return configured
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")

def _log_level() -> int:
    name = os.environ.get("MEDIALIB_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO

def get_logger(name: str):
    """
    ファイル出力 (medialib.log, 10MBごとにローテーション, 最大5世代) と
    コンソール出力を併用するロガーを取得する。
    レベルは環境変数 MEDIALIB_LOG_LEVEL で変更できる (再生記録は DEBUG で出力)。
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = _log_level()
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    log_dir = _log_dir()
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except OSError as e:
        # 権限エラーなどでファイル作成できない場合はコンソールのみ
        print(f"Failed to set up file logging in {log_dir}: {e}", file=sys.stderr)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)
    return logger
