import os
import re
import time
from typing import BinaryIO, Optional

from domain.errors import InvalidInput
from utils.filesystem import resolve_path
from utils.logger import get_logger

logger = get_logger(__name__)

AUDIO_DIR = "audio"
IMAGE_DIR = "images"

COPY_CHUNK_SIZE = 1024 * 1024

class MediaStorage:
    """
    アップロードされた音声・画像ファイルの保存先。
    ファイルは root/<audio|images>/<epoch_ms>-<元ファイル名> に置き、
    DB には root からの相対パスだけを保存する。
    """

    def __init__(self, root: str, max_upload_bytes: int):
        self.root = os.path.abspath(root)
        self.max_upload_bytes = max_upload_bytes

    def init(self):
        for folder in (AUDIO_DIR, IMAGE_DIR):
            os.makedirs(os.path.join(self.root, folder), exist_ok=True)

    def path(self, name: str) -> str:
        full_path = os.path.abspath(os.path.join(self.root, name))
        # ルート外を指す相対パスは拒否
        if os.path.commonpath([self.root, full_path]) != self.root:
            raise InvalidInput(f"Invalid storage path: {name}")
        return full_path

    def resolve(self, name: str) -> Optional[str]:
        return resolve_path(self.path(name))

    def exists(self, name: str) -> bool:
        return self.resolve(name) is not None

    def size(self, name: str) -> int:
        resolved = self.resolve(name)
        if resolved is None:
            raise FileNotFoundError(name)
        return os.path.getsize(resolved)

    def save(self, folder: str, filename: str, source: BinaryIO) -> str:
        safe_name = re.sub(r'[\\/*?:"<>|\s]+', "_", os.path.basename(filename or "")).strip("._") or "upload"
        stamp = int(time.time() * 1000)
        os.makedirs(os.path.join(self.root, folder), exist_ok=True)

        # 同一ミリ秒に同名ファイルが来た場合は連番を付けて上書きを避ける
        suffix = 0
        while True:
            name = f"{folder}/{stamp}-{safe_name}" if suffix == 0 else f"{folder}/{stamp}-{suffix}-{safe_name}"
            target = self.path(name)
            try:
                out = open(target, "xb")
                break
            except FileExistsError:
                suffix += 1

        written = 0
        try:
            with out:
                while True:
                    chunk = source.read(COPY_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_upload_bytes:
                        raise InvalidInput("File too large")
                    out.write(chunk)
        except BaseException:
            if os.path.exists(target):
                os.remove(target)
            raise

        logger.info(f"Stored upload {name} ({written} bytes)")
        return name

    def delete(self, name: Optional[str]) -> bool:
        """ファイルを削除する。既に存在しない場合は False"""
        if not name:
            return False
        resolved = self.resolve(name)
        if resolved is None:
            return False
        os.remove(resolved)
        logger.info(f"Released stored file {name}")
        return True
