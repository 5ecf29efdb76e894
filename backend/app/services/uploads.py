from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from domain.errors import InvalidInput
from infra.storage import MediaStorage, AUDIO_DIR, IMAGE_DIR

@dataclass
class IncomingFile:
    filename: str
    content_type: Optional[str]
    stream: BinaryIO

def store_audio(storage: MediaStorage, incoming: IncomingFile) -> str:
    if not (incoming.content_type or "").startswith("audio/"):
        raise InvalidInput("Only audio files are allowed")
    return storage.save(AUDIO_DIR, incoming.filename, incoming.stream)

def store_image(storage: MediaStorage, incoming: IncomingFile) -> str:
    if not (incoming.content_type or "").startswith("image/"):
        raise InvalidInput("Only image files are allowed")
    return storage.save(IMAGE_DIR, incoming.filename, incoming.stream)

def discard(storage: MediaStorage, names: List[Optional[str]]):
    """保存済みファイルを取り消す (作成失敗時の後始末)"""
    for name in names:
        if name:
            storage.delete(name)
