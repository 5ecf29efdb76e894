import os
from typing import Dict, Any
from tinytag import TinyTag, TinyTagException

from utils.logger import get_logger

logger = get_logger(__name__)

def probe_audio(filepath: str) -> Dict[str, Any]:
    """
    アップロードされた音声ファイルのタグから再生時間とメタデータを取得する。
    読み取れない場合は空のフィールドを返す (アップロード自体は失敗させない)。
    """
    result: Dict[str, Any] = {"title": None, "artist": None, "album": None, "genre": None, "duration": None}
    try:
        tag = TinyTag.get(filepath)
    except (TinyTagException, OSError) as e:
        logger.warning(f"Could not read tags from {os.path.basename(filepath)}: {e}")
        return result

    for field in ("title", "artist", "album", "genre"):
        value = getattr(tag, field, None)
        if isinstance(value, str) and value.strip():
            result[field] = value.strip()

    duration = getattr(tag, "duration", None)
    if isinstance(duration, (int, float)) and duration > 0:
        result["duration"] = int(round(duration))
    return result

def title_from_filename(filename: str) -> str:
    return os.path.splitext(os.path.basename(filename))[0].strip() or "Untitled"
