import mimetypes
import os
import unicodedata
from typing import Optional

def resolve_path(path: str) -> Optional[str]:
    """
    パスの存在確認を行い、見つからない場合はUnicode正規化(NFC/NFD)を試して解決する
    MacOS (NFD) と Linux (NFC) で保存されたファイル名の差異を吸収するため
    """
    for candidate in (path, unicodedata.normalize('NFC', path), unicodedata.normalize('NFD', path)):
        if os.path.isfile(candidate):
            return candidate
    return None

def guess_media_type(path: str, default: str) -> str:
    media_type, _ = mimetypes.guess_type(path)
    return media_type or default
