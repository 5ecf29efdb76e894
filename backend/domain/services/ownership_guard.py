from enum import Enum
from typing import Optional

from domain.errors import Forbidden, Unauthenticated


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def authorize(identity: Optional[int], owner_id: Optional[int]) -> Decision:
    if identity is None or owner_id is None:
        return Decision.DENY
    return Decision.ALLOW if identity == owner_id else Decision.DENY


def ensure_owner(identity: Optional[int], owner_id: Optional[int]) -> None:
    """
    変更系操作の前に必ず呼び出す。拒否された場合は例外を送出し、
    呼び出し側は一切の副作用を起こさずに終了する。
    """
    if identity is None:
        raise Unauthenticated()
    if authorize(identity, owner_id) is Decision.DENY:
        raise Forbidden()
