"""
HTTP Range ヘッダーの解釈。

`bytes=<start>-<end>` 形式の単一レンジのみを扱い、リソースの実サイズに対して
検証した上で DeliveryPlan を返す。I/O は一切行わない。
"""
import re
from dataclasses import dataclass
from typing import Optional

from domain.errors import InvalidInput, RangeNotSatisfiable

# 位置は最大19桁 (int64 の範囲)。それを超える数字列は書式エラー
MAX_POSITION_DIGITS = 19
RANGE_PATTERN = re.compile(r"^bytes=(\d{1,%d})-(\d{0,%d})$" % (MAX_POSITION_DIGITS, MAX_POSITION_DIGITS))

STATUS_OK = 200
STATUS_PARTIAL_CONTENT = 206


@dataclass(frozen=True)
class DeliveryPlan:
    status: int
    start: int
    end: int
    length: int
    total_length: int

    @property
    def is_partial(self) -> bool:
        return self.status == STATUS_PARTIAL_CONTENT

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_length}"


def negotiate(range_header: Optional[str], total_length: int) -> DeliveryPlan:
    if total_length < 0:
        raise ValueError("total_length must be non-negative")

    if range_header is None:
        return DeliveryPlan(
            status=STATUS_OK,
            start=0,
            end=total_length - 1,
            length=total_length,
            total_length=total_length,
        )

    match = RANGE_PATTERN.match(range_header.strip())
    if not match:
        raise InvalidInput(f"Malformed Range header: {range_header!r}")

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else total_length - 1

    if total_length == 0 or start > total_length - 1:
        raise RangeNotSatisfiable(total_length)
    if end < start:
        raise RangeNotSatisfiable(total_length)

    # last-byte-pos がサイズを超える場合は末尾に丸める (RFC 7233 2.1)
    end = min(end, total_length - 1)

    return DeliveryPlan(
        status=STATUS_PARTIAL_CONTENT,
        start=start,
        end=end,
        length=end - start + 1,
        total_length=total_length,
    )
