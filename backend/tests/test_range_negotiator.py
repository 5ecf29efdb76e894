import pytest

from domain.errors import InvalidInput, RangeNotSatisfiable
from domain.services.range_negotiator import negotiate, STATUS_OK, STATUS_PARTIAL_CONTENT

def test_no_range_returns_full_body():
    plan = negotiate(None, 1000)
    assert plan.status == STATUS_OK
    assert (plan.start, plan.end, plan.length) == (0, 999, 1000)
    assert plan.is_partial is False

@pytest.mark.parametrize("header, start, end, length", [
    ("bytes=200-299", 200, 299, 100),
    ("bytes=0-0", 0, 0, 1),
    ("bytes=900-", 900, 999, 100),
    ("bytes=999-999", 999, 999, 1),
    # 末尾を超える end はサイズに丸める
    ("bytes=500-5000", 500, 999, 500),
])
def test_satisfiable_ranges(header, start, end, length):
    plan = negotiate(header, 1000)
    assert plan.status == STATUS_PARTIAL_CONTENT
    assert (plan.start, plan.end, plan.length) == (start, end, length)
    assert plan.content_range == f"bytes {start}-{end}/1000"

@pytest.mark.parametrize("header", ["bytes=1000-", "bytes=1500-1600", "bytes=300-200"])
def test_unsatisfiable_ranges(header):
    with pytest.raises(RangeNotSatisfiable) as exc_info:
        negotiate(header, 1000)
    assert exc_info.value.total_length == 1000
    assert exc_info.value.status_code == 416

@pytest.mark.parametrize("header", [
    "bytes=abc",
    "items=0-10",
    "bytes=-500",
    "bytes=0-10,20-30",
    "",
    "bytes=" + "9" * 5000 + "-",
    "bytes=0-" + "9" * 5000,
])
def test_malformed_ranges(header):
    with pytest.raises(InvalidInput):
        negotiate(header, 1000)

def test_empty_resource():
    plan = negotiate(None, 0)
    assert plan.status == STATUS_OK
    assert plan.length == 0

    with pytest.raises(RangeNotSatisfiable):
        negotiate("bytes=0-", 0)

def test_negative_length_is_rejected():
    with pytest.raises(ValueError):
        negotiate(None, -1)

def test_largest_position_is_unsatisfiable():
    with pytest.raises(RangeNotSatisfiable):
        negotiate("bytes=" + "9" * 19 + "-", 1000)
    # 19桁までの end はサイズに丸める
    plan = negotiate("bytes=10-" + "9" * 19, 1000)
    assert plan.end == 999
