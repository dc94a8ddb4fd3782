import pytest

from trippio_stats.domain.exceptions import ProbeShapeError
from trippio_stats.probes.decoders import (
    decode_amount,
    decode_count,
    decode_records,
    decode_user_page,
)


def test_decode_amount_accepts_numbers():
    assert decode_amount(125000, "/revenue") == 125000.0
    assert decode_amount(12.5, "/revenue") == 12.5


@pytest.mark.parametrize(
    "payload", ["1000", None, -5, {"value": 10}, float("inf"), float("nan")]
)
def test_decode_amount_fails_closed(payload):
    with pytest.raises(ProbeShapeError):
        decode_amount(payload, "/revenue")


def test_decode_count_rejects_floats_and_strings():
    assert decode_count(4, "/count") == 4
    with pytest.raises(ProbeShapeError):
        decode_count(4.5, "/count")
    with pytest.raises(ProbeShapeError):
        decode_count("4", "/count")


def test_decode_records_requires_array():
    assert decode_records([{"id": 1}, {"id": 2}], "/hotel") == [{"id": 1}, {"id": 2}]
    with pytest.raises(ProbeShapeError):
        decode_records({"data": []}, "/hotel")


def test_decode_user_page_allows_missing_fields():
    page = decode_user_page({}, "/paging")
    assert page.results is None
    assert page.row_count is None


def test_decode_user_page_rejects_non_object_and_bad_results():
    with pytest.raises(ProbeShapeError):
        decode_user_page([], "/paging")
    with pytest.raises(ProbeShapeError):
        decode_user_page({"results": [{"name": "no id"}]}, "/paging")
    with pytest.raises(ProbeShapeError):
        decode_user_page({"results": "nope"}, "/paging")


@pytest.mark.parametrize(
    "payload",
    [
        {"rowCount": "7"},
        {"rowCount": True},
        {"rowCount": 7.0},
        {"results": [{"id": 1.0}]},
        {"results": [{"id": False}]},
    ],
)
def test_decode_user_page_does_not_coerce_types(payload):
    with pytest.raises(ProbeShapeError):
        decode_user_page(payload, "/paging")


def test_decode_user_page_keeps_string_and_int_ids():
    page = decode_user_page(
        {"results": [{"id": "u1"}, {"id": 2}], "rowCount": 2}, "/paging"
    )
    assert [user.id for user in page.results] == ["u1", 2]
    assert page.row_count == 2
