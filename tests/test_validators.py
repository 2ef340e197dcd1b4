from datetime import datetime, timedelta, timezone

import pytest

from ocppcore.shared.validators import (
    decode_base64,
    encode_base64,
    format_timestamp,
    normalize_timestamp,
    strip_and_check_not_empty,
)


def test_normalize_timestamp_takes_naive_values_as_utc():
    normalized = normalize_timestamp(datetime(2024, 1, 1, 12, 0, 0))

    assert normalized.tzinfo == timezone.utc
    assert normalized.hour == 12


def test_normalize_timestamp_converts_to_utc_and_truncates():
    cest = timezone(timedelta(hours=2))
    normalized = normalize_timestamp(datetime(2024, 1, 1, 2, 0, 0, 123456, cest))

    assert normalized == datetime(2024, 1, 1, 0, 0, 0, 123000, timezone.utc)


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2024, 1, 1, tzinfo=timezone.utc), "2024-01-01T00:00:00.000Z"),
        (
            datetime(2024, 1, 1, 2, 30, 5, 7999, timezone(timedelta(hours=2))),
            "2024-01-01T00:30:05.007Z",
        ),
        (datetime(2023, 12, 31, 23, 59, 59, 999999), "2023-12-31T23:59:59.999Z"),
    ],
)
def test_format_timestamp(value, expected):
    assert format_timestamp(value) == expected


def test_base64():
    assert decode_base64("AAE=") == b"\x00\x01"
    assert decode_base64(b"\x00\x01") == b"\x00\x01"
    assert encode_base64(b"\x00\x01") == "AAE="

    with pytest.raises(ValueError):
        decode_base64("***")


def test_strip_and_check_not_empty():
    assert strip_and_check_not_empty("idTag", "  ABC ") == "ABC"

    with pytest.raises(ValueError, match="idTag"):
        strip_and_check_not_empty("idTag", "   ")
