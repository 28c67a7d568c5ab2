from datetime import time

import pytest

from salonbook.utils.time_utils import (
    format_minutes,
    format_time,
    intervals_overlap,
    minutes_to_time,
    to_minutes,
)


@pytest.mark.parametrize("value, expected", [
    ("09:00", 540),
    ("10:45:00", 645),
    (time(23, 59), 1439),
])
def test_to_minutes(value, expected):
    assert to_minutes(value) == expected


def test_formatting():
    assert format_minutes(615) == "10:15"
    assert format_time("09:05:00") == "09:05"


def test_minutes_to_time_rejects_next_day():
    assert minutes_to_time(1439) == time(23, 59)
    with pytest.raises(ValueError):
        minutes_to_time(1440)


@pytest.mark.parametrize("a, b, expected", [
    ((600, 645), (570, 600), False),
    ((600, 645), (600, 630), True),
    ((600, 645), (630, 660), True),
    ((600, 645), (645, 675), False),
    ((600, 645), (540, 720), True),
])
def test_half_open_overlap(a, b, expected):
    assert intervals_overlap(*a, *b) is expected
