# salonbook/utils/time_utils.py
"""Minute-of-day helpers for HH:MM slot arithmetic"""
from datetime import time
from typing import Union

MINUTES_PER_DAY = 24 * 60

TimeLike = Union[str, time]


def to_minutes(value: TimeLike) -> int:
    """Minutes since midnight for a `time` or an "HH:MM[:SS]" string"""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def format_minutes(total_minutes: int) -> str:
    """Format minutes since midnight as HH:MM (no wrap-around)"""
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def minutes_to_time(total_minutes: int) -> time:
    if not 0 <= total_minutes < MINUTES_PER_DAY:
        raise ValueError(f"{total_minutes} minutes is outside a single day")
    return time(total_minutes // 60, total_minutes % 60)


def format_time(value: TimeLike) -> str:
    return format_minutes(to_minutes(value))


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open interval overlap: [start1, end1) and [start2, end2)"""
    return start1 < end2 and start2 < end1
