"""
Time-of-day arithmetic for log timestamps.

Timestamps are ``HH:MM:SS`` with an optional fraction of up to six digits and
are held as integer microseconds since the start of the day.  Elapsed time
wraps across midnight at most once, so two events more than a day apart read
as the same-day gap.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import re
from typing import Optional

MICROS_PER_SECOND = 1_000_000
DAY_MICROS = 24 * 60 * 60 * MICROS_PER_SECOND

_TIME_RE = re.compile(r"^(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?$")


def parse(text: Optional[str]) -> Optional[int]:
    """Return microseconds since midnight, or ``None`` when *text* is not a time."""
    if not text:
        return None
    m = _TIME_RE.match(text.strip())
    if m is None:
        return None
    hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3))
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    micros = int((m.group(4) or "0").ljust(6, "0"))
    return ((hours * 60 + minutes) * 60 + seconds) * MICROS_PER_SECOND + micros


def elapsed(start: int, end: int) -> int:
    delta = end - start
    if delta < 0:
        delta += DAY_MICROS
    return delta


def format_time(value: int) -> str:
    if value < 0:
        return "-" + format_time(-value)
    total_seconds, micros = divmod(value, MICROS_PER_SECOND)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{micros:06d}"


def to_seconds(value: int) -> float:
    return value / MICROS_PER_SECOND
