"""
Log source and column delimiter sniffing for test-equipment message captures.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import List

from config import settings


class LogSource(str, Enum):
    auto = "auto"
    agilent = "agilent"
    md8475a = "md8475a"


def detect_delimiter(header: str) -> str:
    best = ","
    best_count = -1
    for candidate in settings.delimiter_candidates:
        count = len(header.split(candidate))
        if count > best_count:
            best, best_count = candidate, count
    return best


def detect_source(lines: List[str]) -> LogSource:
    first = next((line for line in lines if line.strip()), "").lower()
    if any(marker in first for marker in settings.md8475a_banner_markers):
        return LogSource.md8475a

    header = (lines[0] if lines else "").lower()
    if settings.md8475a_header_prefix in header and ",message" in header:
        return LogSource.md8475a
    return LogSource.agilent
