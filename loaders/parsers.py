"""
Column parsers for Agilent-style ``Timestamp,Message`` exports and Anritsu MD8475A message logs.

Fields are split on the sniffed delimiter without quote handling.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from config import settings
from engine.records import Record
from loaders.exceptions import MissingColumns
from loaders.sources import detect_delimiter


def _columns(header: str, delimiter: str, time_col: str, message_col: str) -> Tuple[int, int]:
    names = [h.strip().lower() for h in header.split(delimiter)]
    try:
        return names.index(time_col), names.index(message_col)
    except ValueError as exc:
        raise MissingColumns(
            f"header is missing {time_col!r} or {message_col!r} column: {header!r}"
        ) from exc


def _field(cols: List[str], index: int) -> str:
    return cols[index].strip() if index < len(cols) else ""


def _rows(lines: Sequence[str], delimiter: str, idx_time: int, idx_msg: int) -> List[Record]:
    out: List[Record] = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("---"):
            continue
        cols = line.split(delimiter)
        timestamp, message = _field(cols, idx_time), _field(cols, idx_msg)
        if not timestamp or not message:
            continue
        out.append(Record(timestamp=timestamp, message=message))
    return out


def parse_agilent(lines: Sequence[str]) -> Tuple[str, List[Record]]:
    if not lines:
        raise MissingColumns("empty log has no header")
    delimiter = detect_delimiter(lines[0])
    idx_time, idx_msg = _columns(lines[0], delimiter, "timestamp", "message")
    return delimiter, _rows(lines[1:], delimiter, idx_time, idx_msg)


def parse_md8475a(lines: Sequence[str]) -> Tuple[str, List[Record]]:
    prefix = settings.md8475a_header_prefix
    header_idx = next(
        (i for i, line in enumerate(lines) if line.strip().lower().startswith(prefix)),
        -1,
    )
    if header_idx == -1:
        raise MissingColumns("MD8475A header 'No.,Progress Time,...' not found")
    header = lines[header_idx]
    delimiter = detect_delimiter(header)
    idx_time, idx_msg = _columns(header, delimiter, "progress time", "message")
    return delimiter, _rows(lines[header_idx + 1:], delimiter, idx_time, idx_msg)
