"""
Record and occurrence types, and the single-pass occurrence extractor that resolves matching records to time values while keeping their stream position.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List

from engine import clock
from engine.matchers import Predicate, as_callable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    timestamp: str
    message: str


@dataclass(frozen=True)
class Occurrence:
    raw_timestamp: str
    time: int
    source_index: int


def iter_occurrences(records: Iterable[Record], predicate: Predicate) -> Iterator[Occurrence]:
    match = as_callable(predicate)
    for index, record in enumerate(records):
        if not record.timestamp or not record.message:
            continue
        if not match(record.message):
            continue
        t = clock.parse(record.timestamp)
        if t is None:
            continue
        yield Occurrence(raw_timestamp=record.timestamp, time=t, source_index=index)


def count_malformed(records: Iterable[Record], predicate: Predicate) -> int:
    match = as_callable(predicate)
    return sum(
        1 for r in records
        if r.timestamp and r.message and match(r.message) and clock.parse(r.timestamp) is None
    )


def extract(records: Iterable[Record], predicate: Predicate) -> List[Occurrence]:
    records = records if isinstance(records, (list, tuple)) else list(records)
    occurrences = list(iter_occurrences(records, predicate))
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            "extract: %d occurrence(s), %d malformed timestamp(s) skipped",
            len(occurrences), count_malformed(records, predicate),
        )
    return occurrences
