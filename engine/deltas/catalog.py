"""
Whole-log delta catalog: one forward pass over every distinct message, producing per-message interval statistics and a stream of raw delta rows for export.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

from engine import clock
from engine.records import Record

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeltaRow:
    message: str
    prev_timestamp: str
    curr_timestamp: str
    micros: int


@dataclass
class MessageStats:
    message: str
    count: int = 0
    minimum: int = 0
    maximum: int = 0
    total: int = 0

    @property
    def mean(self) -> int:
        return self.total // self.count if self.count else 0

    def add(self, micros: int) -> None:
        if self.count == 0 or micros < self.minimum:
            self.minimum = micros
        if self.count == 0 or micros > self.maximum:
            self.maximum = micros
        self.count += 1
        self.total += micros


@dataclass(frozen=True)
class MessageCatalog:
    records_seen: int
    records_parsed: int
    messages: List[MessageStats]


def _scan(records: Iterable[Record], counters: Dict[str, int]) -> Iterator[DeltaRow]:
    last_seen: Dict[str, Tuple[int, str]] = {}
    for record in records:
        counters["seen"] += 1
        if not record.timestamp or not record.message:
            continue
        t = clock.parse(record.timestamp)
        if t is None:
            continue
        counters["parsed"] += 1
        prev = last_seen.get(record.message)
        if prev is not None:
            yield DeltaRow(
                message=record.message,
                prev_timestamp=prev[1],
                curr_timestamp=record.timestamp,
                micros=clock.elapsed(prev[0], t),
            )
        last_seen[record.message] = (t, record.timestamp)


def iter_delta_rows(records: Iterable[Record]) -> Iterator[DeltaRow]:
    yield from _scan(records, {"seen": 0, "parsed": 0})


def message_stats(records: Iterable[Record]) -> MessageCatalog:
    counters = {"seen": 0, "parsed": 0}
    stats: Dict[str, MessageStats] = {}
    for row in _scan(records, counters):
        entry = stats.get(row.message)
        if entry is None:
            entry = stats[row.message] = MessageStats(message=row.message)
        entry.add(row.micros)

    ordered = sorted(stats.values(), key=lambda s: (-s.mean, s.message))
    log.debug(
        "message_stats: seen=%d parsed=%d repeated_messages=%d",
        counters["seen"], counters["parsed"], len(ordered),
    )
    return MessageCatalog(
        records_seen=counters["seen"],
        records_parsed=counters["parsed"],
        messages=ordered,
    )
