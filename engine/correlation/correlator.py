"""
Dual-event cycle state machine.

Primary events accumulate into a running count.  A secondary event acting as
a closer flushes that count into ``cycle_counts``; acting as a marker it is
only annotated in the timeline.  The timeline carries one delta line per
adjacent pair of primary events, followed by any secondary events that fell
between them in stream order.  Secondary events never take part in delta
arithmetic.

Closed cycles are checked against the accepted ``[min, max]`` primary range
and for constancy across cycles.  A count left running at the end of the
stream is reported as unterminated instead of being dropped.  All findings
are data in the report; nothing here raises on a violation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from engine import clock
from engine.correlation.events import CorrelationConfig, CorrelationEvent, iter_events
from engine.enums import ConstancyStatus, EntryKind, EventKind, SecondaryRole, ViolationKind
from engine.records import Record
from config import settings

log = logging.getLogger(__name__)

NOT_ENOUGH_PRIMARY_NOTE = "At least 2 primary events are required to compute deltas."


@dataclass(frozen=True)
class TimelineEntry:
    kind: EntryKind
    ordinal: Optional[int] = None
    start_timestamp: Optional[str] = None
    end_timestamp: Optional[str] = None
    micros: Optional[int] = None
    timestamp: Optional[str] = None
    message: str = ""


@dataclass(frozen=True)
class ConstancyVerdict:
    status: ConstancyStatus
    value: Optional[int] = None
    values: List[int] = field(default_factory=list)

    @classmethod
    def not_evaluated(cls) -> ConstancyVerdict:
        return cls(status=ConstancyStatus.not_evaluated)


@dataclass(frozen=True)
class CycleViolation:
    kind: ViolationKind
    detail: str
    cycle: Optional[int] = None
    count: Optional[int] = None


@dataclass(frozen=True)
class CycleReport:
    total_primary: int
    secondary_role: SecondaryRole
    cycle_counts: List[int]
    constancy: ConstancyVerdict
    violations: List[CycleViolation]
    timeline: List[TimelineEntry]
    note: Optional[str] = None
    primary_label: str = ""
    secondary_label: str = "none"


class CycleStateMachine:
    def __init__(self, role: SecondaryRole) -> None:
        self.role = role
        self.running = 0
        self.total_primary = 0
        self.cycle_counts: List[int] = []
        self.timeline: List[TimelineEntry] = []
        self._last_primary: Optional[CorrelationEvent] = None
        self._pending: List[TimelineEntry] = []

    def feed(self, event: CorrelationEvent) -> None:
        if event.kind is EventKind.primary:
            self._on_primary(event)
        elif event.kind is EventKind.closer:
            self._on_closer(event)
        else:
            self._annotate(EntryKind.marker, event)

    def _on_primary(self, event: CorrelationEvent) -> None:
        self.running += 1
        self.total_primary += 1
        prev = self._last_primary
        if prev is not None:
            self.timeline.append(TimelineEntry(
                kind=EntryKind.delta,
                ordinal=self.total_primary - 1,
                start_timestamp=prev.raw_timestamp,
                end_timestamp=event.raw_timestamp,
                micros=clock.elapsed(prev.time, event.time),
            ))
            self.timeline.extend(self._pending)
        self._pending = []
        self._last_primary = event

    def _on_closer(self, event: CorrelationEvent) -> None:
        if self.running > 0:
            self.cycle_counts.append(self.running)
            self.running = 0
        self._annotate(EntryKind.closer, event)

    def _annotate(self, kind: EntryKind, event: CorrelationEvent) -> None:
        # only annotations that end up between two primaries reach the timeline
        if self._last_primary is None:
            return
        self._pending.append(TimelineEntry(
            kind=kind,
            timestamp=event.raw_timestamp,
            message=event.message,
        ))

    def finish(self) -> int:
        self._pending = []
        trailing, self.running = self.running, 0
        return trailing


def evaluate_cycles(
    counts: List[int],
    trailing: int,
    min_primary: int,
    max_primary: int,
) -> Tuple[ConstancyVerdict, List[CycleViolation]]:
    violations: List[CycleViolation] = []
    if trailing > 0:
        violations.append(CycleViolation(
            kind=ViolationKind.unterminated,
            detail=f"Unterminated trailing cycle: {trailing} primary event(s) after the last closer.",
            count=trailing,
        ))

    for number, count in enumerate(counts, start=1):
        if count < min_primary or count > max_primary:
            violations.append(CycleViolation(
                kind=ViolationKind.out_of_range,
                detail=f"Cycle {number}: {count} primary event(s), expected {min_primary} to {max_primary}.",
                cycle=number,
                count=count,
            ))

    distinct = list(dict.fromkeys(counts))
    if not distinct:
        return ConstancyVerdict.not_evaluated(), violations
    if len(distinct) == 1:
        return ConstancyVerdict(status=ConstancyStatus.ok, value=distinct[0], values=distinct), violations

    violations.append(CycleViolation(
        kind=ViolationKind.inconstant,
        detail=f"Constancy: cycle counts varied between cycles {distinct}.",
    ))
    return ConstancyVerdict(status=ConstancyStatus.varied, values=distinct), violations


def correlate(records: Iterable[Record], config: CorrelationConfig) -> CycleReport:
    min_primary = config.min_primary if config.min_primary is not None else settings.cycle_min_primary
    max_primary = config.max_primary if config.max_primary is not None else settings.cycle_max_primary

    machine = CycleStateMachine(config.role)
    for event in iter_events(records, config):
        machine.feed(event)
    trailing = machine.finish()

    if config.role is SecondaryRole.closer:
        counts = list(machine.cycle_counts)
        constancy, violations = evaluate_cycles(counts, trailing, min_primary, max_primary)
    else:
        counts, constancy, violations = [], ConstancyVerdict.not_evaluated(), []

    timeline = machine.timeline
    note = None
    if machine.total_primary < 2:
        timeline, note = [], NOT_ENOUGH_PRIMARY_NOTE

    log.debug(
        "correlate: primary=%d role=%s cycles=%d violations=%d",
        machine.total_primary, config.role.value, len(counts), len(violations),
    )
    return CycleReport(
        total_primary=machine.total_primary,
        secondary_role=config.role,
        cycle_counts=counts,
        constancy=constancy,
        violations=violations,
        timeline=timeline,
        note=note,
        primary_label=config.primary.label(),
        secondary_label=config.secondary.label(),
    )
