"""
Tagged correlation events and the configuration that turns a record stream into them.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from engine import clock, matchers
from engine.enums import EventKind, SecondaryRole
from engine.exceptions import InvalidConfiguration
from engine.matchers import Matcher
from engine.records import Record


@dataclass(frozen=True)
class CorrelationConfig:
    primary: Matcher
    secondary: Matcher = field(default_factory=matchers.none)
    secondary_is_closer: bool = False
    min_primary: Optional[int] = None
    max_primary: Optional[int] = None

    def __post_init__(self) -> None:
        if self.primary is None or not self.primary.configured:
            raise InvalidConfiguration("dual-correlation requires a primary matcher")
        if self.secondary_is_closer and not self.secondary.configured:
            raise InvalidConfiguration("secondary_is_closer requires a secondary matcher")
        if (
            self.min_primary is not None
            and self.max_primary is not None
            and self.min_primary > self.max_primary
        ):
            raise InvalidConfiguration(
                f"cycle range [{self.min_primary}, {self.max_primary}] is empty"
            )

    @property
    def role(self) -> SecondaryRole:
        return SecondaryRole.of(self.secondary.configured, self.secondary_is_closer)


@dataclass(frozen=True)
class CorrelationEvent:
    kind: EventKind
    raw_timestamp: str
    time: int
    source_index: int
    message: str = ""


def iter_events(records: Iterable[Record], config: CorrelationConfig) -> Iterator[CorrelationEvent]:
    secondary_kind = EventKind.closer if config.secondary_is_closer else EventKind.marker
    for index, record in enumerate(records):
        message = record.message or ""
        if config.primary.matches(message):
            kind = EventKind.primary
        elif config.secondary.matches(message):
            kind = secondary_kind
        else:
            continue
        t = clock.parse(record.timestamp)
        if t is None:
            continue
        yield CorrelationEvent(
            kind=kind,
            raw_timestamp=record.timestamp,
            time=t,
            source_index=index,
            message=message,
        )


def build_events(records: Iterable[Record], config: CorrelationConfig) -> list[CorrelationEvent]:
    return list(iter_events(records, config))
