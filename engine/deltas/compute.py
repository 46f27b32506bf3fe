"""
Delta computation between successive occurrences of one message, with count/min/max/mean aggregation over exact integer microseconds.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from engine import clock
from engine.records import Occurrence


MIN_OCCURRENCES = 2


@dataclass(frozen=True)
class InsufficientOccurrences:
    occurrences: int
    required: int = MIN_OCCURRENCES

    def describe(self, target: str = "") -> str:
        subject = f'Message "{target}"' if target else "Target"
        return f"{subject} has too few occurrences ({self.occurrences}); at least {self.required} required."


@dataclass(frozen=True)
class DeltaLine:
    ordinal: int
    start: Occurrence
    end: Occurrence
    micros: int


@dataclass(frozen=True)
class DeltaSummary:
    count: int
    minimum: int
    maximum: int
    mean: int


def _check(occurrences: Sequence[Occurrence]) -> InsufficientOccurrences | None:
    if len(occurrences) < MIN_OCCURRENCES:
        return InsufficientOccurrences(occurrences=len(occurrences))
    return None


def delta_lines(occurrences: Sequence[Occurrence]) -> Union[List[DeltaLine], InsufficientOccurrences]:
    short = _check(occurrences)
    if short is not None:
        return short
    return [
        DeltaLine(ordinal=i + 1, start=a, end=b, micros=clock.elapsed(a.time, b.time))
        for i, (a, b) in enumerate(zip(occurrences, occurrences[1:]))
    ]


def deltas(occurrences: Sequence[Occurrence]) -> Union[List[int], InsufficientOccurrences]:
    lines = delta_lines(occurrences)
    if isinstance(lines, InsufficientOccurrences):
        return lines
    return [line.micros for line in lines]


def summary(values: Sequence[int]) -> DeltaSummary:
    if not values:
        raise ValueError("summary requires at least one delta")
    # integer sum keeps large microsecond totals exact
    total = sum(values)
    return DeltaSummary(
        count=len(values),
        minimum=min(values),
        maximum=max(values),
        mean=total // len(values),
    )
