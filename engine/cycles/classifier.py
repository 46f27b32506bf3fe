"""
Median-seeded bucketing of retry deltas into intra-cycle, inter-cycle and anomalously long pauses, used to estimate how many retry cycles a target message went through and how many attempts each cycle held.

The median of all deltas seeds the thresholds because short retry bursts
usually dominate the sample.  The result is a best-effort description of the
pattern, never a guarantee.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from engine import clock
from config import settings


@dataclass(frozen=True)
class CycleClassification:
    cycles: int
    attempts_per_cycle: int
    intra_median: Optional[float]
    inter_median: Optional[float]
    intra_deltas: List[float] = field(default_factory=list)
    inter_deltas: List[float] = field(default_factory=list)
    long_deltas: List[float] = field(default_factory=list)
    intra_max: float = 0.0
    inter_max: float = 0.0


def _median(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return float(np.median(np.asarray(values, dtype=float)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify(
    delta_micros: Sequence[int],
    intra_factor: float | None = None,
    inter_factor: float | None = None,
    attempt_correction: int | None = None,
) -> Optional[CycleClassification]:
    if intra_factor is None:
        intra_factor = settings.classifier_intra_factor
    if inter_factor is None:
        inter_factor = settings.classifier_inter_factor
    if attempt_correction is None:
        attempt_correction = settings.classifier_attempt_correction
    if not delta_micros:
        return None

    seconds = [clock.to_seconds(d) for d in delta_micros]
    reference = _median(seconds)
    intra_max = reference * intra_factor
    inter_max = reference * inter_factor

    intra: List[float] = []
    inter: List[float] = []
    long: List[float] = []
    for value in seconds:
        if value <= intra_max:
            intra.append(value)
        elif value <= inter_max:
            inter.append(value)
        else:
            long.append(value)

    cycles = len(inter) + 1 if inter else 1
    attempts = _round_half_up(len(intra) / cycles) + attempt_correction

    intra_median = _median(intra)
    return CycleClassification(
        cycles=cycles,
        attempts_per_cycle=attempts,
        intra_median=intra_median if intra_median is not None else reference,
        inter_median=_median(inter),
        intra_deltas=intra,
        inter_deltas=inter,
        long_deltas=long,
        intra_max=intra_max,
        inter_max=inter_max,
    )
