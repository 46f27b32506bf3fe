"""
Dual-event correlation: a primary event stream interleaved with an optional secondary marker or closer, folded by a single state machine into a cycle report.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.events import CorrelationConfig, CorrelationEvent, build_events, iter_events
from engine.correlation.correlator import (
    ConstancyVerdict,
    CycleReport,
    CycleStateMachine,
    CycleViolation,
    TimelineEntry,
    correlate,
    evaluate_cycles,
)

__all__ = [
    "CorrelationConfig",
    "CorrelationEvent",
    "build_events",
    "iter_events",
    "ConstancyVerdict",
    "CycleReport",
    "CycleStateMachine",
    "CycleViolation",
    "TimelineEntry",
    "correlate",
    "evaluate_cycles",
]
