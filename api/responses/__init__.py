"""
Response models for API endpoints.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

import numpy as np
from pydantic import BaseModel, Field, model_serializer

from engine.enums import (
    ConstancyStatus,
    EntryKind,
    ReportStatus,
    SecondaryRole,
    ViolationKind,
)


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class DeltaLine(NpModel):

    ordinal: int
    start_timestamp: str
    end_timestamp: str
    delta: str
    delta_micros: int


class DeltaSummary(NpModel):

    count: int
    min: str
    max: str
    mean: str
    min_micros: int
    max_micros: int
    mean_micros: int


class CycleClassification(NpModel):

    cycles: int
    attempts_per_cycle: int
    intra_median_seconds: Optional[float] = None
    inter_median_seconds: Optional[float] = None
    intra_max_seconds: float
    inter_max_seconds: float
    intra_deltas: List[float] = Field(default_factory=list)
    inter_deltas: List[float] = Field(default_factory=list)
    long_deltas: List[float] = Field(default_factory=list)


class DeltaReport(NpModel):

    mode: Literal["single-target"] = "single-target"
    status: ReportStatus
    target_message: str
    occurrences: int
    malformed_timestamps: int = 0
    summary: Optional[DeltaSummary] = None
    classification: Optional[CycleClassification] = None
    delta_lines: List[DeltaLine] = Field(default_factory=list)
    detail: Optional[str] = None


class TimelineEntry(NpModel):

    kind: EntryKind
    ordinal: Optional[int] = None
    start_timestamp: Optional[str] = None
    end_timestamp: Optional[str] = None
    delta: Optional[str] = None
    delta_micros: Optional[int] = None
    timestamp: Optional[str] = None
    message: str = ""


class Constancy(NpModel):

    status: ConstancyStatus
    value: Optional[int] = None
    values: List[int] = Field(default_factory=list)


class CycleViolation(NpModel):

    kind: ViolationKind
    detail: str
    cycle: Optional[int] = None
    count: Optional[int] = None


class CycleReport(NpModel):

    mode: Literal["dual-correlation"] = "dual-correlation"
    primary: str
    secondary: str
    secondary_role: SecondaryRole
    total_primary: int
    malformed_timestamps: int = 0
    cycle_counts: List[int] = Field(default_factory=list)
    constancy: Constancy
    violations: List[CycleViolation] = Field(default_factory=list)
    timeline: List[TimelineEntry] = Field(default_factory=list)
    note: Optional[str] = None


class Record(BaseModel):

    timestamp: str
    message: str


class ParsedLog(BaseModel):

    source: str
    delimiter: str
    record_count: int
    records: List[Record] = Field(default_factory=list)


class MessageStats(NpModel):

    message: str
    count: int
    min: str
    mean: str
    max: str
    min_micros: int
    mean_micros: int
    max_micros: int


class MessageCatalog(NpModel):

    source: str
    records_seen: int
    records_parsed: int
    messages: List[MessageStats] = Field(default_factory=list)
