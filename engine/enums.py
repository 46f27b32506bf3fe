"""
Enumerations for analysis modes, matcher kinds, correlation events, constancy verdicts and violations

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum


class Mode(str, Enum):
    single_target = "single-target"
    dual_correlation = "dual-correlation"


class MatcherKind(str, Enum):
    none = "none"
    exact = "exact"
    word = "word"
    regex = "regex"


class EventKind(str, Enum):
    primary = "primary"
    marker = "marker"
    closer = "closer"


class SecondaryRole(str, Enum):
    none = "none"
    marker = "marker"
    closer = "closer"

    @classmethod
    def of(cls, configured: bool, is_closer: bool) -> SecondaryRole:
        if not configured:
            return cls.none
        return cls.closer if is_closer else cls.marker


class ConstancyStatus(str, Enum):
    ok = "ok"
    varied = "varied"
    not_evaluated = "not_evaluated"


class ViolationKind(str, Enum):
    out_of_range = "out_of_range"
    inconstant = "inconstant"
    unterminated = "unterminated"


class EntryKind(str, Enum):
    delta = "delta"
    marker = "marker"
    closer = "closer"


class ReportStatus(str, Enum):
    ok = "ok"
    insufficient_occurrences = "insufficient_occurrences"
