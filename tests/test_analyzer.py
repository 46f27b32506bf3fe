"""
Test cases for the analysis dispatcher: configuration resolution, closer derivation, single-target reports and dual-correlation reports.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from api.requests import AnalysisOptions, AnalyzeRequest, MatcherSpec, RecordIn
from api.responses import CycleReport, DeltaReport
from config import settings
from engine import matchers
from engine.analyzer import is_closing, pdp_preset, resolve, run, to_records
from engine.enums import ConstancyStatus, MatcherKind, Mode, ReportStatus, SecondaryRole
from engine.exceptions import InvalidConfiguration

from conftest import DETACH, REJECT


def dual(**kw):
    return AnalysisOptions(
        mode=Mode.dual_correlation,
        primary=MatcherSpec(kind=MatcherKind.regex, value="pdp context reject"),
        **kw,
    )


def test_single_target_report():
    records = [
        RecordIn(timestamp="10:00:00.000000", message="X"),
        RecordIn(timestamp="10:00:05.000000", message="X"),
        RecordIn(timestamp="oops", message="X"),
        RecordIn(timestamp="10:00:09.500000", message="X"),
    ]
    report = run(records, AnalysisOptions(target_message="X"))
    assert isinstance(report, DeltaReport)
    assert report.status == ReportStatus.ok
    assert report.occurrences == 3
    assert report.malformed_timestamps == 1
    assert [l.delta for l in report.delta_lines] == ["00:00:05.000000", "00:00:04.500000"]
    assert report.summary.count == 2
    assert report.summary.min == "00:00:04.500000"
    assert report.summary.max == "00:00:05.000000"
    assert report.summary.mean == "00:00:04.750000"
    assert report.classification.cycles == 1


def test_single_target_insufficient():
    report = run([RecordIn(timestamp="10:00:00", message="X")], AnalysisOptions(target_message="X"))
    assert report.status == ReportStatus.insufficient_occurrences
    assert report.occurrences == 1
    assert report.summary is None and report.delta_lines == []
    assert "(1)" in report.detail


def test_single_target_requires_message():
    with pytest.raises(InvalidConfiguration):
        resolve(AnalysisOptions())


def test_intra_factor_must_stay_below_inter_factor(monkeypatch):
    with pytest.raises(InvalidConfiguration):
        resolve(AnalysisOptions(target_message="X", intra_factor=3.0, inter_factor=3.0))
    with pytest.raises(InvalidConfiguration):
        resolve(AnalysisOptions(target_message="X", intra_factor=4.0))

    monkeypatch.setattr(settings, "classifier_inter_factor", 1.2)
    with pytest.raises(InvalidConfiguration):
        resolve(AnalysisOptions(target_message="X"))
    assert resolve(AnalysisOptions(target_message="X", intra_factor=1.1)).intra_factor == 1.1


def test_dual_requires_primary_before_touching_data():
    class Exploding:
        def __iter__(self):
            raise AssertionError("records must not be read")

    with pytest.raises(InvalidConfiguration):
        run(Exploding(), AnalysisOptions(mode=Mode.dual_correlation))
    with pytest.raises(InvalidConfiguration):
        resolve(AnalysisOptions(mode=Mode.dual_correlation, primary=MatcherSpec(kind=MatcherKind.none)))


@pytest.mark.parametrize("spec,closing", [
    (MatcherSpec(kind=MatcherKind.exact, value=DETACH), True),
    (MatcherSpec(kind=MatcherKind.word, value="Detach"), True),
    (MatcherSpec(kind=MatcherKind.exact, value="GMM - Detach Accept"), False),
    (MatcherSpec(kind=MatcherKind.regex, value="detach"), False),
    (MatcherSpec(kind=MatcherKind.none), False),
])
def test_closer_is_derived_when_unspecified(spec, closing):
    resolved = resolve(dual(secondary=spec))
    assert resolved.correlation.secondary_is_closer is closing


def test_explicit_closer_flag_wins(monkeypatch):
    resolved = resolve(dual(secondary=MatcherSpec(kind=MatcherKind.exact, value=DETACH), secondary_is_closer=False))
    assert resolved.correlation.role is SecondaryRole.marker
    resolved = resolve(dual(secondary=MatcherSpec(kind=MatcherKind.exact, value="Custom Stop"), secondary_is_closer=True))
    assert resolved.correlation.role is SecondaryRole.closer

    monkeypatch.setattr(settings, "closing_messages", ["Custom Stop"])
    assert is_closing(matchers.exact("Custom Stop"))
    assert not is_closing(matchers.exact(DETACH))


def test_closer_flag_without_secondary_is_invalid():
    with pytest.raises(InvalidConfiguration):
        resolve(dual(secondary_is_closer=True))


def test_dual_report(retry_records):
    report = run(retry_records, dual(secondary=MatcherSpec(kind=MatcherKind.exact, value=DETACH)))
    assert isinstance(report, CycleReport)
    assert report.cycle_counts == [3, 3]
    assert report.constancy.status == ConstancyStatus.ok
    assert report.constancy.value == 3
    assert report.violations == []
    assert report.timeline[0].delta == "00:00:05.000000"
    assert report.secondary == f"exact:{DETACH}"


def test_pdp_preset_sets_primary(retry_records):
    options = pdp_preset(AnalysisOptions(secondary=MatcherSpec(kind=MatcherKind.word, value="detach")))
    assert options.mode == Mode.dual_correlation
    assert options.primary.value == settings.primary_preset_pattern
    report = run(retry_records, options)
    assert report.cycle_counts == [3, 3]
    assert report.secondary_role == SecondaryRole.closer


def test_run_is_idempotent(retry_records):
    options = dual(secondary=MatcherSpec(kind=MatcherKind.exact, value=DETACH))
    assert run(retry_records, options).model_dump() == run(retry_records, options).model_dump()


def test_to_records_accepts_both_shapes(retry_records):
    mixed = [RecordIn(timestamp="10:00:00", message=REJECT), retry_records[0]]
    out = to_records(mixed)
    assert out[0].message == REJECT and out[1] is retry_records[0]


def test_request_record_cap(monkeypatch):
    monkeypatch.setattr(settings, "max_records", 1)
    with pytest.raises(ValueError):
        AnalyzeRequest(target_message="X", records=[{"timestamp": "10:00:00", "message": "X"}] * 2)
