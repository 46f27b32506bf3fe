from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from engine import clock, matchers
from engine.correlation import CorrelationConfig, correlate
from engine.correlation import CycleReport as CycleResult
from engine.cycles import classify
from engine.deltas import DeltaLine, InsufficientOccurrences, delta_lines, summary
from engine.enums import MatcherKind, Mode, ReportStatus
from engine.exceptions import InvalidConfiguration
from engine.matchers import Matcher
from engine.records import Record, count_malformed, extract
from api.requests import AnalysisOptions, MatcherSpec, RecordIn
from api.responses import (
    Constancy,
    CycleClassification as CycleClassificationModel,
    CycleReport as CycleReportModel,
    CycleViolation as CycleViolationModel,
    DeltaLine as DeltaLineModel,
    DeltaReport,
    DeltaSummary as DeltaSummaryModel,
    TimelineEntry as TimelineEntryModel,
)
from config import settings

log = logging.getLogger(__name__)

Report = Union[DeltaReport, CycleReportModel]


@dataclass(frozen=True)
class ResolvedConfig:
    mode: Mode
    target_message: Optional[str] = None
    correlation: Optional[CorrelationConfig] = None
    intra_factor: Optional[float] = None
    inter_factor: Optional[float] = None


def _matcher(spec: Optional[MatcherSpec]) -> Matcher:
    if spec is None:
        return matchers.none()
    return matchers.from_spec(spec.kind, spec.value)


def is_closing(secondary: Matcher) -> bool:
    if secondary.kind is MatcherKind.word:
        return secondary.value.lower() == settings.closer_preset_term.lower()
    if secondary.kind is MatcherKind.exact:
        return secondary.value in settings.closing_messages
    return False


def resolve(options: AnalysisOptions) -> ResolvedConfig:
    """Validate *options* and build the engine configuration.

    Raises :class:`InvalidConfiguration` before any record is touched.
    """
    if options.mode == Mode.single_target:
        if not options.target_message:
            raise InvalidConfiguration("single-target mode requires target_message")
        intra = options.intra_factor if options.intra_factor is not None else settings.classifier_intra_factor
        inter = options.inter_factor if options.inter_factor is not None else settings.classifier_inter_factor
        if intra >= inter:
            raise InvalidConfiguration(
                f"intra_factor ({intra}) must be smaller than inter_factor ({inter})"
            )
        return ResolvedConfig(
            mode=Mode.single_target,
            target_message=options.target_message,
            intra_factor=options.intra_factor,
            inter_factor=options.inter_factor,
        )

    if options.primary is None or options.primary.kind == MatcherKind.none:
        raise InvalidConfiguration("dual-correlation mode requires a primary matcher")
    primary = _matcher(options.primary)
    secondary = _matcher(options.secondary)
    closer = options.secondary_is_closer
    if closer is None:
        closer = secondary.configured and is_closing(secondary)
    return ResolvedConfig(
        mode=Mode.dual_correlation,
        correlation=CorrelationConfig(
            primary=primary,
            secondary=secondary,
            secondary_is_closer=closer,
            min_primary=options.min_primary,
            max_primary=options.max_primary,
        ),
    )


def pdp_preset(options: AnalysisOptions) -> AnalysisOptions:
    primary = MatcherSpec(kind=MatcherKind.regex, value=settings.primary_preset_pattern)
    return options.model_copy(update={"mode": Mode.dual_correlation, "primary": primary})


def to_records(items: Iterable[Union[RecordIn, Record]]) -> List[Record]:
    return [
        item if isinstance(item, Record) else Record(timestamp=item.timestamp, message=item.message)
        for item in items
    ]


def _delta_line(line: DeltaLine) -> DeltaLineModel:
    return DeltaLineModel(
        ordinal=line.ordinal,
        start_timestamp=line.start.raw_timestamp,
        end_timestamp=line.end.raw_timestamp,
        delta=clock.format_time(line.micros),
        delta_micros=line.micros,
    )


def run_single_target(
    records: Sequence[Record],
    target_message: str,
    intra_factor: float | None = None,
    inter_factor: float | None = None,
) -> DeltaReport:
    occurrences = extract(records, target_message)
    malformed = count_malformed(records, target_message)
    lines = delta_lines(occurrences)

    if isinstance(lines, InsufficientOccurrences):
        log.info("single-target %r: %d occurrence(s), not enough for deltas", target_message, lines.occurrences)
        return DeltaReport(
            status=ReportStatus.insufficient_occurrences,
            target_message=target_message,
            occurrences=lines.occurrences,
            malformed_timestamps=malformed,
            detail=lines.describe(target_message),
        )

    values = [line.micros for line in lines]
    stats = summary(values)
    classification = classify(values, intra_factor=intra_factor, inter_factor=inter_factor)
    log.info(
        "single-target %r: occurrences=%d deltas=%d cycles=%s",
        target_message, len(occurrences), stats.count,
        classification.cycles if classification else "-",
    )
    return DeltaReport(
        status=ReportStatus.ok,
        target_message=target_message,
        occurrences=len(occurrences),
        malformed_timestamps=malformed,
        summary=DeltaSummaryModel(
            count=stats.count,
            min=clock.format_time(stats.minimum),
            max=clock.format_time(stats.maximum),
            mean=clock.format_time(stats.mean),
            min_micros=stats.minimum,
            max_micros=stats.maximum,
            mean_micros=stats.mean,
        ),
        classification=CycleClassificationModel(
            cycles=classification.cycles,
            attempts_per_cycle=classification.attempts_per_cycle,
            intra_median_seconds=classification.intra_median,
            inter_median_seconds=classification.inter_median,
            intra_max_seconds=classification.intra_max,
            inter_max_seconds=classification.inter_max,
            intra_deltas=classification.intra_deltas,
            inter_deltas=classification.inter_deltas,
            long_deltas=classification.long_deltas,
        ) if classification else None,
        delta_lines=[_delta_line(line) for line in lines],
    )


def _report_model(result: CycleResult, malformed: int) -> CycleReportModel:
    return CycleReportModel(
        primary=result.primary_label,
        secondary=result.secondary_label,
        secondary_role=result.secondary_role,
        total_primary=result.total_primary,
        malformed_timestamps=malformed,
        cycle_counts=result.cycle_counts,
        constancy=Constancy(
            status=result.constancy.status,
            value=result.constancy.value,
            values=result.constancy.values,
        ),
        violations=[
            CycleViolationModel(kind=v.kind, detail=v.detail, cycle=v.cycle, count=v.count)
            for v in result.violations
        ],
        timeline=[
            TimelineEntryModel(
                kind=e.kind,
                ordinal=e.ordinal,
                start_timestamp=e.start_timestamp,
                end_timestamp=e.end_timestamp,
                delta=clock.format_time(e.micros) if e.micros is not None else None,
                delta_micros=e.micros,
                timestamp=e.timestamp,
                message=e.message,
            )
            for e in result.timeline
        ],
        note=result.note,
    )


def run_dual_correlation(records: Sequence[Record], config: CorrelationConfig) -> CycleReportModel:
    result = correlate(records, config)

    def involved(message: str) -> bool:
        return config.primary.matches(message) or config.secondary.matches(message)

    malformed = count_malformed(records, involved)
    log.info(
        "dual-correlation primary=%s secondary=%s role=%s: primary=%d cycles=%d violations=%d",
        result.primary_label, result.secondary_label, result.secondary_role.value,
        result.total_primary, len(result.cycle_counts), len(result.violations),
    )
    return _report_model(result, malformed)


def run(records: Iterable[Union[RecordIn, Record]], options: AnalysisOptions) -> Report:
    resolved = resolve(options)
    normalized = to_records(records)
    if resolved.mode == Mode.single_target:
        return run_single_target(
            normalized,
            resolved.target_message,
            intra_factor=resolved.intra_factor,
            inter_factor=resolved.inter_factor,
        )
    return run_dual_correlation(normalized, resolved.correlation)
