"""
Factory for picking the column parser that matches a log source, plus text and file entry points that hand normalized records to the engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Sequence, Tuple, Union

from engine.records import Record
from loaders.exceptions import EmptyLog, UnsupportedSource
from loaders.parsers import parse_agilent, parse_md8475a
from loaders.sources import LogSource, detect_source

log = logging.getLogger(__name__)

Parser = Callable[[Sequence[str]], Tuple[str, List[Record]]]

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ParsedLog:
    source: LogSource
    delimiter: str
    records: List[Record] = field(default_factory=list)


class LoaderFactory:

    @staticmethod
    def create(source: LogSource) -> Parser:
        if source == LogSource.agilent:
            return parse_agilent
        if source == LogSource.md8475a:
            return parse_md8475a
        raise UnsupportedSource(f"Unsupported log source: {source!r}")


def load_lines(lines: Sequence[str], source: Union[LogSource, str] = LogSource.auto) -> ParsedLog:
    lines = [line for line in lines if line.strip()]
    if len(lines) < 2:
        raise EmptyLog("log has too few lines to analyze")

    try:
        resolved = LogSource(source)
    except ValueError as exc:
        raise UnsupportedSource(f"Unsupported log source: {source!r}") from exc
    if resolved == LogSource.auto:
        resolved = detect_source(lines)

    delimiter, records = LoaderFactory.create(resolved)(lines)
    log.info("loaded %d record(s) source=%s delimiter=%r", len(records), resolved.value, delimiter)
    return ParsedLog(source=resolved, delimiter=delimiter, records=records)


def load_text(text: str, source: Union[LogSource, str] = LogSource.auto) -> ParsedLog:
    return load_lines(_LINE_SPLIT.split(text or ""), source)


def read_log(path: Union[str, Path], source: Union[LogSource, str] = LogSource.auto) -> ParsedLog:
    with open(path, encoding="utf-8", errors="replace") as fh:
        lines = [line.rstrip("\r\n") for line in fh if line.strip()]
    return load_lines(lines, source)
