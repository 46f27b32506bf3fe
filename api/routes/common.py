"""
Shared helpers for API route modules: turning engine results into response models and CSV text.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import io
from typing import Iterable

from api.responses import MessageCatalog, MessageStats
from engine import clock
from engine.deltas import DeltaRow
from engine.deltas import MessageCatalog as CatalogResult

DELTA_CSV_HEADER = ["Message", "PrevTimestamp", "CurrTimestamp", "Delta(HH:MM:SS.ffffff)", "DeltaMicros"]


def catalog_model(source: str, catalog: CatalogResult) -> MessageCatalog:
    return MessageCatalog(
        source=source,
        records_seen=catalog.records_seen,
        records_parsed=catalog.records_parsed,
        messages=[
            MessageStats(
                message=s.message,
                count=s.count,
                min=clock.format_time(s.minimum),
                mean=clock.format_time(s.mean),
                max=clock.format_time(s.maximum),
                min_micros=s.minimum,
                mean_micros=s.mean,
                max_micros=s.maximum,
            )
            for s in catalog.messages
        ],
    )


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def delta_csv(rows: Iterable[DeltaRow]) -> str:
    buf = io.StringIO()
    buf.write(",".join(DELTA_CSV_HEADER) + "\n")
    for row in rows:
        # text columns are always quoted; the delta and micros columns never are
        buf.write(",".join([
            _quoted(row.message),
            _quoted(row.prev_timestamp),
            _quoted(row.curr_timestamp),
            clock.format_time(row.micros),
            str(row.micros),
        ]) + "\n")
    return buf.getvalue()
