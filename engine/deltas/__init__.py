"""
Delta engine: successive-occurrence intervals for a single target message, plus the whole-log per-message catalog.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.deltas.compute import (
    DeltaLine,
    DeltaSummary,
    InsufficientOccurrences,
    delta_lines,
    deltas,
    summary,
)
from engine.deltas.catalog import DeltaRow, MessageCatalog, MessageStats, iter_delta_rows, message_stats

__all__ = [
    "DeltaLine",
    "DeltaSummary",
    "InsufficientOccurrences",
    "delta_lines",
    "deltas",
    "summary",
    "DeltaRow",
    "MessageCatalog",
    "MessageStats",
    "iter_delta_rows",
    "message_stats",
]
