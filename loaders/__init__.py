"""
Loaders that turn raw test-equipment log text into ordered ``Record`` sequences for the analysis engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from loaders.factory import LoaderFactory, ParsedLog, load_lines, load_text, read_log
from loaders.sources import LogSource, detect_delimiter, detect_source

__all__ = [
    "LoaderFactory",
    "ParsedLog",
    "load_lines",
    "load_text",
    "read_log",
    "LogSource",
    "detect_delimiter",
    "detect_source",
]
