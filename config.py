"""
Constants and configuration for cyclescope.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import List

from pydantic_settings import BaseSettings


CYCLESCOPE_VERSION = "1.0.0"

CYCLESCOPE_LOG_LEVEL = os.getenv("CYCLESCOPE_LOG_LEVEL", "INFO").upper()
CYCLESCOPE_API_HOST = os.getenv("CYCLESCOPE_API_HOST", "0.0.0.0")
CYCLESCOPE_API_PORT = int(os.getenv("CYCLESCOPE_API_PORT", "4323"))

# upper bound on records accepted in a single request body
CYCLESCOPE_MAX_RECORDS = int(os.getenv("CYCLESCOPE_MAX_RECORDS", "2000000"))

# preset used by the PDP reject timeline
PDP_REJECT_PATTERN = r"activate\s*pdp\s*context.*reject"
DETACH_TERM = "detach"
GMM_DETACH_REQUEST = "GMM - Detach Request"

# column delimiters tried when sniffing a log header, in priority order
DELIMITER_CANDIDATES: List[str] = [",", "\t", ";", "|"]


class Settings(BaseSettings):
    log_level: str = CYCLESCOPE_LOG_LEVEL
    api_host: str = CYCLESCOPE_API_HOST
    api_port: int = CYCLESCOPE_API_PORT
    max_records: int = CYCLESCOPE_MAX_RECORDS

    # cycle classifier heuristics; thresholds are multiples of the median delta
    classifier_intra_factor: float = 1.35
    classifier_inter_factor: float = 3.0
    # counts the last attempt of each cycle, which has no following intra delta
    classifier_attempt_correction: int = 1

    # accepted primary events per closed cycle, inclusive
    cycle_min_primary: int = 2
    cycle_max_primary: int = 5

    # dual-event correlation presets
    primary_preset_pattern: str = PDP_REJECT_PATTERN
    closer_preset_term: str = DETACH_TERM
    # exact secondary messages treated as closers unless the caller says otherwise
    closing_messages: List[str] = [GMM_DETACH_REQUEST]

    # loaders
    delimiter_candidates: List[str] = DELIMITER_CANDIDATES
    md8475a_header_prefix: str = "no.,progress time"
    md8475a_banner_markers: List[str] = ["message log", "simulation start time"]

    model_config = {
        "env_prefix": "CYCLESCOPE_",
        "extra": "ignore",
    }


settings = Settings()
