from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from config import settings
from engine.enums import MatcherKind, Mode
from loaders.sources import LogSource


class MatcherSpec(BaseModel):
    kind: MatcherKind = MatcherKind.exact
    value: str = ""


class RecordIn(BaseModel):
    timestamp: str
    message: str


class AnalysisOptions(BaseModel):
    mode: Mode = Mode.single_target
    target_message: Optional[str] = None
    primary: Optional[MatcherSpec] = None
    secondary: MatcherSpec = Field(default_factory=lambda: MatcherSpec(kind=MatcherKind.none))
    # null derives the role from the configured closing messages
    secondary_is_closer: Optional[bool] = None
    intra_factor: Optional[float] = Field(default=None, gt=0.0, le=100.0)
    inter_factor: Optional[float] = Field(default=None, gt=0.0, le=100.0)
    min_primary: Optional[int] = Field(default=None, ge=1)
    max_primary: Optional[int] = Field(default=None, ge=1)


class AnalyzeRequest(AnalysisOptions):
    records: List[RecordIn] = Field(default_factory=list)

    @field_validator("records")
    @classmethod
    def cap_records(cls, v: List[RecordIn]) -> List[RecordIn]:
        if len(v) > settings.max_records:
            raise ValueError(f"too many records: {len(v)} > {settings.max_records}")
        return v


class LogTextRequest(BaseModel):
    text: str
    source: LogSource = LogSource.auto


class LogAnalyzeRequest(AnalysisOptions):
    text: str
    source: LogSource = LogSource.auto
