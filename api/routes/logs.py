from __future__ import annotations

import asyncio
from typing import Union

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from api.requests import LogAnalyzeRequest, LogTextRequest
from api.responses import CycleReport, DeltaReport, MessageCatalog, ParsedLog, Record
from api.routes.common import catalog_model, delta_csv
from api.routes.exception import handle_exceptions
from engine.analyzer import resolve, run
from engine.deltas import iter_delta_rows, message_stats
from loaders import LogSource, load_text

router = APIRouter(tags=["Logs"])


def _parsed_log(text: str, source: LogSource) -> ParsedLog:
    parsed = load_text(text, source)
    return ParsedLog(
        source=parsed.source.value,
        delimiter=parsed.delimiter,
        record_count=len(parsed.records),
        records=[Record(timestamp=r.timestamp, message=r.message) for r in parsed.records],
    )


def _analyze(req: LogAnalyzeRequest) -> Union[DeltaReport, CycleReport]:
    # configuration errors are reported before the log text is read
    resolve(req)
    parsed = load_text(req.text, req.source)
    return run(parsed.records, req)


def _catalog(text: str, source: LogSource) -> MessageCatalog:
    parsed = load_text(text, source)
    return catalog_model(parsed.source.value, message_stats(parsed.records))


def _csv(text: str, source: LogSource) -> str:
    return delta_csv(iter_delta_rows(load_text(text, source).records))


@router.post("/logs/parse", response_model=ParsedLog)
@handle_exceptions
async def parse_log(req: LogTextRequest) -> ParsedLog:
    return await asyncio.to_thread(_parsed_log, req.text, req.source)


@router.post("/logs/analyze", response_model=Union[DeltaReport, CycleReport])
@handle_exceptions
async def analyze_log(req: LogAnalyzeRequest) -> Union[DeltaReport, CycleReport]:
    return await asyncio.to_thread(_analyze, req)


@router.post("/logs/messages", response_model=MessageCatalog)
@handle_exceptions
async def log_messages(req: LogTextRequest) -> MessageCatalog:
    return await asyncio.to_thread(_catalog, req.text, req.source)


@router.post("/logs/deltas.csv", response_class=PlainTextResponse)
@handle_exceptions
async def log_deltas_csv(req: LogTextRequest) -> PlainTextResponse:
    body = await asyncio.to_thread(_csv, req.text, req.source)
    return PlainTextResponse(body, media_type="text/csv")
