from __future__ import annotations

import asyncio
from typing import Union

from fastapi import APIRouter

from api.requests import AnalyzeRequest
from api.responses import CycleReport, DeltaReport
from api.routes.exception import handle_exceptions
from engine.analyzer import pdp_preset, run
from engine.enums import Mode

router = APIRouter(tags=["Analysis"])


async def run_analysis(req: AnalyzeRequest) -> Union[DeltaReport, CycleReport]:
    return await asyncio.to_thread(run, req.records, req)


@router.post("/analyze", response_model=Union[DeltaReport, CycleReport], summary="Analyze records in the requested mode")
@handle_exceptions
async def analyze(req: AnalyzeRequest) -> Union[DeltaReport, CycleReport]:
    return await run_analysis(req)


@router.post("/analyze/deltas", response_model=DeltaReport, summary="Deltas between repeats of one message")
@handle_exceptions
async def analyze_deltas(req: AnalyzeRequest) -> DeltaReport:
    return await run_analysis(req.model_copy(update={"mode": Mode.single_target}))


@router.post("/analyze/cycles", response_model=CycleReport, summary="Primary/secondary cycle correlation")
@handle_exceptions
async def analyze_cycles(req: AnalyzeRequest) -> CycleReport:
    return await run_analysis(req.model_copy(update={"mode": Mode.dual_correlation}))


@router.post("/analyze/pdp", response_model=CycleReport, summary="PDP context reject timeline")
@handle_exceptions
async def analyze_pdp(req: AnalyzeRequest) -> CycleReport:
    return await run_analysis(pdp_preset(req))
