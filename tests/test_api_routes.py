"""
Route-level tests for the analysis and log endpoints, both awaited directly and through the ASGI test client.
"""

from __future__ import annotations

import asyncio
import time

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from api.requests import AnalyzeRequest, LogTextRequest
from api.routes import analyze as analyze_route
from api.routes import logs as logs_route
from main import app

from conftest import DETACH, REJECT

client = TestClient(app)

RETRY = [
    {"timestamp": "10:00:00.000000", "message": REJECT},
    {"timestamp": "10:00:05.000000", "message": REJECT},
    {"timestamp": "10:00:06.000000", "message": DETACH},
    {"timestamp": "10:00:30.000000", "message": REJECT},
    {"timestamp": "10:00:35.000000", "message": REJECT},
    {"timestamp": "10:00:36.000000", "message": DETACH},
]

LOG_TEXT = "Timestamp,Message\n23:59:59.000000,Attach Request\n00:00:01.000000,Attach Request\n00:00:02,Paging"


@pytest.mark.asyncio
async def test_analyze_deltas_route_direct():
    req = AnalyzeRequest(
        target_message="X",
        records=[
            {"timestamp": "10:00:00.000000", "message": "X"},
            {"timestamp": "10:00:05.000000", "message": "X"},
            {"timestamp": "10:00:09.500000", "message": "X"},
        ],
    )
    out = await analyze_route.analyze_deltas(req)
    payload = out.model_dump(mode="json")
    assert payload["mode"] == "single-target"
    assert [l["delta"] for l in payload["delta_lines"]] == ["00:00:05.000000", "00:00:04.500000"]
    assert payload["summary"]["min"] == "00:00:04.500000"
    assert isinstance(payload["classification"]["intra_median_seconds"], float)


@pytest.mark.asyncio
async def test_invalid_configuration_maps_to_422():
    with pytest.raises(HTTPException) as exc:
        await analyze_route.analyze_cycles(AnalyzeRequest(records=RETRY))
    assert exc.value.status_code == 422


@pytest.mark.asyncio
async def test_bad_log_maps_to_400():
    with pytest.raises(HTTPException) as exc:
        await logs_route.parse_log(LogTextRequest(text="a,b\n1,2"))
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_analysis_runs_off_the_event_loop(monkeypatch):
    def slow_run(records, options):
        time.sleep(0.5)
        return "done"

    monkeypatch.setattr(analyze_route, "run", slow_run)
    ticks = 0
    finished = False

    async def ticker():
        nonlocal ticks
        while not finished:
            ticks += 1
            await asyncio.sleep(0.01)

    task = asyncio.create_task(ticker())
    try:
        out = await analyze_route.analyze_pdp(AnalyzeRequest(records=RETRY))
    finally:
        finished = True
        await task
    assert out == "done"
    assert ticks >= 10


def test_health():
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_analyze_dispatches_on_mode():
    r = client.post("/api/v1/analyze", json={
        "mode": "dual-correlation",
        "primary": {"kind": "regex", "value": "pdp context reject"},
        "secondary": {"kind": "exact", "value": DETACH},
        "records": RETRY,
    })
    assert r.status_code == 200
    body = r.json()
    assert body["mode"] == "dual-correlation"
    assert body["cycle_counts"] == [2, 2]
    assert body["constancy"] == {"status": "ok", "value": 2, "values": [2]}
    assert body["violations"] == []


def test_pdp_route_reports_unterminated_cycle():
    records = RETRY + [{"timestamp": "10:01:00.000000", "message": REJECT}]
    r = client.post("/api/v1/analyze/pdp", json={
        "secondary": {"kind": "word", "value": "detach"},
        "records": records,
    })
    assert r.status_code == 200
    violations = r.json()["violations"]
    assert [v["kind"] for v in violations] == ["unterminated"]
    assert violations[0]["count"] == 1


def test_insufficient_occurrences_is_not_an_error():
    r = client.post("/api/v1/analyze/deltas", json={"target_message": "Z", "records": RETRY})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "insufficient_occurrences"
    assert body["occurrences"] == 0


def test_request_validation():
    r = client.post("/api/v1/analyze/deltas", json={"target_message": "X", "intra_factor": -1})
    assert r.status_code == 422
    r = client.post("/api/v1/analyze/cycles", json={"records": RETRY})
    assert r.status_code == 422


def test_logs_parse_and_analyze():
    r = client.post("/api/v1/logs/parse", json={"text": LOG_TEXT})
    assert r.status_code == 200
    assert r.json()["record_count"] == 3
    assert r.json()["source"] == "agilent"

    r = client.post("/api/v1/logs/analyze", json={"text": LOG_TEXT, "target_message": "Attach Request"})
    assert r.status_code == 200
    assert r.json()["delta_lines"][0]["delta"] == "00:00:02.000000"


def test_logs_messages_catalog():
    r = client.post("/api/v1/logs/messages", json={"text": LOG_TEXT})
    assert r.status_code == 200
    body = r.json()
    assert body["records_parsed"] == 3
    assert body["messages"][0]["message"] == "Attach Request"
    assert body["messages"][0]["mean"] == "00:00:02.000000"


def test_logs_delta_csv():
    r = client.post("/api/v1/logs/deltas.csv", json={"text": LOG_TEXT})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    lines = r.text.strip().splitlines()
    assert lines[0] == "Message,PrevTimestamp,CurrTimestamp,Delta(HH:MM:SS.ffffff),DeltaMicros"
    assert lines[1] == '"Attach Request","23:59:59.000000","00:00:01.000000",00:00:02.000000,2000000'


def test_logs_unreadable_text():
    r = client.post("/api/v1/logs/parse", json={"text": "only one line"})
    assert r.status_code == 400


def test_log_analysis_rejects_bad_configuration_before_reading_text():
    r = client.post("/api/v1/logs/analyze", json={"text": "only one line", "mode": "dual-correlation"})
    assert r.status_code == 422
    r = client.post("/api/v1/logs/analyze", json={"text": "only one line", "target_message": "X"})
    assert r.status_code == 400
