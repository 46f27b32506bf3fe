#!/usr/bin/env python3

"""
Smoke test runner for the cyclescope API.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import argparse
import asyncio
import json
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List

import httpx

BASE_URL = os.getenv("CYCLESCOPE_BASE_URL", "http://localhost:4323/api/v1")
HEADERS = {"Content-Type": "application/json"}

REJECT = "SM - Activate PDP Context Reject"
DETACH = "GMM - Detach Request"


def rec(ts: str, msg: str) -> Dict[str, str]:
    return {"timestamp": ts, "message": msg}


RETRY_RECORDS: List[Dict[str, str]] = [
    rec("10:00:00.000000", REJECT),
    rec("10:00:05.000000", REJECT),
    rec("10:00:10.000000", REJECT),
    rec("10:00:11.000000", DETACH),
    rec("10:00:40.000000", REJECT),
    rec("10:00:45.000000", REJECT),
    rec("10:00:50.000000", REJECT),
    rec("10:00:51.000000", DETACH),
]

AGILENT_LOG = "\n".join([
    "Timestamp,Message",
    "23:59:59.000000,Attach Request",
    "00:00:01.000000,Attach Request",
    "00:00:02.5,Attach Request",
])


@dataclass(frozen=True)
class Case:
    label: str
    method: str
    path: str
    body: Dict[str, Any] = field(default_factory=dict)
    expect: int = 200
    section: str = ""


CASES: list[Case] = [
    Case("health", "GET", "/health", section="Health"),

    # ── Single target ─────────────────────────────────────
    Case("scenario A", "POST", "/analyze/deltas", section="Single target", body={
        "target_message": "X",
        "records": [rec("10:00:00.000000", "X"), rec("10:00:05.000000", "X"), rec("10:00:09.500000", "X")],
    }),
    Case("too few occurrences", "POST", "/analyze/deltas", section="Single target", body={
        "target_message": "X", "records": [rec("10:00:00", "X")],
    }),
    Case("missing target", "POST", "/analyze/deltas", section="Single target",
         body={"records": []}, expect=422),

    # ── Dual correlation ──────────────────────────────────
    Case("closer by exact message", "POST", "/analyze/cycles", section="Dual correlation", body={
        "primary": {"kind": "regex", "value": "pdp context reject"},
        "secondary": {"kind": "exact", "value": DETACH},
        "records": RETRY_RECORDS,
    }),
    Case("marker only", "POST", "/analyze/cycles", section="Dual correlation", body={
        "primary": {"kind": "regex", "value": "pdp context reject"},
        "secondary": {"kind": "exact", "value": DETACH},
        "secondary_is_closer": False,
        "records": RETRY_RECORDS,
    }),
    Case("pdp preset with detach", "POST", "/analyze/pdp", section="Dual correlation", body={
        "secondary": {"kind": "word", "value": "detach"},
        "records": RETRY_RECORDS,
    }),
    Case("no primary", "POST", "/analyze/cycles", section="Dual correlation",
         body={"records": RETRY_RECORDS}, expect=422),

    # ── Logs ──────────────────────────────────────────────
    Case("parse agilent", "POST", "/logs/parse", section="Logs", body={"text": AGILENT_LOG}),
    Case("message catalog", "POST", "/logs/messages", section="Logs", body={"text": AGILENT_LOG}),
    Case("delta csv", "POST", "/logs/deltas.csv", section="Logs", body={"text": AGILENT_LOG}),
    Case("analyze log text", "POST", "/logs/analyze", section="Logs", body={
        "text": AGILENT_LOG, "target_message": "Attach Request",
    }),
    Case("missing columns", "POST", "/logs/parse", section="Logs",
         body={"text": "a,b\n1,2"}, expect=400),
]


async def run_case(client: httpx.AsyncClient, case: Case) -> tuple[bool, str, Any]:
    try:
        if case.method == "GET":
            r = await client.get(case.path)
        else:
            r = await client.request(case.method, case.path, json=case.body or None)
    except httpx.TransportError as exc:
        return False, f"transport error: {exc}", None

    try:
        body: Any = r.json()
    except ValueError:
        body = r.text
    if r.status_code == case.expect:
        return True, "", body
    return False, f"{r.status_code} {r.reason_phrase}: {body}", body


async def main():
    parser = argparse.ArgumentParser(description="Run API smoke cases")
    parser.add_argument("--section", help="only run cases from this section name")
    parser.add_argument("--label", help="only run the case with this exact label")
    args = parser.parse_args()
    selected = [
        c for c in CASES
        if (not args.section or c.section == args.section)
        and (not args.label or c.label == args.label)
    ]
    if not selected:
        print("no matching cases (check --section or --label)")
        sys.exit(1)

    passed = failed = 0
    current_section = ""

    async with httpx.AsyncClient(base_url=BASE_URL, headers=HEADERS, timeout=30) as client:
        for case in selected:
            if case.section != current_section:
                current_section = case.section
                print(f"\n── {current_section} {'─' * max(0, 44 - len(current_section))}")

            ok, detail, body = await run_case(client, case)
            pretty = json.dumps(body, indent=2) if isinstance(body, (dict, list)) else str(body)

            if ok:
                passed += 1
                print(f"  ✓ PASS  {case.method} {case.path}  {case.label}")
            else:
                failed += 1
                print(f"  ✗ FAIL  {case.method} {case.path}  {case.label} (expected {case.expect})")
                if detail:
                    print(f"         {detail}")
            print(f"         response:\n{pretty}")

    total = passed + failed
    print(f"\n{'━' * 43}")
    print(f"  Results: {passed} passed / {failed} failed / {total} total")
    print(f"{'━' * 43}\n")
    sys.exit(0 if failed == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())
