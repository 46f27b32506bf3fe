"""
Entry point for the cyclescope Analysis Engine API server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI

from api.routes import router
from config import CYCLESCOPE_VERSION, settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


app = FastAPI(
    title="cyclescope Analysis Engine",
    description="Message interval and retry-cycle analysis over telecom test-equipment logs.",
    version=CYCLESCOPE_VERSION,
)

app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    log.info("starting cyclescope on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
