from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from monitor.api.routes import router
from monitor.collectors import LocalCollector
from monitor.config import settings
from monitor.errors import MonitorError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    Path(settings.ssh_key_dir).mkdir(mode=0o700, parents=True, exist_ok=True)
    app.state.local_collector = LocalCollector(disk_path=settings.disk_path)
    logger.info("Monitor backend started, key dir %s", settings.ssh_key_dir)

    yield

    # ── shutdown ──────────────────────────────────────
    logger.info("Monitor backend shut down")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MonitorError)
async def monitor_error_handler(request: Request, exc: MonitorError) -> JSONResponse:
    """Render classified errors as ``{"error": message}``."""
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


app.include_router(router)
