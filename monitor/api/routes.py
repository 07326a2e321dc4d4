from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from monitor.collectors import RemoteCollector
from monitor.config import settings
from monitor.errors import MalformedRequestBody, MonitorError
from monitor.ssh.auth import build_connection_request

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot_response(snapshot) -> JSONResponse:
    return JSONResponse(snapshot.model_dump(mode="json", by_alias=True))


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


# ── REST routes ───────────────────────────────────────


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    return {"status": "running", "app": request.app.title}


@router.get("/api/system")
async def get_local_system(request: Request) -> JSONResponse:
    collector = request.app.state.local_collector
    try:
        snapshot = await collector.poll()
    except Exception:
        logger.exception("System info error")
        return _error_response("Failed to fetch system info", 500)
    return _snapshot_response(snapshot)


@router.post("/api/remote-system")
async def get_remote_system(request: Request) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        raise MalformedRequestBody() from None
    if not isinstance(body, dict):
        raise MalformedRequestBody()

    connection = build_connection_request(body)
    collector = RemoteCollector.from_settings(connection, settings)

    try:
        snapshot = await collector.poll()
    except MonitorError:
        raise
    except Exception as exc:
        logger.exception("Remote system error for %s", connection.host)
        return _error_response(str(exc) or "Failed to fetch remote system info", 500)
    return _snapshot_response(snapshot)
