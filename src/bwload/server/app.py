"""
FastAPI application serving synthetic payloads and throughput counters.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import Response

from bwload import __version__
from bwload.server.counters import ServerCounters
from bwload.server.payload import generate, parse_size

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["bandwidth"])

# Readiness probe answers any method.
HEALTH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_counters(request: Request) -> ServerCounters:
    return request.app.state.counters


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _serialize(envelope: dict[str, Any]) -> bytes:
    return json.dumps(envelope).encode("utf-8")


@router.get("/bandwidth")
def bandwidth(
    size: str | None = Query(default=None),
    counters: ServerCounters = Depends(get_counters),
) -> Response:
    """
    Return a JSON envelope carrying ``size`` bytes of generated data.

    Counters grow by one request and by the length of the serialized body.
    """
    requested = parse_size(size)
    data = generate(requested).decode("ascii")
    envelope = {
        "message": f"Bandwidth test payload ({len(data)} bytes)",
        "timestamp": _now().isoformat(),
        "size": len(data),
        "data": data,
    }
    try:
        body = _serialize(envelope)
    except (TypeError, ValueError):
        log.exception("bandwidth: failed to serialize %d byte payload", requested)
        raise HTTPException(status_code=500, detail="Internal server error")

    counters.increment(len(body))
    return Response(
        content=body,
        media_type="application/json",
        headers={
            "Cache-Control": "no-cache",
            "X-Content-Size": str(requested),
        },
    )


@router.get("/stats")
def stats(counters: ServerCounters = Depends(get_counters)) -> dict[str, Any]:
    snapshot = counters.snapshot()
    return {
        "total_requests": snapshot.total_requests,
        "total_bytes": snapshot.total_bytes,
        "uptime_seconds": snapshot.uptime_sec,
        "requests_per_second": snapshot.requests_per_sec,
        "bytes_per_second": snapshot.bytes_per_sec,
        "mb_per_second": snapshot.megabits_per_sec,
    }


@router.post("/reset")
def reset(counters: ServerCounters = Depends(get_counters)) -> dict[str, str]:
    counters.reset_all()
    log.info("Statistics reset")
    return {
        "message": "Statistics reset successfully",
        "time": _now().isoformat(timespec="seconds"),
    }


@router.api_route("/health", methods=HEALTH_METHODS)
def health(counters: ServerCounters = Depends(get_counters)) -> dict[str, Any]:
    return {
        "status": "healthy",
        "uptime": counters.uptime(),
        "version": __version__,
    }


def create_app(counters: ServerCounters | None = None) -> FastAPI:
    app = FastAPI(title="Bandwidth Load Test Server", version=__version__)
    app.state.counters = counters if counters is not None else ServerCounters()
    app.include_router(router)
    return app
