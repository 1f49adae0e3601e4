from __future__ import annotations

import logging
import time

import httpx

from bwload.config import LoadTestConfig
from bwload.metrics import TRANSPORT_FAILURE_STATUS, ErrorType, RequestOutcome, ServerStats

log = logging.getLogger(__name__)

BANDWIDTH_PATH = "/api/bandwidth"
STATS_PATH = "/api/stats"
RESET_PATH = "/api/reset"
HEALTH_PATH = "/api/health"
HEALTH_TIMEOUT_SEC = 5.0


async def send_request(
    client: httpx.AsyncClient,
    request_id: int,
    config: LoadTestConfig,
) -> RequestOutcome:
    target = config.target
    start_mono = time.perf_counter()
    try:
        resp = await client.get(
            target.url(BANDWIDTH_PATH),
            params={"size": config.payload_size},
            headers=target.headers,
            timeout=target.timeout_sec,
        )
    except httpx.TimeoutException:
        err = ErrorType.TIMEOUT
    except httpx.ConnectError:
        err = ErrorType.CONNECT
    except httpx.ReadError:
        err = ErrorType.READ
    except httpx.HTTPError:
        err = ErrorType.OTHER
    else:
        outcome = RequestOutcome(
            request_id=request_id,
            status_code=resp.status_code,
            transfer_time_sec=resp.elapsed.total_seconds(),
            bytes_received=len(resp.content),
            wall_time_sec=time.perf_counter() - start_mono,
            started_mono=start_mono,
        )
        log.debug(
            "Request %d: HTTP %d, %.4fs, %d bytes",
            request_id,
            outcome.status_code,
            outcome.transfer_time_sec,
            outcome.bytes_received,
        )
        return outcome

    outcome = RequestOutcome(
        request_id=request_id,
        status_code=TRANSPORT_FAILURE_STATUS,
        transfer_time_sec=0.0,
        bytes_received=0,
        wall_time_sec=time.perf_counter() - start_mono,
        started_mono=start_mono,
        error_type=err,
    )
    log.debug("Request %d: transport failure (%s)", request_id, err.value)
    return outcome


async def check_health(client: httpx.AsyncClient, base_url: str) -> bool:
    url = base_url.rstrip("/") + HEALTH_PATH
    try:
        resp = await client.get(url, timeout=HEALTH_TIMEOUT_SEC)
        return resp.is_success and resp.json().get("status") == "healthy"
    except (httpx.HTTPError, ValueError) as exc:
        log.debug("Health check against %s failed: %s", url, exc)
        return False


async def reset_server_stats(client: httpx.AsyncClient, base_url: str) -> bool:
    url = base_url.rstrip("/") + RESET_PATH
    try:
        resp = await client.post(url)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        log.warning("Could not reset server stats (continuing anyway): %s", exc)
        return False
    return True


async def fetch_server_stats(client: httpx.AsyncClient, base_url: str) -> ServerStats | None:
    url = base_url.rstrip("/") + STATS_PATH
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        body = resp.json()
        return ServerStats(
            total_requests=int(body["total_requests"]),
            total_bytes=int(body["total_bytes"]),
            uptime_seconds=float(body["uptime_seconds"]),
            requests_per_second=float(body["requests_per_second"]),
            bytes_per_second=float(body["bytes_per_second"]),
            mb_per_second=float(body["mb_per_second"]),
        )
    except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
        log.warning("Could not fetch server stats: %s", exc)
        return None
