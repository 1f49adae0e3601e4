from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from bwload.config import LoadTestConfig, RunMode
from bwload.loadgen.client import fetch_server_stats, reset_server_stats, send_request
from bwload.metrics import AggregateStats, RequestOutcome, ServerStats, aggregate

log = logging.getLogger(__name__)

ADMISSION_PAUSE_SEC = 0.01
PROGRESS_EVERY = 10


@dataclass(frozen=True, slots=True)
class RunResult:
    outcomes: list[RequestOutcome]
    started_mono: float
    elapsed_sec: float
    deadline_mono: float | None = None


@dataclass(frozen=True, slots=True)
class LoadTestReport:
    config: LoadTestConfig
    stats: AggregateStats
    server_stats: ServerStats | None


ProgressCallback = Callable[[int, int], Awaitable[None]]


def open_client(
    config: LoadTestConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    limits = httpx.Limits(
        max_connections=config.concurrency,
        max_keepalive_connections=config.concurrency,
    )
    return httpx.AsyncClient(
        transport=transport,
        limits=limits,
        timeout=config.target.timeout_sec,
    )


async def run_load_test(
    config: LoadTestConfig,
    progress: ProgressCallback | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    reset: bool = True,
) -> LoadTestReport:
    base_url = config.target.base_url
    async with open_client(config, transport) as client:
        if reset:
            log.info("Resetting server statistics")
            await reset_server_stats(client, base_url)
        result = await _execute_load(client, config, progress)
        stats = aggregate(result.outcomes, result.elapsed_sec)
        server_stats = await fetch_server_stats(client, base_url)
    return LoadTestReport(config=config, stats=stats, server_stats=server_stats)


async def run_load(
    config: LoadTestConfig,
    progress: ProgressCallback | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RunResult:
    async with open_client(config, transport) as client:
        return await _execute_load(client, config, progress)


async def _execute_load(
    client: httpx.AsyncClient,
    config: LoadTestConfig,
    progress: ProgressCallback | None,
) -> RunResult:
    outcomes: list[RequestOutcome] = []
    lock = asyncio.Lock()
    # Admission order; the head is the oldest outstanding task.
    pending: deque[asyncio.Task[None]] = deque()
    started_mono = time.perf_counter()
    deadline = None
    if config.mode is RunMode.DURATION:
        deadline = started_mono + config.duration_sec

    async def run_one(request_id: int) -> None:
        outcome = await send_request(client, request_id, config)
        async with lock:
            outcomes.append(outcome)
            completed = len(outcomes)
        if config.mode is RunMode.COUNT and completed % PROGRESS_EVERY == 0:
            await _report_progress(completed, config.total_requests, progress)

    def spawn(request_id: int) -> None:
        pending.append(asyncio.create_task(run_one(request_id)))

    if deadline is None:
        log.info(
            "Running %d requests with %d concurrent...",
            config.total_requests,
            config.concurrency,
        )
        await _admit_count(config, pending, spawn)
    else:
        log.info("Running test for %s seconds...", config.duration_sec)
        await _admit_until(deadline, config, pending, spawn)

    log.info("Waiting for remaining requests to complete...")
    while pending:
        await pending.popleft()

    elapsed = time.perf_counter() - started_mono
    return RunResult(
        outcomes=outcomes,
        started_mono=started_mono,
        elapsed_sec=elapsed,
        deadline_mono=deadline,
    )


async def _admit_count(
    config: LoadTestConfig,
    pending: deque[asyncio.Task[None]],
    spawn: Callable[[int], None],
) -> None:
    for request_id in range(config.total_requests):
        await _wait_for_slot(pending, config.concurrency)
        spawn(request_id)


async def _admit_until(
    deadline: float,
    config: LoadTestConfig,
    pending: deque[asyncio.Task[None]],
    spawn: Callable[[int], None],
) -> None:
    request_id = 0
    while time.perf_counter() < deadline:
        for _ in range(config.concurrency):
            await _wait_for_slot(pending, config.concurrency)
            if time.perf_counter() >= deadline:
                return
            spawn(request_id)
            request_id += 1
        await asyncio.sleep(ADMISSION_PAUSE_SEC)


async def _wait_for_slot(pending: deque[asyncio.Task[None]], concurrency: int) -> None:
    # Waits on the oldest task, not the first to finish: a slow head keeps
    # later slots idle even when newer tasks are done.
    while len(pending) >= concurrency:
        await pending.popleft()


async def _report_progress(
    completed: int,
    total: int | None,
    progress: ProgressCallback | None,
) -> None:
    if not total:
        return
    log.info("Progress: %d/%d requests (%d%%)", completed, total, completed * 100 // total)
    if progress:
        await progress(completed, total)
