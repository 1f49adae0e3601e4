from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

import httpx

from bwload.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_PAYLOAD_SIZE,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT_SEC,
    DEFAULT_TOTAL_REQUESTS,
    LoadTestConfig,
    build_config,
)
from bwload.errors import ConfigurationError
from bwload.loadgen.client import check_health
from bwload.loadgen.runner import LoadTestReport, run_load_test
from bwload.report import UNDEFINED, write_report

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOG_DATEFMT = "%H:%M:%S"

log = logging.getLogger("bwload")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bandwidth Load Testing Client",
        epilog=(
            "examples: bwload -c 50 -n 1000 -z 4096 | "
            "bwload -c 20 -d 30 -z 8192 -v | bwload -c 10 -n 100 -o results.txt"
        ),
    )
    parser.add_argument("-s", "--server", default=DEFAULT_SERVER_URL, help="Server URL")
    parser.add_argument(
        "-c", "--concurrent", default=str(DEFAULT_CONCURRENCY), help="Number of concurrent requests"
    )
    parser.add_argument(
        "-n", "--requests", default=str(DEFAULT_TOTAL_REQUESTS), help="Total number of requests"
    )
    parser.add_argument("-z", "--size", default=str(DEFAULT_PAYLOAD_SIZE), help="Payload size in bytes")
    parser.add_argument("-d", "--duration", default=None, help="Test duration in seconds (overrides -n)")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output results to file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--timeout", default=str(DEFAULT_TIMEOUT_SEC), help="Per-request timeout in seconds")
    parser.add_argument("--no-reset", action="store_true", help="Keep server statistics from earlier runs")
    return parser


def _format_bytes(value: float) -> str:
    for unit in ("", "K", "M", "G", "T"):
        if abs(value) < 1024 or unit == "T":
            return f"{value:.0f}" if unit == "" else f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}T"


def _seconds(value: float | None) -> str:
    if value is None:
        return UNDEFINED
    return f"{value:.4f}s"


def _print_summary(report: LoadTestReport) -> None:
    stats = report.stats
    print()
    print("Load Test Results")
    print("=" * 50)
    print("Request Statistics:")
    print(f"   Total Requests:      {stats.total}")
    print(f"   Successful:          {stats.successful}")
    print(f"   Failed:              {stats.failed}")
    print(f"   Success Rate:        {stats.success_rate:.1f}%")
    print()
    print("Timing Statistics:")
    print(f"   Test Duration:       {stats.elapsed_sec:.2f}s")
    print(f"   Requests/sec:        {stats.requests_per_sec:.2f}")
    print(f"   Avg Response Time:   {stats.avg_time:.4f}s")
    print(f"   Min Response Time:   {_seconds(stats.min_time)}")
    print(f"   Max Response Time:   {_seconds(stats.max_time)}")
    print()
    print("Bandwidth Statistics:")
    print(f"   Total Data Transfer: {_format_bytes(stats.total_bytes)}")
    print(f"   Bytes/sec:           {_format_bytes(stats.bytes_per_sec)}")
    print(f"   Bandwidth (Mbps):    {stats.mbps:.2f}")
    server = report.server_stats
    if server is not None:
        print()
        print("Server Statistics:")
        print(f"   Server Total Requests: {server.total_requests}")
        print(f"   Server Total Bytes:    {_format_bytes(server.total_bytes)}")
        print(f"   Server Bandwidth:      {server.mb_per_second:.2f} Mbps")


async def _server_healthy(config: LoadTestConfig) -> bool:
    log.info("Checking server health at %s", config.target.base_url)
    async with httpx.AsyncClient() as client:
        return await check_health(client, config.target.base_url)


async def _run(config: LoadTestConfig, output: Path | None, reset: bool) -> int:
    if not await _server_healthy(config):
        log.error("Server health check failed; make sure the server is running on %s", config.target.base_url)
        return 1
    log.info("Server is healthy")
    log.info("Starting load test: %s", dict(config.to_metadata()))
    report = await run_load_test(config, reset=reset)
    _print_summary(report)
    if output is not None:
        write_report(output, config, report.stats)
        log.info("Results saved to %s", output)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    if not args.verbose:
        # httpx logs every request at INFO.
        logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        config = build_config(
            server_url=args.server,
            concurrency=args.concurrent,
            total_requests=args.requests,
            payload_size=args.size,
            duration_sec=args.duration,
            timeout_sec=args.timeout,
        )
    except ConfigurationError as exc:
        log.error("Error: %s", exc)
        raise SystemExit(1) from None

    if asyncio.run(_run(config, args.output, reset=not args.no_reset)):
        raise SystemExit(1)
    log.info("Load test completed successfully")


if __name__ == "__main__":
    main()
