from __future__ import annotations

import argparse
import logging

import uvicorn

from bwload.server import DEFAULT_HOST, DEFAULT_PORT, create_app

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

log = logging.getLogger("bwload.server")


def main() -> None:
    parser = argparse.ArgumentParser(description="Bandwidth Load Test Server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)
    log.info("Endpoints:")
    log.info("  GET  /api/bandwidth?size=<bytes>  - Bandwidth test (default: 1KB)")
    log.info("  GET  /api/stats                   - Get server statistics")
    log.info("  POST /api/reset                   - Reset statistics")
    log.info("  GET  /api/health                  - Health check")
    log.info("Server running on %s:%d", args.host, args.port)

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
