from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import httpx
import structlog

from reqgate.domain.exceptions import ConcurrencyError
from reqgate.infrastructure.composition import build_request_client
from reqgate.infrastructure.config import AppConfig, load_config
from reqgate.infrastructure.http.request_client import RequestClient
from reqgate.infrastructure.logging.setup import configure_logging

log = structlog.get_logger(__name__)

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reqgate",
        description="Fetch URLs concurrently through a bounded request queue.",
    )

    parser.add_argument("urls", nargs="+", metavar="URL", help="URLs to request.")
    parser.add_argument(
        "--method",
        default="GET",
        type=str.upper,
        choices=_METHODS,
        help="HTTP method used for every URL.",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Prefix for relative URLs (overrides config).",
    )

    # Controller limits
    parser.add_argument("--max-concurrent", default=None, type=int)
    parser.add_argument("--max-queue", default=None, type=int)
    parser.add_argument("--timeout-ms", default=None, type=int)

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    flags = {
        "http_base_url": args.base_url,
        "max_concurrent": args.max_concurrent,
        "max_queue": args.max_queue,
        "timeout_ms": args.timeout_ms,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }
    return {key: value for key, value in flags.items() if value is not None}


async def _fetch_one(client: RequestClient, method: str, url: str) -> dict[str, Any]:
    outcome: dict[str, Any] = {"url": url, "ok": False}
    try:
        response = await client.request(method, url)
    except ConcurrencyError as exc:
        outcome["error"] = str(exc)
    except httpx.HTTPStatusError as exc:
        outcome["status"] = exc.response.status_code
        outcome["error"] = "http_status"
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        outcome["error"] = type(exc).__name__
    else:
        outcome["ok"] = True
        outcome["status"] = response.status_code

    if outcome["ok"]:
        log.info("request_succeeded", url=url, status=outcome["status"])
    else:
        log.warning("request_failed", url=url, error=outcome["error"])
    return outcome


async def fetch_all(
    config: AppConfig,
    urls: Sequence[str],
    *,
    method: str = "GET",
) -> dict[str, Any]:
    """Issue every URL at once through one governed client.

    Returns per-URL outcomes in input order plus the final controller
    snapshot.
    """
    async with build_request_client(config) as client:
        results = await asyncio.gather(
            *(_fetch_one(client, method, url) for url in urls)
        )
        return {"results": list(results), "controller": client.snapshot()}


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint. Returns the exit code (0 when every request succeeded).
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )
    configure_logging(config)

    summary = asyncio.run(fetch_all(config, args.urls, method=args.method))
    print(json.dumps(summary, indent=2))

    return 0 if all(r["ok"] for r in summary["results"]) else 1


def main() -> None:
    sys.exit(start())


if __name__ == "__main__":
    main()
