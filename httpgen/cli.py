"""
Command-line entry point.

    httpgen --url http://localhost:8080 -n 100 --maxconcurrent 10
"""

import argparse
import sys
from typing import List, Optional

from .config import RunConfig, parse_headers
from .core.exceptions import ConfigError, SinkOpenError
from .core.models import HTTP_METHODS
from .easy_use import format_summary, run_load


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="httpgen",
        description="Send N HTTP requests with bounded concurrency and report latency statistics.",
    )
    ap.add_argument("--url", default="http://example.com", help="URL to send requests to")
    ap.add_argument("-n", dest="requests", type=int, default=10, help="Number of requests")
    ap.add_argument("--method", default="GET",
                    help=f"HTTP method ({', '.join(HTTP_METHODS)})")
    ap.add_argument("--body", default="", help="Request body (for POST, PUT, PATCH method)")
    ap.add_argument("--timeout", type=float, default=10, help="Request timeout in seconds")
    ap.add_argument("--headers", default="",
                    help="Custom headers (format: key1=value1,key2=value2)")
    ap.add_argument("--interval", type=int, default=0,
                    help="Interval between requests in milliseconds")
    ap.add_argument("--output", default="results.json", help="Output file to save results")
    ap.add_argument("--errorlog", default="errors.log", help="File to log errors")
    ap.add_argument("--maxconcurrent", type=int, default=5,
                    help="Maximum number of concurrent requests")
    ap.add_argument("--quiet", action="store_true", help="Do not display a progress bar")
    return ap


def config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        url=args.url,
        requests=args.requests,
        method=args.method,
        body=args.body,
        timeout=args.timeout,
        headers=parse_headers(args.headers),
        interval_ms=args.interval,
        output=args.output,
        error_log=args.errorlog,
        max_concurrent=args.maxconcurrent,
        show_progress=not args.quiet,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        snapshot = run_load(config)
    except (ConfigError, SinkOpenError) as e:
        print(e, file=sys.stderr)
        return 1

    print(format_summary(snapshot))
    return 0


if __name__ == "__main__":
    sys.exit(main())
