"""
CLI entry point for cercalia-client.

Sends one raw request and prints the "cercalia" root node as JSON.

Usage:
    python -m cercalia_client --cmd cand --param ctn=Barcelona --param ctryc=ESP
    python -m cercalia_client --cmd prox --param mocs=gdd --debug --log-level DEBUG
"""

import argparse
import json
import logging
import sys

import structlog

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        renderer = structlog.processors.JSONRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="iso")
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            timestamper,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries the JSON result
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def parse_param(text: str) -> tuple[str, str]:
    """Parse a key=value pair."""
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    key, value = text.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError(f"empty parameter name in {text!r}")
    return key, value


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Send a raw request to the Cercalia API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Geocode a city (API key from CERCALIA_API_KEY)
  python -m cercalia_client --cmd cand --param ctn=Girona --param ctryc=ESP

  # Use another endpoint and a single attempt
  python -m cercalia_client --cmd cand --base-url https://example.com/json --max-attempts 1

  # Show composed URLs and raw bodies
  python -m cercalia_client --cmd cand --param ctn=Girona --debug --log-level DEBUG
        """,
    )

    parser.add_argument(
        "--cmd",
        type=str,
        help="Cercalia command (the 'cmd' query parameter)",
    )

    parser.add_argument(
        "--param",
        type=parse_param,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra query parameter (repeatable)",
    )

    parser.add_argument(
        "--operation",
        type=str,
        default="cli",
        help="Operation label used in logs (default: cli)",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        help="Override the endpoint for this request",
    )

    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Attempts before giving up (default: from environment or 3)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log composed URLs and response bodies",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser.parse_args(argv)


def run(args) -> int:
    """Execute the request described by `args` and return the exit code."""
    from dataclasses import replace

    from .config import CercaliaConfig
    from .core import CercaliaClient, CercaliaError

    logger = structlog.get_logger(__name__)

    config = CercaliaConfig.from_environment()
    overrides = {}
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.debug:
        overrides["debug"] = True
    if overrides:
        config = replace(config, **overrides)

    params = CercaliaClient.new_params(args.cmd)
    for key, value in args.param:
        CercaliaClient.add_if_present(params, key, value)

    logger.info("sending_request", operation=args.operation, params=sorted(params))

    with CercaliaClient(config) as client:
        try:
            node = client.request(params, args.operation, args.base_url)
        except CercaliaError as e:
            if e.is_no_results:
                logger.info("no_results", operation=args.operation)
                print("No results")
                return 0
            raise

    print(json.dumps(node, indent=2, ensure_ascii=False))
    return 0


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"cercalia-client {__version__}")
        sys.exit(0)

    # Setup logging
    setup_logging(args.log_level, args.json_logs)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.error("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
