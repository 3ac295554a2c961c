"""
CLI entry point for logs-downloader.

Usage:
    python -m logs_downloader --auth-email me@example.com --auth-key KEY --url URL
    python -m logs_downloader --config downloader.yml --interval 5m
    python -m logs_downloader --start 1500000000 --end 1500003600 --dir /var/logs
"""

import argparse
import logging
import sys
from typing import Optional

import structlog

from .core.errors import CheckpointError, ConfigError, DownloaderError

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


def parse_args(argv: Optional[list[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="logs-downloader",
        description="Download time-bounded log batches into local files, resuming from a checkpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resume from <dir>/checkpoint up to now
  python -m logs_downloader --auth-email me@example.com --auth-key KEY \\
      --url https://api.cloudflare.com/client/v4/zones/<zone>/logs/requests --dir /var/logs

  # Explicit range in 5 minute files
  python -m logs_downloader --config downloader.yml --start 1500000000 --end 1500003600 --interval 5m

Credentials and URL may also come from LOGS_AUTH_EMAIL, LOGS_AUTH_KEY and LOGS_URL.
        """,
    )

    parser.add_argument(
        "--auth-email",
        dest="auth_email",
        help="Authorization email (X-Auth-Email header)",
    )

    parser.add_argument(
        "--auth-key",
        dest="auth_key",
        help="Authorization key (X-Auth-Key header)",
    )

    parser.add_argument(
        "--url",
        help="Logs API URL, queried with start and end parameters",
    )

    parser.add_argument(
        "--start",
        type=int,
        help="Unix timestamp to start downloading from (default: read from <dir>/checkpoint)",
    )

    parser.add_argument(
        "--max-age",
        dest="max_age",
        help="Maximum age of start, e.g. 72h (default: 72h)",
    )

    parser.add_argument(
        "--end",
        type=int,
        help="Unix timestamp to stop downloading at, exclusive (default: now)",
    )

    parser.add_argument(
        "--interval",
        help="Time span of each log file, e.g. 1m, 5m, 1h (default: 1m)",
    )

    parser.add_argument(
        "--dir",
        help="Existing directory to download logs into (default: system temp dir)",
    )

    parser.add_argument(
        "--align",
        action="store_const",
        const=True,
        default=None,
        help="Truncate the first start down to an interval boundary",
    )

    parser.add_argument(
        "--no-metadata",
        dest="metadata",
        action="store_const",
        const=False,
        default=None,
        help="Do not write the .json metadata sidecar files",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: 60)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to a YAML config file",
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


def cli_options(args) -> dict:
    """Extract downloader options from parsed arguments."""
    return {
        "auth_email": args.auth_email,
        "auth_key": args.auth_key,
        "url": args.url,
        "start": args.start,
        "max_age": args.max_age,
        "end": args.end,
        "interval": args.interval,
        "dir": args.dir,
        "align": args.align,
        "metadata": args.metadata,
        "timeout": args.timeout,
    }


def run(args, transport=None) -> int:
    """
    Validate configuration and run the download.

    Returns:
        Process exit status
    """
    from .config.loader import load_options
    from .config.settings import build_config
    from .downloader import Downloader

    logger = structlog.get_logger(__name__)

    try:
        options = load_options(cli_options(args), config_path=args.config)
        config = build_config(options)
    except (ConfigError, CheckpointError) as e:
        logger.error("invalid_configuration", error=str(e), path=getattr(e, "path", None))
        return EXIT_CONFIG

    logger.info("downloading_to", directory=config.directory)

    try:
        Downloader(config, transport=transport).run()
    except DownloaderError as e:
        logger.error(
            "fatal_error",
            error=str(e),
            error_type=type(e).__name__,
            url=getattr(e, "url", None),
            path=getattr(e, "path", None),
        )
        return EXIT_FAILURE

    return EXIT_OK


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"logs-downloader {__version__}")
        sys.exit(EXIT_OK)

    # Setup logging
    setup_logging(args.log_level, args.json_logs)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.exception("fatal_error", error=str(e))
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
