import argparse
import json
import logging
import os
import shlex
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .client import API_ADDR_ENV, DEFAULT_API_ADDR, NodeClient
from .core import DEFAULT_MODULES, Collector, collect_all, load_collectors

LOG_FORMAT = '%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%dT%H:%M:%S%z'


def setup_logging(debug=False, level=None):
    """Configure logging with the specified debug level."""
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, level or "INFO")

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root_logger.addHandler(console)

    # Get the main logger
    log = logging.getLogger("siad-exporter")
    log.setLevel(log_level)

    return log


def add_api_arguments(parser: argparse.ArgumentParser) -> None:
    """Node API flags shared by the CLI and the daemon."""
    parser.add_argument(
        "--modules",
        nargs="+",
        default=list(DEFAULT_MODULES),
        help=f"Node modules to collect (default: {' '.join(DEFAULT_MODULES)})."
    )
    parser.add_argument(
        "--api-addr",
        default=None,
        help=f"siad API address (default: ${API_ADDR_ENV} or {DEFAULT_API_ADDR})."
    )
    parser.add_argument(
        "--api-password",
        default=None,
        help="siad API password (default: $SIA_API_PASSWORD)."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: $SIA_API_TIMEOUT or 5)."
    )


def filter_modules(requested: List[str], log: logging.Logger) -> List[str]:
    """Drop unknown module names with a warning."""
    available = load_collectors()
    modules = []
    for name in requested:
        if name not in available:
            log.warning(f"Unknown module '{name}', skipping")
            log.debug(f"Available modules: {sorted(available)}")
            continue
        modules.append(name)
    return modules


def build_parser() -> argparse.ArgumentParser:
    """Build the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="siad-exporter",
        description="Read a siad node's API and report its metrics."
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # 'collect' command
    collect_parser = subparsers.add_parser(
        "collect",
        help="Run one refresh cycle and output the metrics snapshot as JSON."
    )
    add_api_arguments(collect_parser)
    collect_parser.add_argument(
        "--schema",
        help="Path to JSON Schema file (defaults to bundled schema).",
        default=None
    )
    collect_parser.add_argument(
        "--output", "-o",
        help="Output file path (default: stdout).",
        type=Path,
        default=None
    )
    collect_parser.add_argument(
        "--no-validate",
        action="store_false",
        dest="validate",
        help="Disable schema validation of the output."
    )
    collect_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output with detailed error information."
    )

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    # Allow a single string of arguments (e.g., when VS Code passes one promptString)
    if args is None and len(sys.argv) == 2 and isinstance(sys.argv[1], str):
        args = shlex.split(sys.argv[1])
    elif isinstance(args, list) and len(args) == 1 and isinstance(args[0], str):
        args = shlex.split(args[0])

    parser = build_parser()
    parsed_args = parser.parse_args(args)

    log = setup_logging(debug=parsed_args.debug)
    log.debug("CLI main() started")
    if parsed_args.cmd == "collect":
        start_time = datetime.now(timezone.utc)
        log.debug(f"Parsed arguments: {vars(parsed_args)}")

        try:
            modules = filter_modules(parsed_args.modules, log)
            if not modules:
                log.error("No valid modules specified")
                return 1

            client = NodeClient(
                addr=parsed_args.api_addr,
                password=parsed_args.api_password,
                timeout=parsed_args.timeout,
            )
            log.debug(f"Using node API at {client.addr}")
            log.debug(f"Validation is {'enabled' if parsed_args.validate else 'disabled'}")

            collector = Collector(client, modules=modules)
            result = collect_all(
                collector,
                schema_path=parsed_args.schema,
                validate=parsed_args.validate,
                debug=parsed_args.debug
            )

            output = json.dumps(result, indent=2)

            if parsed_args.output:
                log.debug(f"Writing results to {parsed_args.output}")
                try:
                    parsed_args.output.write_text(output)
                    log.info(f"Results written to {parsed_args.output}")
                except OSError as e:
                    log.error(f"Error writing to {parsed_args.output}: {str(e)}", exc_info=parsed_args.debug)
                    return 1
            else:
                print(output)

            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            log.debug(f"Collection completed in {duration:.2f} seconds")

            return 0

        except Exception as e:
            log.error(f"Error: {str(e)}", exc_info=parsed_args.debug)
            if parsed_args.debug:
                log.debug(f"Current working directory: {os.getcwd()}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
