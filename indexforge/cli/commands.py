from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from indexforge.config import ConfigError, IndexConfig, default_config, load_config
from indexforge.formatter import Printer
from indexforge.index import (
    FileStorage,
    HttpTransport,
    index_path_from_url,
    make_fetch_task,
)
from indexforge.logging_setup import setup_logging
from indexforge.task import ExecutionReport, TaskMessages, execute_sequence, wrap_task

from .args import build_parser

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "indexforge.yml"

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_NETWORK = 4
EXIT_INTERRUPTED = 130


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        setup_logging(verbose=args.verbose)

        match args.command:
            case "update-index":
                return cmd_update_index(args)
            case "list":
                return cmd_list(args)
            case _:
                return EXIT_CONFIG

    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG

    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


def main() -> None:
    raise SystemExit(run_cli())


def cmd_update_index(args: argparse.Namespace) -> int:
    config = _load(args)
    timeout = args.timeout if args.timeout is not None else config.timeout_s
    if timeout <= 0:
        raise ConfigError(f"--timeout must be positive, got {timeout}")

    printer = Printer()
    logger.info("Updating package index")

    with HttpTransport(timeout_seconds=timeout) as transport:
        storage = FileStorage()
        tasks = []
        ignore_warnings = []
        for url in config:
            messages = TaskMessages(
                before=f"Downloading package index from {url}",
                error="Can't download index file, check your network connection",
            )
            task = make_fetch_task(
                url, index_dir=config.index_dir, transport=transport, storage=storage
            )
            tasks.append(wrap_task(task, messages, printer))
            # The wrapper already prints each failure with its URL.
            ignore_warnings.append(True)

        report = execute_sequence(tasks, ignore_warnings, printer=printer)

    return _report_result(report, printer)


def cmd_list(args: argparse.Namespace) -> int:
    config = _load(args)
    for url in config:
        print(f"{url} -> {index_path_from_url(url, config.index_dir)}")
    return EXIT_OK


def _load(args: argparse.Namespace) -> IndexConfig:
    if args.config is not None:
        return load_config(args.config)

    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_config(DEFAULT_CONFIG_FILE)

    logger.debug("No %s found, using defaults", DEFAULT_CONFIG_FILE)
    return default_config()


def _report_result(report: ExecutionReport, printer: Printer) -> int:
    if report.failed:
        printer.error(
            f"{len(report.errors())} of {len(report)} package indexes could not be downloaded"
        )
        return EXIT_NETWORK

    printer.info("Download completed.")
    return EXIT_OK
