from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="indexforge")

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (default: ./indexforge.yml if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # update-index
    update = subparsers.add_parser(
        "update-index", help="Download every configured package index"
    )
    update.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (overrides config)",
    )

    # list
    subparsers.add_parser("list", help="List index URLs and their local paths")

    return parser
