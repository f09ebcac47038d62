from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever sys.stderr is at emit time."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(*, verbose: bool = False) -> None:
    """
    Configure the `indexforge` logger with a single stderr handler.

    Third-party loggers (httpx, httpcore) are left alone, so only their
    warnings reach the console through logging's last-resort handler.
    Safe to call more than once: the previous handler is replaced.
    """
    logger = logging.getLogger("indexforge")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
