import logging
import time
from typing import Sequence

from indexforge.formatter import Printer

from .types import ExecutionReport, Outcome, Task

logger = logging.getLogger(__name__)


def execute_sequence(
    tasks: Sequence[Task],
    ignore_warnings: Sequence[bool],
    *,
    printer: Printer | None = None,
) -> ExecutionReport:
    if len(tasks) != len(ignore_warnings):
        raise ValueError(
            f"Got {len(tasks)} tasks but {len(ignore_warnings)} ignore-warning flags"
        )

    outcomes: list[Outcome] = []

    for pos, task in enumerate(tasks):
        start = time.monotonic()
        outcome = task()
        duration = time.monotonic() - start
        outcomes.append(outcome)

        if outcome.ok:
            logger.debug("Task %d succeeded in %.3fs", pos, duration)
            continue

        logger.debug("Task %d failed in %.3fs: %s", pos, duration, outcome.error)
        # Outcome is recorded either way; the flag only silences the warning.
        if printer is not None and not ignore_warnings[pos]:
            printer.warning(
                f"Warning: task {pos + 1} of {len(tasks)} failed: {outcome.error}"
            )

    return ExecutionReport(tuple(outcomes))
