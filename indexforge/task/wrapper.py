from dataclasses import dataclass

from indexforge.formatter import Printer

from .types import Outcome, Task, TaskMessages


@dataclass(frozen=True)
class WrappedTask:
    inner: Task
    messages: TaskMessages
    printer: Printer

    def __call__(self) -> Outcome:
        self.printer.info(self.messages.before)
        outcome = self.inner()
        if outcome.error is not None:
            self.printer.error(self.messages.error, outcome.error)
        elif self.messages.success is not None:
            self.printer.info(self.messages.success)
        return outcome


def wrap_task(task: Task, messages: TaskMessages, printer: Printer) -> WrappedTask:
    return WrappedTask(task, messages, printer)
