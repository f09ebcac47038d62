from .runner import execute_sequence
from .types import (
    ExecutionReport,
    NetworkError,
    Outcome,
    StorageError,
    Task,
    TaskError,
    TaskMessages,
)
from .wrapper import WrappedTask, wrap_task

__all__ = [
    "execute_sequence",
    "wrap_task",
    "WrappedTask",
    "ExecutionReport",
    "Outcome",
    "Task",
    "TaskMessages",
    "TaskError",
    "NetworkError",
    "StorageError",
]
