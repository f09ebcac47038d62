from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator


class TaskError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class NetworkError(TaskError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class StorageError(TaskError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class Outcome:
    error: TaskError | None = None

    @classmethod
    def success(cls) -> Outcome:
        return cls()

    @classmethod
    def failure(cls, error: TaskError) -> Outcome:
        return cls(error)

    @property
    def ok(self) -> bool:
        return self.error is None


Task = Callable[[], Outcome]


@dataclass(frozen=True)
class TaskMessages:
    before: str
    error: str
    success: str | None = None


@dataclass(frozen=True)
class ExecutionReport:
    outcomes: tuple[Outcome, ...] = ()

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __getitem__(self, index: int) -> Outcome:
        return self.outcomes[index]

    @property
    def failed(self) -> bool:
        return any(not outcome.ok for outcome in self.outcomes)

    def errors(self) -> list[tuple[int, TaskError]]:
        return [
            (pos, outcome.error)
            for pos, outcome in enumerate(self.outcomes)
            if outcome.error is not None
        ]
